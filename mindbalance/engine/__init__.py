# mindbalance/engine/__init__.py
from .errors import (
    ScoringInputError,
    InvalidWeight,
    SingularPhase,
    PhaseOutOfRange,
    InvalidClamp,
    InvalidThreshold,
    UnknownScoringRule,
)
from .scorer import DecisionInput, DecisionOutput, DecisionScorer, ScorerDefaults, score
from .argumentation import ArgumentWeights, steelman, strawman, strawman_to_steelman
