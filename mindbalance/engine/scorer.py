# mindbalance/engine/scorer.py
"""
Angel/demon decision scorer.

Two advisor signals are derived from phase angles:

- angel = cos(theta) * cosine          (stable, conservative influence)
- demon = clamp(tan(phi)) * tangent    (volatile, urgent influence)

and combined into a probability of a positive decision with an abstain
option. The combination uses a single convention, the contrastive z-blend:

    raw = (angel - demon) / (2 * max(mean(|angel|, |demon|), EPS))   normalize
    raw = angel - demon                                              otherwise

The unit-vector rescale used by some older blend variants is not supported;
the two are not numerically equivalent near the decision boundary.

Pure and stateless: defaults are passed in, nothing is read from config and
nothing is logged here.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Literal, Optional, Tuple

from . import scoring_rules
from .errors import (
    InvalidClamp,
    InvalidThreshold,
    InvalidWeight,
    PhaseOutOfRange,
    SingularPhase,
    UnknownScoringRule,
)
from .rationale import build_rationale

Mode = Literal["angel", "demon", "blend", "probabilistic"]
Decision = Literal["positive", "negative", "abstain"]

MODES = ("angel", "demon", "blend", "probabilistic")
EPS = 1e-9
BLEND_CONVENTION = "contrastive-z"

DEFAULT_ABSTAIN_THRESHOLD = 0.70
DEFAULT_TAN_CLAMP = 3.0
DEFAULT_SCORING_RULES: Tuple[str, ...] = ("brier", "log")


@dataclass(frozen=True)
class ScorerDefaults:
    """Resolved fallbacks for the optional fields of a DecisionInput."""

    abstain_threshold: float = DEFAULT_ABSTAIN_THRESHOLD
    tan_clamp: float = DEFAULT_TAN_CLAMP
    normalize: bool = True
    scoring_rules: Tuple[str, ...] = DEFAULT_SCORING_RULES
    abstention_score: float = 0.0

    def __post_init__(self):
        _check_clamp(self.tan_clamp)
        _check_threshold(self.abstain_threshold)
        _check_abstention_score(self.abstention_score)
        _check_rules(self.scoring_rules)


@dataclass(frozen=True)
class DecisionInput:
    topic: str
    theta: float
    phi: float
    cosine: float
    tangent: float
    mode: Mode
    tags: Tuple[str, ...] = ()
    tan_clamp: Optional[float] = None
    normalize: Optional[bool] = None
    scoring_rules: Optional[FrozenSet[str]] = None
    abstain_threshold: Optional[float] = None
    abstention_score: Optional[float] = None


@dataclass(frozen=True)
class DecisionOutput:
    topic: str
    mode: Mode
    angel_signal: float
    demon_signal: float
    score: float
    p_positive: float
    p_negative: float
    decision: Decision
    confidence: float
    rationale: str
    scores: Optional[Dict[str, float]] = None
    metadata: Dict[str, object] = field(default_factory=dict)


# -------------------------
# VALIDATION
# -------------------------
def _check_clamp(tan_clamp: float) -> None:
    if not math.isfinite(tan_clamp) or tan_clamp <= 0:
        raise InvalidClamp("tanClamp", tan_clamp, "finite value > 0")


def _check_threshold(threshold: float) -> None:
    if not math.isfinite(threshold) or not 0.0 <= threshold <= 1.0:
        raise InvalidThreshold("abstainThreshold", threshold, "value in [0, 1]")


def _check_abstention_score(value: float) -> None:
    if not math.isfinite(value):
        raise InvalidWeight("abstentionScore", value, "finite value")


def _check_rules(rules) -> None:
    for name in sorted(rules):
        if name not in scoring_rules.SCORING_RULES:
            raise UnknownScoringRule(
                "scoringRules", name, f"one of {', '.join(scoring_rules.RULE_NAMES)}"
            )


def validate(inp: DecisionInput, tan_clamp: float) -> None:
    """
    All-or-nothing precondition check. The first violation wins, in the order
    cosine, tangent, theta, phi, tanClamp, demon product, abstainThreshold,
    abstentionScore, scoringRules.
    """
    if not math.isfinite(inp.cosine) or abs(inp.cosine) > 1:
        raise InvalidWeight("cosine", inp.cosine, "value in [-1, 1]")
    if not math.isfinite(inp.tangent):
        raise InvalidWeight("tangent", inp.tangent, "finite value")
    if not math.isfinite(inp.theta) or abs(inp.theta) > math.pi:
        raise PhaseOutOfRange("theta", inp.theta, "value in [-pi, pi]")
    if not math.isfinite(inp.phi) or abs(inp.phi) >= math.pi / 2:
        raise SingularPhase("phi", inp.phi, "value in (-pi/2, pi/2)")
    if inp.tan_clamp is not None:
        _check_clamp(inp.tan_clamp)
    # phi and tanClamp are valid here, so the clamped product is the real demon signal
    if not math.isfinite(clamp_magnitude(math.tan(inp.phi), tan_clamp) * inp.tangent):
        raise InvalidWeight("tangent", inp.tangent, "finite demon signal after clamping")
    if inp.abstain_threshold is not None:
        _check_threshold(inp.abstain_threshold)
    if inp.abstention_score is not None:
        _check_abstention_score(inp.abstention_score)
    if inp.scoring_rules is not None:
        _check_rules(inp.scoring_rules)


# -------------------------
# NUMERICS
# -------------------------
def clamp_magnitude(x: float, limit: float) -> float:
    """Bound |x| by limit, sign preserved; zero stays zero."""
    if x == 0:
        return 0.0
    return math.copysign(min(abs(x), limit), x)


def logistic(z: float) -> float:
    # split form so exp() never overflows for large |z|
    if z >= 0:
        return 1.0 / (1.0 + math.exp(-z))
    e = math.exp(z)
    return e / (1.0 + e)


def contrastive_blend(angel: float, demon: float, normalize: bool) -> float:
    if not normalize:
        return angel - demon
    scale = max((abs(angel) + abs(demon)) / 2.0, EPS)
    return (angel - demon) / (2.0 * scale)


def mode_score(mode: str, angel: float, demon: float, normalize: bool) -> float:
    """Single-advisor modes use their raw signal; two-signal modes blend."""
    if mode == "angel":
        return angel
    if mode == "demon":
        return demon
    return contrastive_blend(angel, demon, normalize)


def decide(p_positive: float, threshold: float) -> Tuple[Decision, float]:
    confidence = max(p_positive, 1.0 - p_positive)
    if confidence < threshold:
        return "abstain", confidence
    return ("positive" if p_positive >= 0.5 else "negative"), confidence


# -------------------------
# SCORER
# -------------------------
class DecisionScorer:
    def __init__(self, defaults: ScorerDefaults | None = None):
        self.defaults = defaults or ScorerDefaults()

    def score(self, inp: DecisionInput) -> DecisionOutput:
        if inp.mode not in MODES:
            raise ValueError(f"Unknown mode: {inp.mode!r}")

        d = self.defaults
        tan_clamp = d.tan_clamp if inp.tan_clamp is None else inp.tan_clamp
        validate(inp, tan_clamp)

        normalize = d.normalize if inp.normalize is None else inp.normalize
        threshold = d.abstain_threshold if inp.abstain_threshold is None else inp.abstain_threshold
        rules = d.scoring_rules if inp.scoring_rules is None else inp.scoring_rules
        abstention_score = d.abstention_score if inp.abstention_score is None else inp.abstention_score

        angel = math.cos(inp.theta) * inp.cosine
        demon = clamp_magnitude(math.tan(inp.phi), tan_clamp) * inp.tangent

        score = mode_score(inp.mode, angel, demon, normalize)
        p_positive = logistic(score)
        p_negative = 1.0 - p_positive
        decision, confidence = decide(p_positive, threshold)

        scores = None
        if rules:
            scores = scoring_rules.evaluate(rules, p_positive, decision, abstention_score)

        rationale = build_rationale(
            topic=inp.topic,
            tags=inp.tags,
            mode=inp.mode,
            angel_signal=angel,
            demon_signal=demon,
            score=score,
            p_positive=p_positive,
            p_negative=p_negative,
            confidence=confidence,
            threshold=threshold,
            decision=decision,
            theta=inp.theta,
            phi=inp.phi,
            tan_clamp=tan_clamp,
            normalize=normalize,
        )

        return DecisionOutput(
            topic=inp.topic,
            mode=inp.mode,
            angel_signal=angel,
            demon_signal=demon,
            score=score,
            p_positive=p_positive,
            p_negative=p_negative,
            decision=decision,
            confidence=confidence,
            rationale=rationale,
            scores=scores,
            metadata={
                "theta": inp.theta,
                "phi": inp.phi,
                "cosine": inp.cosine,
                "tangent": inp.tangent,
                "tanClamp": tan_clamp,
                "normalized": normalize,
                "abstainThreshold": threshold,
                "abstentionScore": abstention_score,
                "blendConvention": BLEND_CONVENTION,
            },
        )


def score(inp: DecisionInput, defaults: ScorerDefaults | None = None) -> DecisionOutput:
    return DecisionScorer(defaults).score(inp)
