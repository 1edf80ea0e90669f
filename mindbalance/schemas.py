# mindbalance/schemas.py
from __future__ import annotations

import math
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

AdvisoryMode = Literal["angel", "demon", "blend", "probabilistic"]
RuleName = Literal["brier", "log", "quadratic", "spherical"]
Severity = Literal["low", "medium", "high"]
Distortion = Literal[
    "exaggeration",
    "oversimplification",
    "misattribution",
    "context_stripping",
    "straw_person_minor",
    "quote_mining",
    "false_dichotomy",
]
Fallacy = Literal[
    "strawman",
    "ad_hominem",
    "slippery_slope",
    "hasty_generalization",
    "false_dichotomy",
    "appeal_to_ignorance",
    "appeal_to_emotion",
    "circular_reasoning",
]
NonEmpty = Annotated[str, StringConstraints(min_length=1)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StrictArgs(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


# -------------------------
# JSON-RPC ENVELOPE
# -------------------------
class JsonRpcRequest(BaseModel):
    jsonrpc: Literal["2.0"]
    method: str
    id: Optional[Union[str, int]] = None
    params: Optional[Union[Dict[str, Any], List[Any]]] = None


class ToolsCallParams(BaseModel):
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


# -------------------------
# MIND BALANCE
# -------------------------
class ScoringArgs(StrictArgs):
    rules: Optional[List[RuleName]] = None
    abstain_threshold: Optional[float] = None
    abstention_score: Optional[float] = None


class MindBalanceArgs(StrictArgs):
    """
    Presence and type contract only. Numeric domains for phi, cosine,
    tanClamp and abstainThreshold are checked by the scorer so its named
    errors reach the caller.
    """

    topic: NonEmpty = Field(..., description="Decision context, carried through unchanged")
    tags: List[str] = Field(default_factory=list, description="Labels echoed into the rationale")
    theta: float = Field(..., ge=-math.pi, le=math.pi, description="Angel phase angle (radians)")
    phi: float = Field(..., description="Demon phase angle (radians), strictly inside (-pi/2, pi/2)")
    cosine: float = Field(..., description="Angel weight in [-1, 1]")
    tangent: float = Field(..., description="Demon weight")
    mode: AdvisoryMode
    tan_clamp: Optional[float] = Field(None, description="Upper bound on |tan(phi)|, default 3.0")
    normalize: Optional[bool] = Field(None, description="Contrastive z-blend normalization, default true")
    scoring: Optional[ScoringArgs] = None


class MindBalanceAdvice(CamelModel):
    topic: str
    mode: AdvisoryMode
    angel_signal: float
    demon_signal: float
    score: float
    p_positive: float
    p_negative: float
    decision: Literal["positive", "negative", "abstain"]
    confidence: float
    scores: Optional[Dict[str, float]] = None
    rationale: str
    metadata: Dict[str, Any]


# -------------------------
# ARGUMENTATION
# -------------------------
class Evidence(StrictArgs):
    title: Optional[str] = None
    url: Optional[str] = None
    doi: Optional[str] = None
    note: Optional[str] = None


class Premise(StrictArgs):
    text: NonEmpty
    support: Optional[str] = None
    evidence: Optional[List[Evidence]] = None


class Objection(StrictArgs):
    text: str
    severity: Optional[Severity] = None
    response: Optional[str] = None
    evidence: Optional[List[Evidence]] = None


class SteelmanArgs(StrictArgs):
    opponent_claim: NonEmpty
    charitable_assumptions: List[str] = Field(default_factory=list)
    strongest_premises: List[Premise] = Field(default_factory=list)
    anticipated_objections: List[Objection] = Field(default_factory=list)
    context: str = ""
    request_improved_formulation: bool = True


class SteelmanResult(CamelModel):
    improved_claim: str
    premises: List[Premise]
    addressed_objections: List[Objection]
    residual_risks: List[str]
    confidence: int = Field(..., ge=0, le=5)
    notes: Optional[str] = None


class StrawmanArgs(StrictArgs):
    original_claim: NonEmpty
    distorted_claim: Optional[str] = None
    distortions: List[Distortion] = Field(default_factory=list)
    weak_premises: List[Premise] = Field(default_factory=list)
    fallacies: List[Fallacy] = Field(default_factory=list)
    context: str = ""
    request_refutation: bool = True


class StrawmanResult(CamelModel):
    distorted_claim: str
    weak_premises: List[Premise]
    identified_distortions: List[str]
    identified_fallacies: List[str]
    easy_refutation: str
    improvement_hint: str
    confidence: int = Field(..., ge=0, le=5)


class PipelineArgs(StrictArgs):
    original_claim: NonEmpty
    distortions: List[Distortion] = Field(default_factory=list)
    context: str = ""


class PipelineResult(CamelModel):
    original_claim: str
    distorted_claim: str
    steelmanned_claim: str
    applied_distortions: List[str]
    premises: List[Premise]
    confidence: int = Field(..., ge=0, le=5)
    methodology: str
