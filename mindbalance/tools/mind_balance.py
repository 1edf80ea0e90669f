# mindbalance/tools/mind_balance.py
from __future__ import annotations

from typing import Any, Dict

from ..config import ConfigProvider
from ..engine.scorer import DecisionInput, DecisionOutput, DecisionScorer
from ..schemas import MindBalanceAdvice, MindBalanceArgs
from .base import Tool


def to_decision_input(args: MindBalanceArgs) -> DecisionInput:
    scoring = args.scoring
    rules = None
    if scoring is not None and scoring.rules is not None:
        rules = frozenset(scoring.rules)
    return DecisionInput(
        topic=args.topic,
        tags=tuple(args.tags),
        theta=args.theta,
        phi=args.phi,
        cosine=args.cosine,
        tangent=args.tangent,
        mode=args.mode,
        tan_clamp=args.tan_clamp,
        normalize=args.normalize,
        scoring_rules=rules,
        abstain_threshold=scoring.abstain_threshold if scoring else None,
        abstention_score=scoring.abstention_score if scoring else None,
    )


def to_advice(out: DecisionOutput) -> MindBalanceAdvice:
    return MindBalanceAdvice(
        topic=out.topic,
        mode=out.mode,
        angel_signal=out.angel_signal,
        demon_signal=out.demon_signal,
        score=out.score,
        p_positive=out.p_positive,
        p_negative=out.p_negative,
        decision=out.decision,
        confidence=out.confidence,
        scores=out.scores,
        rationale=out.rationale,
        metadata=out.metadata,
    )


class MindBalanceTool(Tool):
    name = "mind.balance"
    description = (
        "Balances 'angel (cosine)' and 'demon (tangent)' advisors; "
        "returns calibrated probabilities with abstention."
    )
    args_model = MindBalanceArgs

    def __init__(self, provider: ConfigProvider):
        self.provider = provider

    def execute(self, args: MindBalanceArgs) -> Dict[str, Any]:
        # defaults are snapshotted per call so a reload never lands mid-score
        scorer = DecisionScorer(self.provider.scorer_defaults())
        out = scorer.score(to_decision_input(args))
        return to_advice(out).model_dump(by_alias=True, exclude_none=True)
