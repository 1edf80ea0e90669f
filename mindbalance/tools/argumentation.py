# mindbalance/tools/argumentation.py
from __future__ import annotations

from typing import Any, Dict, List

from ..config import ConfigProvider
from ..engine import argumentation
from ..schemas import (
    PipelineArgs,
    PipelineResult,
    StrawmanArgs,
    StrawmanResult,
    SteelmanArgs,
    SteelmanResult,
)
from .base import Tool


def _plain(items) -> List[Dict[str, Any]]:
    return [item.model_dump(exclude_none=True) for item in items]


def _dump(model) -> Dict[str, Any]:
    return model.model_dump(by_alias=True, exclude_none=True)


class SteelmanTool(Tool):
    name = "argument.steelman"
    description = (
        "Produce the strongest, most charitable version of an opponent's claim, "
        "including best premises and addressed objections."
    )
    args_model = SteelmanArgs

    def __init__(self, provider: ConfigProvider):
        self.provider = provider

    def execute(self, args: SteelmanArgs) -> Dict[str, Any]:
        out = argumentation.steelman(
            args.opponent_claim,
            charitable_assumptions=args.charitable_assumptions,
            strongest_premises=_plain(args.strongest_premises),
            anticipated_objections=_plain(args.anticipated_objections),
            context=args.context,
            weights=self.provider.argument_weights(),
            improve=args.request_improved_formulation,
        )
        return _dump(SteelmanResult(
            improved_claim=out.improved_claim,
            premises=out.premises,
            addressed_objections=out.addressed_objections,
            residual_risks=out.residual_risks,
            confidence=out.confidence,
            notes=out.notes,
        ))


class StrawmanTool(Tool):
    name = "argument.strawman"
    description = (
        "Analyze or synthesize a strawman: show distortions/fallacies, "
        "weak premises, and provide an easy refutation."
    )
    args_model = StrawmanArgs

    def execute(self, args: StrawmanArgs) -> Dict[str, Any]:
        out = argumentation.strawman(
            args.original_claim,
            distorted_claim=args.distorted_claim,
            distortions=args.distortions,
            weak_premises=_plain(args.weak_premises),
            fallacies=args.fallacies,
            request_refutation=args.request_refutation,
        )
        return _dump(StrawmanResult(
            distorted_claim=out.distorted_claim,
            weak_premises=out.weak_premises,
            identified_distortions=out.identified_distortions,
            identified_fallacies=out.identified_fallacies,
            easy_refutation=out.easy_refutation,
            improvement_hint=out.improvement_hint,
            confidence=out.confidence,
        ))


class StrawmanToSteelmanTool(Tool):
    name = "argument.pipeline.strawman-to-steelman"
    description = "Pipeline tool: apply distortions then strengthen the claim (strawman -> steelman)."
    args_model = PipelineArgs

    def __init__(self, provider: ConfigProvider):
        self.provider = provider

    def execute(self, args: PipelineArgs) -> Dict[str, Any]:
        out = argumentation.strawman_to_steelman(
            args.original_claim,
            distortions=args.distortions,
            context=args.context,
            weights=self.provider.argument_weights(),
        )
        return _dump(PipelineResult(
            original_claim=out.original_claim,
            distorted_claim=out.distorted_claim,
            steelmanned_claim=out.steelmanned_claim,
            applied_distortions=out.applied_distortions,
            premises=out.premises,
            confidence=out.confidence,
            methodology=out.methodology,
        ))
