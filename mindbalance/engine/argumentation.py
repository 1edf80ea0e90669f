# mindbalance/engine/argumentation.py
"""
Steelman / strawman claim rewriting.

These are string templates and regex rewrites, not argument evaluation.
Everything here is deterministic: canned responses are picked by hashing the
objection text, never at random.
"""
from __future__ import annotations

import hashlib
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

Premise = Dict[str, Any]
Objection = Dict[str, Any]

DISTORTIONS = (
    "exaggeration",
    "oversimplification",
    "misattribution",
    "context_stripping",
    "straw_person_minor",
    "quote_mining",
    "false_dichotomy",
)

FALLACIES = (
    "strawman",
    "ad_hominem",
    "slippery_slope",
    "hasty_generalization",
    "false_dichotomy",
    "appeal_to_ignorance",
    "appeal_to_emotion",
    "circular_reasoning",
)

CANNED_RESPONSES = (
    "This objection overlooks the nuanced nature of the claim",
    "The premises provide strong support that addresses this concern",
    "While valid, this objection does not undermine the core argument",
    "This is addressed by considering the broader context and evidence",
)

STRENGTHEN = (
    (re.compile(r"\bmay\b"), "likely"),
    (re.compile(r"\bmight\b"), "probably"),
    (re.compile(r"\bpossibly\b"), "reasonably"),
)

DISTORT = {
    "exaggeration": (
        (re.compile(r"\bsome\b"), "all"),
        (re.compile(r"\boften\b"), "always"),
        (re.compile(r"\bsometimes\b"), "constantly"),
    ),
    "oversimplification": (
        (re.compile(r"\bcomplex\b"), "simple"),
        (re.compile(r"\bnuanced\b"), "straightforward"),
    ),
    "context_stripping": (
        (re.compile(r"\[.*?\]"), ""),
        (re.compile(r"\(.*?\)"), ""),
    ),
}

GENERIC_WEAK_PREMISES = (
    {"text": "This claim is obviously true without evidence", "support": "Appeal to common sense"},
    {"text": "Everyone knows this is the case", "support": "Appeal to popularity"},
)


@dataclass(frozen=True)
class ArgumentWeights:
    premise_weight: float = 0.5
    objection_weight: float = 0.3
    risk_penalty: float = 0.3


@dataclass
class SteelmanOut:
    improved_claim: str
    premises: List[Premise] = field(default_factory=list)
    addressed_objections: List[Objection] = field(default_factory=list)
    residual_risks: List[str] = field(default_factory=list)
    confidence: int = 0
    notes: str = ""


@dataclass
class StrawmanOut:
    distorted_claim: str
    weak_premises: List[Premise] = field(default_factory=list)
    identified_distortions: List[str] = field(default_factory=list)
    identified_fallacies: List[str] = field(default_factory=list)
    easy_refutation: str = ""
    improvement_hint: str = ""
    confidence: int = 0


@dataclass
class PipelineOut:
    original_claim: str
    distorted_claim: str
    steelmanned_claim: str
    applied_distortions: List[str] = field(default_factory=list)
    premises: List[Premise] = field(default_factory=list)
    confidence: int = 0
    methodology: str = ""


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _quantize(score: float) -> int:
    return max(0, min(5, _round_half_up(score)))


def _unique(items: Sequence[str]) -> List[str]:
    seen: List[str] = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen


def _has_word(text: str, word: str) -> bool:
    return re.search(rf"\b{re.escape(word)}\b", text) is not None


def canned_response(objection_text: str) -> str:
    digest = hashlib.sha256(objection_text.encode("utf-8")).hexdigest()
    return CANNED_RESPONSES[int(digest, 16) % len(CANNED_RESPONSES)]


# -------------------------
# STEELMAN
# -------------------------
def improve_claim(claim: str, assumptions: Sequence[str], context: str) -> str:
    improved = claim
    if assumptions:
        improved += f" (Assuming: {', '.join(assumptions)})"
    if context:
        improved += f" [Context: {context}]"
    for pattern, replacement in STRENGTHEN:
        improved = pattern.sub(replacement, improved)
    return improved


def steelman(
    opponent_claim: str,
    charitable_assumptions: Sequence[str] = (),
    strongest_premises: Sequence[Premise] = (),
    anticipated_objections: Sequence[Objection] = (),
    context: str = "",
    weights: ArgumentWeights | None = None,
    improve: bool = True,
) -> SteelmanOut:
    """
    Most charitable reconstruction of a claim. With improve=False the claim
    text is returned verbatim and only premises, objections and risks are built.

    Confidence (0..5) = premises * premise_weight (capped at 2)
                      + answered objections * objection_weight (capped at 1.5)
                      - residual risks * risk_penalty
    """
    weights = weights or ArgumentWeights()
    improved = improve_claim(opponent_claim, charitable_assumptions, context) if improve else opponent_claim

    premises: List[Premise] = [dict(p) for p in strongest_premises]
    if not premises:
        premises.append({
            "text": "The claim is based on reasonable assumptions about the domain",
            "support": "Default charitable interpretation",
        })
    if context:
        premises.append({
            "text": f"The context ({context}) supports the validity of this claim",
            "support": "Contextual analysis",
        })

    objections: List[Objection] = []
    for obj in anticipated_objections:
        answered = dict(obj)
        if not answered.get("response"):
            answered["response"] = canned_response(str(answered.get("text", "")))
        objections.append(answered)

    risks: List[str] = []
    if len(premises) < 3:
        risks.append("Limited premise support may weaken the argument")
    if any(o.get("severity") == "high" for o in objections):
        risks.append("High-severity objections remain partially unaddressed")
    if "always" in improved or "never" in improved:
        risks.append("Absolute claims are vulnerable to counterexamples")

    answered_count = sum(1 for o in objections if o.get("response"))
    raw = (
        min(len(premises) * weights.premise_weight, 2.0)
        + min(answered_count * weights.objection_weight, 1.5)
        - len(risks) * weights.risk_penalty
    )

    notes: List[str] = []
    if improved != opponent_claim:
        notes.append("Claim was strengthened and clarified")
    if charitable_assumptions:
        notes.append(f"Added {len(charitable_assumptions)} charitable assumptions")
    notes.append("This represents the strongest good-faith interpretation")

    return SteelmanOut(
        improved_claim=improved,
        premises=premises,
        addressed_objections=objections,
        residual_risks=risks,
        confidence=_quantize(raw),
        notes=". ".join(notes) + ".",
    )


# -------------------------
# STRAWMAN
# -------------------------
def distort_claim(claim: str, distortions: Sequence[str]) -> str:
    distorted = claim
    for name in distortions:
        for pattern, replacement in DISTORT.get(name, ()):
            distorted = pattern.sub(replacement, distorted)
        if name == "false_dichotomy":
            distorted = f"Either {distorted} or complete opposite"
        elif name == "quote_mining":
            distorted = f'"{distorted}" - taken out of context'
    return distorted


def detect_distortions(original: str, distorted: str, provided: Sequence[str]) -> List[str]:
    found = list(provided)
    if _has_word(distorted, "all") and not _has_word(original, "all"):
        found.append("exaggeration")
    if "Either" in distorted or "or complete" in distorted:
        found.append("false_dichotomy")
    if len(original) > len(distorted) * 1.5:
        found.append("context_stripping")
    return _unique(found)


def detect_fallacies(distorted: str, provided: Sequence[str]) -> List[str]:
    found = list(provided)
    if "strawman" in distorted or "distorted" in distorted:
        found.append("strawman")
    if "Either" in distorted or _has_word(distorted, "or"):
        found.append("false_dichotomy")
    if _has_word(distorted, "all") or _has_word(distorted, "every"):
        found.append("hasty_generalization")
    return _unique(found)


def refutation(distortions: Sequence[str], fallacies: Sequence[str]) -> str:
    lines = ["The distorted claim misrepresents the original"]
    if distortions:
        lines.append(f"This is a clear case of {' and '.join(distortions)}")
    if fallacies:
        lines.append(f"The argument commits {' and '.join(fallacies)} fallacies")
    lines.append("The original claim should be evaluated on its own merits")
    return ". ".join(lines) + "."


def improvement_hint(distortions: Sequence[str]) -> str:
    hints = [
        "To steelman this argument:",
        "1. Restore the original nuanced language",
        "2. Add back necessary context",
        "3. Address the strongest version of the claim",
    ]
    if "exaggeration" in distortions:
        hints.append("4. Use precise, measured language")
    return " ".join(hints)


def strawman(
    original_claim: str,
    distorted_claim: Optional[str] = None,
    distortions: Sequence[str] = (),
    weak_premises: Sequence[Premise] = (),
    fallacies: Sequence[str] = (),
    request_refutation: bool = True,
) -> StrawmanOut:
    distorted = distorted_claim or distort_claim(original_claim, distortions)
    found_distortions = detect_distortions(original_claim, distorted, distortions)
    found_fallacies = detect_fallacies(distorted, fallacies)

    premises: List[Premise] = [dict(p) for p in weak_premises]
    premises.extend(dict(p) for p in GENERIC_WEAK_PREMISES)

    raw = len(found_distortions) * 0.5 + len(found_fallacies) * 0.3 + len(premises) * 0.2

    return StrawmanOut(
        distorted_claim=distorted,
        weak_premises=premises,
        identified_distortions=found_distortions,
        identified_fallacies=found_fallacies,
        easy_refutation=refutation(found_distortions, found_fallacies) if request_refutation else "",
        improvement_hint=improvement_hint(found_distortions),
        confidence=_quantize(raw),
    )


# -------------------------
# PIPELINE
# -------------------------
def strawman_to_steelman(
    original_claim: str,
    distortions: Sequence[str] = (),
    context: str = "",
    weights: ArgumentWeights | None = None,
) -> PipelineOut:
    straw = strawman(original_claim, distortions=distortions, request_refutation=False)
    steel = steelman(straw.distorted_claim, context=context, weights=weights)
    return PipelineOut(
        original_claim=original_claim,
        distorted_claim=straw.distorted_claim,
        steelmanned_claim=steel.improved_claim,
        applied_distortions=straw.identified_distortions,
        premises=steel.premises,
        confidence=min(straw.confidence, steel.confidence),
        methodology=(
            f"Applied distortions: {', '.join(straw.identified_distortions) or 'none'}. "
            "Then strengthened using charitable assumptions and premise enhancement."
        ),
    )
