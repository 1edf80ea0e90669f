# mindbalance/engine/rationale.py
from __future__ import annotations

from typing import Sequence


def strength_bucket(value: float) -> str:
    """Exact cutoffs, strictly greater-than."""
    magnitude = abs(value)
    if magnitude > 0.7:
        return "strong"
    if magnitude > 0.4:
        return "moderate"
    if magnitude > 0.1:
        return "mild"
    return "neutral"


def direction(value: float) -> str:
    return "positive" if value > 0 else "negative"


def _angel_sentence(signal: float, theta: float) -> str:
    bucket = strength_bucket(signal)
    side = direction(signal)
    if bucket == "strong":
        return (
            f"The angel advisor strongly advocates {side} action ({signal:.3f}), "
            f"stable and ethically grounded guidance from phase angle {theta:.2f}."
        )
    if bucket == "moderate":
        return (
            f"The angel advisor moderately favors {side} action ({signal:.3f}), "
            "a harmonizing influence from the cosine term."
        )
    if bucket == "mild":
        return f"The angel advisor shows a mild {side} lean ({signal:.3f})."
    return f"The angel advisor is neutral ({signal:.3f}) with no strong pull either way."


def _demon_sentence(signal: float, phi: float) -> str:
    bucket = strength_bucket(signal)
    side = direction(signal)
    if bucket == "strong":
        return (
            f"The demon advisor strongly urges {side} action ({signal:.3f}), "
            f"escalating urgency from phase {phi:.2f}."
        )
    if bucket == "moderate":
        return (
            f"The demon advisor pushes moderately toward {side} action ({signal:.3f}), "
            "a notable risky impulse."
        )
    if bucket == "mild":
        return f"The demon advisor shows mild {side} pressure ({signal:.3f})."
    return f"The demon advisor is subdued ({signal:.3f}) with little urgency."


def _mode_sentence(
    mode: str,
    score: float,
    p_positive: float,
    p_negative: float,
    confidence: float,
    threshold: float,
    decision: str,
) -> str:
    if mode == "probabilistic":
        head = (
            f"Probabilistic mode: p(positive)={p_positive:.3f}, "
            f"p(negative)={p_negative:.3f}, confidence={confidence:.3f}."
        )
    elif mode == "angel":
        head = f"Angel-only mode follows the stable advisor (score {score:.3f})."
    elif mode == "demon":
        head = f"Demon-only mode follows the urgent advisor (score {score:.3f})."
    else:
        head = (
            f"Blended contrastive score {score:.3f} gives "
            f"p(positive)={p_positive:.3f}, confidence={confidence:.3f}."
        )

    if decision == "abstain":
        tail = f"Abstaining: confidence {confidence:.3f} is below threshold {threshold:.3f}."
    else:
        tail = f"Decision: {decision} (confidence {confidence:.3f} >= threshold {threshold:.3f})."
    return f"{head} {tail}"


def build_rationale(
    *,
    topic: str,
    tags: Sequence[str],
    mode: str,
    angel_signal: float,
    demon_signal: float,
    score: float,
    p_positive: float,
    p_negative: float,
    confidence: float,
    threshold: float,
    decision: str,
    theta: float,
    phi: float,
    tan_clamp: float,
    normalize: bool,
) -> str:
    """
    Deterministic explanation text: same inputs give byte-identical output.
    """
    parts = [
        f'Mind Balance analysis for "{topic}":',
        _angel_sentence(angel_signal, theta),
        _demon_sentence(demon_signal, phi),
        _mode_sentence(mode, score, p_positive, p_negative, confidence, threshold, decision),
        (
            f"Technical: angel=cos({theta:.3f})*w -> {angel_signal:.3f}, "
            f"demon=clamp(tan({phi:.3f}), {tan_clamp:.3f})*w -> {demon_signal:.3f}, "
            f"normalize={'true' if normalize else 'false'}."
        ),
    ]
    if tags:
        parts.append(f"Contextual factors: {', '.join(tags)}.")
    parts.append(
        "This reflects the parametric advisory model: cosine provides stable "
        "grounding and tangent captures escalating urgency."
    )
    return " ".join(parts)
