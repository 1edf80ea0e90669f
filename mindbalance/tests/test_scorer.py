from __future__ import annotations

import math

import pytest

from mindbalance.engine import (
    DecisionInput,
    DecisionScorer,
    InvalidClamp,
    InvalidThreshold,
    InvalidWeight,
    PhaseOutOfRange,
    ScorerDefaults,
    ScoringInputError,
    SingularPhase,
    UnknownScoringRule,
    score,
)
from mindbalance.engine.rationale import direction, strength_bucket
from mindbalance.engine.scorer import clamp_magnitude, contrastive_blend, logistic


def _input(**overrides) -> DecisionInput:
    base = dict(
        topic="Ship the release",
        theta=math.pi / 4,
        phi=math.pi / 6,
        cosine=0.7,
        tangent=0.4,
        mode="probabilistic",
    )
    base.update(overrides)
    return DecisionInput(**base)


# -------------------------
# SCENARIOS
# -------------------------
def test_boundary_blend_signals():
    out = score(_input(mode="blend", normalize=True))
    assert out.angel_signal == pytest.approx(math.cos(math.pi / 4) * 0.7)
    assert out.angel_signal == pytest.approx(0.4950, abs=1e-4)
    # tan(pi/6) ~ 0.5774 is under the default clamp, so no clamping
    assert out.demon_signal == pytest.approx(math.tan(math.pi / 6) * 0.4)
    assert out.demon_signal == pytest.approx(0.2309, abs=1e-4)
    assert out.score == pytest.approx(0.3637, abs=1e-3)
    assert out.metadata["tanClamp"] == 3.0


def test_abstain_scenario():
    out = score(_input(theta=0.1, phi=0.1, cosine=0.1, tangent=0.1, abstain_threshold=0.8))
    assert out.decision == "abstain"
    assert out.confidence < 0.8
    assert out.confidence == pytest.approx(0.6936, abs=1e-3)


@pytest.mark.parametrize("threshold", [0.51, 0.7, 0.9, 1.0])
def test_weighted_tie_always_abstains_above_half(threshold):
    out = score(_input(theta=0.3, phi=0.2, cosine=0.0, tangent=0.0, abstain_threshold=threshold))
    assert out.angel_signal == 0
    assert out.demon_signal == 0
    assert out.score == 0
    assert out.p_positive == 0.5
    assert out.p_negative == 0.5
    assert out.confidence == 0.5
    assert out.decision == "abstain"


def test_weighted_tie_decides_positive_at_half_threshold():
    out = score(_input(cosine=0.0, tangent=0.0, abstain_threshold=0.5))
    assert out.decision == "positive"


def test_strong_positive_and_negative():
    pos = score(_input(theta=0.0, cosine=1.0, phi=-math.pi / 4, tangent=1.0))
    assert pos.score == pytest.approx(1.0)
    assert pos.p_positive == pytest.approx(logistic(1.0))
    assert pos.decision == "positive"

    neg = score(_input(theta=0.0, cosine=-1.0, phi=-math.pi / 4, tangent=-1.0))
    assert neg.score == pytest.approx(-1.0)
    assert neg.decision == "negative"
    assert neg.confidence == pytest.approx(pos.confidence)


# -------------------------
# VALIDATION
# -------------------------
def test_rejects_cosine_out_of_range():
    with pytest.raises(InvalidWeight) as exc:
        score(_input(cosine=1.5))
    assert exc.value.field == "cosine"
    assert exc.value.value == 1.5
    assert exc.value.code == "InvalidWeight"


def test_rejects_singular_phase():
    with pytest.raises(SingularPhase):
        score(_input(phi=math.pi / 2))
    with pytest.raises(SingularPhase):
        score(_input(phi=-math.pi / 2))


def test_rejects_negative_clamp():
    with pytest.raises(InvalidClamp):
        score(_input(tan_clamp=-1))
    with pytest.raises(InvalidClamp):
        score(_input(tan_clamp=0.0))


@pytest.mark.parametrize("threshold", [-0.01, 1.2, float("nan")])
def test_rejects_threshold_outside_unit_interval(threshold):
    with pytest.raises(InvalidThreshold):
        score(_input(abstain_threshold=threshold))


def test_rejects_theta_outside_domain():
    with pytest.raises(PhaseOutOfRange):
        score(_input(theta=4.0))


@pytest.mark.parametrize("tangent,phi", [(float("inf"), 0.5), (float("nan"), 0.5), (1e308, 1.5)])
def test_rejects_non_finite_demon_weight(tangent, phi):
    with pytest.raises(InvalidWeight) as exc:
        score(_input(tangent=tangent, phi=phi, tan_clamp=3.0))
    assert exc.value.field == "tangent"


def test_huge_tangent_is_fine_when_demon_signal_is_finite():
    out = score(_input(tangent=1e308, phi=0.0, tan_clamp=3.0))
    assert out.demon_signal == 0.0
    assert math.isfinite(out.score)


@pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
def test_rejects_non_finite_abstention_score(value):
    with pytest.raises(InvalidWeight) as exc:
        score(_input(cosine=0.0, tangent=0.0, abstention_score=value))
    assert exc.value.field == "abstentionScore"
    assert exc.value.to_dict()["value"] == repr(value)
    with pytest.raises(InvalidWeight):
        ScorerDefaults(abstention_score=value)


def test_rejects_unknown_scoring_rule():
    with pytest.raises(UnknownScoringRule):
        score(_input(scoring_rules=frozenset({"brier", "hinge"})))


def test_first_violation_is_reported():
    with pytest.raises(InvalidWeight):
        score(_input(cosine=2.0, phi=math.pi / 2, tan_clamp=-1))
    with pytest.raises(SingularPhase):
        score(_input(phi=math.pi / 2, tan_clamp=-1, abstain_threshold=3))


def test_errors_share_base_class():
    with pytest.raises(ScoringInputError) as exc:
        score(_input(tan_clamp=-1))
    data = exc.value.to_dict()
    assert data["error"] == "InvalidClamp"
    assert data["field"] == "tanClamp"
    assert "expected" in data


# -------------------------
# INVARIANTS
# -------------------------
GRID = [
    dict(theta=t, phi=p, cosine=c, tangent=g, mode=m, normalize=n)
    for t in (-math.pi, -1.0, 0.0, 0.5, math.pi)
    for p in (-1.5, -0.3, 0.0, 0.7, 1.55)
    for c in (-1.0, -0.2, 0.0, 0.6, 1.0)
    for g in (-5.0, 0.0, 0.3, 40.0)
    for m in ("angel", "demon", "blend", "probabilistic")
    for n in (True, False)
]


@pytest.mark.parametrize("params", GRID[::7])
def test_probabilities_sum_to_one_and_confidence_in_range(params):
    out = score(_input(**params))
    assert abs(out.p_positive + out.p_negative - 1.0) <= 1e-9
    assert 0.5 <= out.confidence <= 1.0
    assert out.decision in ("positive", "negative", "abstain")


@pytest.mark.parametrize("phi", [-1.5707, -1.4, -0.6, -1e-6, 0.0, 1e-6, 0.9, 1.4, 1.5707])
@pytest.mark.parametrize("limit", [0.1, 1.0, 3.0, 10.0])
def test_clamp_bounds_magnitude_and_keeps_sign(phi, limit):
    raw = math.tan(phi)
    clamped = clamp_magnitude(raw, limit)
    assert abs(clamped) <= limit
    if raw == 0:
        assert clamped == 0
    else:
        assert math.copysign(1.0, clamped) == math.copysign(1.0, raw)
        assert clamped != 0


def test_demon_signal_is_clamped_near_singularity():
    out = score(_input(phi=1.5707, tangent=1.0, tan_clamp=3.0))
    assert out.demon_signal == pytest.approx(3.0)


@pytest.mark.parametrize("params", GRID[::23])
def test_raising_threshold_never_reverses_abstention(params):
    decisions = [
        score(_input(abstain_threshold=t, **params)).decision
        for t in (0.0, 0.5, 0.55, 0.6, 0.7, 0.8, 0.9, 0.99, 1.0)
    ]
    if "abstain" in decisions:
        first = decisions.index("abstain")
        assert all(d == "abstain" for d in decisions[first:])


def test_score_is_deterministic():
    inp = _input(tags=("risk", "ethics"), scoring_rules=frozenset({"brier", "log", "spherical"}))
    a = score(inp)
    b = score(inp)
    assert a == b
    assert a.rationale == b.rationale


def test_normalized_blend_is_scale_invariant():
    small = score(_input(cosine=0.3, tangent=0.2, mode="blend"))
    large = score(_input(cosine=0.6, tangent=0.4, mode="blend"))
    assert large.angel_signal == pytest.approx(2 * small.angel_signal)
    assert large.score == pytest.approx(small.score)


def test_unnormalized_blend_keeps_magnitude():
    out = score(_input(mode="blend", normalize=False))
    assert out.score == pytest.approx(out.angel_signal - out.demon_signal)


def test_contrastive_blend_guards_zero_signals():
    assert contrastive_blend(0.0, 0.0, True) == 0.0


def test_logistic_is_stable_for_large_inputs():
    assert logistic(1000.0) == 1.0
    assert logistic(-1000.0) == 0.0
    out = score(_input(theta=0.0, cosine=1.0, phi=1.2, tangent=-1e6, normalize=False))
    assert out.decision == "positive"
    assert out.confidence == 1.0


# -------------------------
# MODES
# -------------------------
def test_single_advisor_modes_use_raw_signal():
    angel = score(_input(mode="angel"))
    demon = score(_input(mode="demon"))
    assert angel.score == angel.angel_signal
    assert demon.score == demon.demon_signal


def test_threshold_applies_to_every_mode():
    for mode in ("angel", "demon", "blend"):
        out = score(_input(mode=mode, cosine=0.0, tangent=0.0))
        assert out.decision == "abstain"


def test_unknown_mode_rejected():
    with pytest.raises(ValueError):
        score(_input(mode="chaos"))


# -------------------------
# DEFAULTS
# -------------------------
def test_defaults_resolved_into_metadata():
    out = score(_input())
    assert out.metadata["tanClamp"] == 3.0
    assert out.metadata["normalized"] is True
    assert out.metadata["abstainThreshold"] == 0.70
    assert out.metadata["abstentionScore"] == 0.0
    assert out.metadata["blendConvention"] == "contrastive-z"
    assert list(out.scores) == ["brier", "log"]


def test_injected_defaults_are_used():
    scorer = DecisionScorer(ScorerDefaults(abstain_threshold=0.5, tan_clamp=0.5, normalize=False, scoring_rules=()))
    out = scorer.score(_input(cosine=0.0, tangent=0.0))
    assert out.decision == "positive"
    assert out.metadata["tanClamp"] == 0.5
    assert out.metadata["normalized"] is False
    assert out.scores is None


def test_caller_values_override_defaults():
    scorer = DecisionScorer(ScorerDefaults(abstain_threshold=0.5))
    out = scorer.score(_input(cosine=0.0, tangent=0.0, abstain_threshold=0.9))
    assert out.decision == "abstain"
    assert out.metadata["abstainThreshold"] == 0.9


def test_invalid_defaults_rejected():
    with pytest.raises(InvalidClamp):
        ScorerDefaults(tan_clamp=0)
    with pytest.raises(InvalidThreshold):
        ScorerDefaults(abstain_threshold=1.5)


# -------------------------
# RATIONALE
# -------------------------
@pytest.mark.parametrize(
    "value,bucket",
    [(0.71, "strong"), (0.7, "moderate"), (0.41, "moderate"), (0.4, "mild"),
     (0.11, "mild"), (0.1, "neutral"), (0.0, "neutral"), (-0.9, "strong")],
)
def test_strength_buckets_use_strict_cutoffs(value, bucket):
    assert strength_bucket(value) == bucket


def test_direction_of_zero_is_negative():
    assert direction(0.0) == "negative"
    assert direction(0.2) == "positive"


def test_rationale_mentions_topic_tags_and_model():
    out = score(_input(tags=("risk", "ethics")))
    assert out.rationale.startswith('Mind Balance analysis for "Ship the release":')
    assert "moderately favors positive action" in out.rationale
    assert "Contextual factors: risk, ethics." in out.rationale
    assert out.rationale.endswith("tangent captures escalating urgency.")


def test_rationale_without_tags_and_with_abstain():
    out = score(_input(cosine=0.0, tangent=0.0))
    assert "Contextual factors" not in out.rationale
    assert "Abstaining" in out.rationale
