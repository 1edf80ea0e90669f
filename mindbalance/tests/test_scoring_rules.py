import math

import pytest

from mindbalance.engine import DecisionInput, score
from mindbalance.engine import scoring_rules
from mindbalance.engine.scorer import logistic


def _confident(cosine=1.0, tangent=1.0, **kw):
    # angel = cosine, demon = -tangent, so normalized raw = +/-1
    return DecisionInput(
        topic="Adopt the proposal",
        theta=0.0,
        phi=-math.pi / 4,
        cosine=cosine,
        tangent=tangent,
        mode="probabilistic",
        **kw,
    )


# -------------------------
# ABSTAIN PATH
# -------------------------
def test_abstain_records_default_abstention_score():
    out = score(DecisionInput(
        topic="Ambiguous", theta=0.1, phi=0.1, cosine=0.1, tangent=0.1,
        mode="probabilistic", abstain_threshold=0.8,
        scoring_rules=frozenset({"brier"}),
    ))
    assert out.decision == "abstain"
    assert out.scores == {"brier": 0.0}


def test_abstain_records_caller_abstention_score_for_every_rule():
    out = score(DecisionInput(
        topic="Ambiguous", theta=0.1, phi=0.1, cosine=0.1, tangent=0.1,
        mode="probabilistic", abstain_threshold=0.8, abstention_score=-0.25,
        scoring_rules=frozenset(scoring_rules.RULE_NAMES),
    ))
    assert out.scores == {"brier": -0.25, "log": -0.25, "quadratic": -0.25, "spherical": -0.25}


def test_evaluate_treats_missing_abstention_score_as_zero():
    assert scoring_rules.evaluate(["log"], 0.6, "abstain", None) == {"log": 0.0}


# -------------------------
# SELF-REFERENTIAL PATH
# -------------------------
def test_positive_decision_scores():
    out = score(_confident(scoring_rules=frozenset(scoring_rules.RULE_NAMES)))
    p = logistic(1.0)
    q = 1.0 - p
    assert out.decision == "positive"
    assert out.scores["brier"] == pytest.approx((p - 1.0) ** 2)
    assert out.scores["log"] == pytest.approx(0.3133, abs=1e-4)
    assert out.scores["quadratic"] == pytest.approx(2 * p - (p * p + q * q))
    assert out.scores["spherical"] == pytest.approx(p / math.sqrt(p * p + q * q))


def test_negative_decision_scores_mirror_positive():
    pos = score(_confident(scoring_rules=frozenset(scoring_rules.RULE_NAMES)))
    neg = score(_confident(cosine=-1.0, tangent=-1.0, scoring_rules=frozenset(scoring_rules.RULE_NAMES)))
    assert neg.decision == "negative"
    for name in scoring_rules.RULE_NAMES:
        assert neg.scores[name] == pytest.approx(pos.scores[name])


def test_scores_emitted_in_canonical_order():
    out = score(_confident(scoring_rules=frozenset({"spherical", "brier"})))
    assert list(out.scores) == ["brier", "spherical"]


def test_empty_rule_set_omits_scores():
    out = score(_confident(scoring_rules=frozenset()))
    assert out.scores is None


def test_log_score_floor():
    assert scoring_rules.log_score(1.0, False) == pytest.approx(-math.log(scoring_rules.LOG_FLOOR))


@pytest.mark.parametrize("p", [0.5, 0.7, 0.99])
def test_sharper_forecast_scores_better(p):
    assert scoring_rules.brier(p, True) <= scoring_rules.brier(0.5, True)
    assert scoring_rules.log_score(p, True) <= scoring_rules.log_score(0.5, True)
    assert scoring_rules.quadratic(p, True) >= scoring_rules.quadratic(0.5, True)
    assert scoring_rules.spherical(p, True) >= scoring_rules.spherical(0.5, True)
