import pytest

from cancerscan.services.decision import PREDICTION_THRESHOLD, Decision, Verdict, decide


@pytest.mark.parametrize("probability", [0.5801, 0.6, 0.9, 1.0])
def test_scores_above_threshold_are_cancer(probability):
    decision = decide(probability)
    assert decision.result is Verdict.CANCER
    assert decision.suggestion == "Segera periksa ke dokter!"


@pytest.mark.parametrize("probability", [0.0, 0.1, 0.5, 0.5799])
def test_scores_below_threshold_are_non_cancer(probability):
    decision = decide(probability)
    assert decision.result is Verdict.NON_CANCER
    assert decision.suggestion == "Penyakit kanker tidak terdeteksi."


def test_threshold_itself_is_non_cancer():
    assert PREDICTION_THRESHOLD == 0.58
    assert decide(0.58).result is Verdict.NON_CANCER


def test_decide_is_deterministic():
    assert decide(0.73) == decide(0.73) == Decision(Verdict.CANCER, "Segera periksa ke dokter!")


def test_verdict_values_match_wire_format():
    assert Verdict.CANCER.value == "Cancer"
    assert Verdict.NON_CANCER.value == "Non-cancer"
