"""Threshold policy turning a model probability into a verdict."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple

PREDICTION_THRESHOLD = 0.58


class Verdict(str, Enum):
    CANCER = "Cancer"
    NON_CANCER = "Non-cancer"


SUGGESTIONS = {
    Verdict.CANCER: "Segera periksa ke dokter!",
    Verdict.NON_CANCER: "Penyakit kanker tidak terdeteksi.",
}


class Decision(NamedTuple):
    result: Verdict
    suggestion: str


def decide(probability: float) -> Decision:
    """Map a probability to a verdict; only scores strictly above the threshold are ``Cancer``."""

    result = Verdict.CANCER if probability > PREDICTION_THRESHOLD else Verdict.NON_CANCER
    return Decision(result=result, suggestion=SUGGESTIONS[result])
