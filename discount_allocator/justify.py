from typing import Iterable

from .models import NormalizedMetrics

EXCEPTIONAL_THRESHOLD = 0.8


def build_justification(normalized: NormalizedMetrics, index: int, attributes: Iterable[str]) -> str:
    high = [attr for attr in attributes if normalized[attr][index] > EXCEPTIONAL_THRESHOLD]
    if high:
        return f"Exceptional: {', '.join(high)}."
    return "Balanced contribution."
