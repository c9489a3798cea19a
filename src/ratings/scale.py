from __future__ import annotations

import math
from typing import Mapping

# Lower is better; the weight feed ranks rating 1 first.
DEFAULT_LABELS: dict[str, float] = {
    "great": 1.0,
    "good": 2.0,
    "ok": 3.0,
    "bad": 4.0,
}

DEFAULT_RATING = 3.0


def _finite(value: float, source: str) -> float:
    if not math.isfinite(value):
        raise ValueError(f"Rating must be a finite number, got {source!r}")
    return value


def parse_labels(text: str) -> dict[str, float]:
    """
    Parse a label scale such as "great=1,good=2,ok=3,bad=4".
    """
    labels: dict[str, float] = {}
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        if "=" not in part:
            raise ValueError(f"Expected label=value, got {part!r}")
        label, raw = (s.strip() for s in part.split("=", 1))
        if not label:
            raise ValueError(f"Empty label in {part!r}")
        try:
            labels[label.lower()] = _finite(float(raw), raw)
        except ValueError as e:
            raise ValueError(f"Bad value for label {label!r}: {raw!r}") from e

    if not labels:
        raise ValueError("No labels defined")
    return labels


def parse_rating(text: str, labels: Mapping[str, float] = DEFAULT_LABELS) -> float:
    """
    "great" -> 1.0, "2" -> 2.0, "2.5" -> 2.5. Labels are case-insensitive.
    """
    key = text.strip().lower()
    if key in labels:
        return float(labels[key])

    try:
        value = float(key)
    except ValueError:
        known = ", ".join(labels)
        raise ValueError(
            f"Unknown rating {text!r} (use a number or one of: {known})"
        ) from None
    return _finite(value, text)


def describe_rating(value: float, labels: Mapping[str, float] = DEFAULT_LABELS) -> str:
    for label, v in labels.items():
        if v == value:
            return label
    return f"{value:g}"
