"""
Aggregation helpers for summary statistics blocks.

Pure functions over already-fetched query results; no I/O.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

UNKNOWN_KEY = "unknown"

HEALTH_BUCKETS = (
    ("excellent", 90),
    ("good", 70),
    ("fair", 50),
    ("poor", 0),
)


def _key(value: Any, lowercase: bool) -> str:
    if value is None:
        return UNKNOWN_KEY
    # str-based enums render as their value
    key = value.value if hasattr(value, "value") else str(value)
    return key.lower() if lowercase else key


def to_distribution(
    rows: Iterable[Tuple[Any, int]], lowercase: bool = True
) -> Dict[str, int]:
    """
    Turn grouped (value, count) rows into a {key: count} mapping.

    Null values are reported as ``unknown``. Members that never occur are
    omitted, as are rows with a zero count. Keys that collide after
    lowercasing are summed.
    """
    distribution: Dict[str, int] = {}
    for value, count in rows:
        if not count:
            continue
        key = _key(value, lowercase)
        distribution[key] = distribution.get(key, 0) + int(count)
    return distribution


def format_average(value: Optional[Any], digits: int = 1) -> str:
    """Fixed-point string for an average, ``"0"`` when nothing contributed."""
    if value is None:
        return "0"
    return f"{float(value):.{digits}f}"


def round_average(value: Optional[Any]) -> int:
    """Integer-rounded average, 0 when nothing contributed."""
    if value is None:
        return 0
    # Half rounds up (72.5 -> 73)
    return int(Decimal(str(float(value))).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def safe_ratio(numerator: Optional[Any], denominator: Optional[Any], digits: int = 1) -> str:
    """Ratio as a fixed-point string, ``"0"`` when the denominator is zero."""
    if not denominator:
        return "0"
    return format_average((numerator or 0) / denominator, digits)


def mean(values: Sequence[Optional[float]]) -> Optional[float]:
    """Mean of the non-null values, None if there are none."""
    present = [float(v) for v in values if v is not None]
    if not present:
        return None
    return sum(present) / len(present)


def health_bucket(score: int) -> str:
    """Bucket a 0-100 health score."""
    for name, floor in HEALTH_BUCKETS:
        if score >= floor:
            return name
    return HEALTH_BUCKETS[-1][0]


def health_distribution(scores: Iterable[int]) -> Dict[str, int]:
    """Count scores per health bucket; every bucket is present."""
    distribution = {name: 0 for name, _ in HEALTH_BUCKETS}
    for score in scores:
        distribution[health_bucket(score)] += 1
    return distribution
