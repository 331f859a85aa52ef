"""Proportional share normalization for language statistics.

Each entry's ratio (6 decimals) and percentage (2 decimals) are rounded
independently, then the entry with the largest byte count absorbs whatever
residual keeps the totals at exactly 1 and 100.
"""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

from core.models import LanguageShare


RATIO_DECIMALS = 6
PERCENT_DECIMALS = 2


def round_half_up(value: float, decimals: int) -> float:
    factor = 10 ** decimals
    return math.floor(value * factor + 0.5) / factor


def _clamp(value: float, lo: float, hi: float) -> float:
    return min(max(value, lo), hi)


def _largest_index(byte_counts: Sequence[float]) -> int:
    # first entry wins ties
    best_index = 0
    best = -math.inf
    for i, n in enumerate(byte_counts):
        if n > best:
            best_index, best = i, n
    return best_index


def normalize_shares(byte_counts: Sequence[float]) -> List[LanguageShare]:
    """Shares for each byte count, in input order."""
    if not byte_counts:
        return []

    total = sum(byte_counts)
    if total <= 0:
        return [LanguageShare(ratio=0.0, percentage=0.0) for _ in byte_counts]

    pairs: List[Tuple[float, float]] = []
    for n in byte_counts:
        ratio = round_half_up(n / total, RATIO_DECIMALS)
        percentage = round_half_up(ratio * 100, PERCENT_DECIMALS)
        pairs.append((ratio, percentage))

    idx = _largest_index(byte_counts)
    ratio, percentage = pairs[idx]

    ratio_diff = round_half_up(1 - sum(r for r, _ in pairs), RATIO_DECIMALS)
    if ratio_diff != 0:
        ratio = _clamp(round_half_up(ratio + ratio_diff, RATIO_DECIMALS), 0.0, 1.0)

    percent_diff = round_half_up(100 - sum(p for _, p in pairs), PERCENT_DECIMALS)
    if percent_diff != 0:
        percentage = _clamp(round_half_up(percentage + percent_diff, PERCENT_DECIMALS), 0.0, 100.0)

    pairs[idx] = (ratio, percentage)
    return [LanguageShare(ratio=r, percentage=p) for r, p in pairs]
