from __future__ import annotations
import math
from typing import Iterable, Optional, Sequence

from pydepth.analysis.detectors.depth import DepthStat


def sort_stats(stats: Iterable[DepthStat]) -> list[DepthStat]:
    """Deepest first; equal depths keep discovery order."""
    return sorted(stats, key=lambda s: s.depth, reverse=True)


def select_stats(sorted_stats: Sequence[DepthStat], top: Optional[int] = None, over: int = 0) -> list[DepthStat]:
    """Leading records of a depth-descending sequence, cut at `top` records
    and at the first record not deeper than `over`."""
    selected: list[DepthStat] = []
    for i, stat in enumerate(sorted_stats):
        if top is not None and i == top:
            break
        if stat.depth <= over:
            break
        selected.append(stat)
    return selected


def average(stats: Sequence[DepthStat]) -> float:
    if not stats:
        return math.nan
    return sum(s.depth for s in stats) / len(stats)


def format_average(value: float) -> str:
    if math.isnan(value):
        return "Average: NaN"
    # three significant digits, trailing zeros kept: 5.00, 4.67, 12.5
    return f"Average: {value:#.3g}".rstrip(".")


def format_lines(stats: Iterable[DepthStat]) -> list[str]:
    return [str(s) for s in stats]
