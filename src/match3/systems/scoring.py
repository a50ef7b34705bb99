from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List

from match3.components.position import Position
from match3.components.scoring_rules import ScoringRules

DEFAULT_RULES = ScoringRules()


def points_for_run(length: int, rules: ScoringRules = DEFAULT_RULES) -> int:
    if length < 3:
        return 0
    if length == 3:
        return rules.three_match_points
    return rules.four_plus_match_points


def run_lengths(coords: Iterable[int]) -> List[int]:
    """Lengths of the maximal runs of consecutive integers in ``coords``."""
    ordered = sorted(set(coords))
    if not ordered:
        return []
    lengths: List[int] = []
    run_length = 1
    for idx in range(1, len(ordered)):
        if ordered[idx] == ordered[idx - 1] + 1:
            run_length += 1
        else:
            lengths.append(run_length)
            run_length = 1
    lengths.append(run_length)
    return lengths


def calculate_score(
    matched: Iterable[Position],
    cascade_level: int,
    rules: ScoringRules = DEFAULT_RULES,
) -> int:
    """Points for one resolution step.

    The match set is a flat union, so run lengths are re-derived per row and
    per column. The base sum is scaled by ``cascade_multiplier ** (level - 1)``
    and truncated.
    """
    if cascade_level < 1:
        raise ValueError(f"Cascade level starts at 1, got {cascade_level}")
    by_row: Dict[int, List[int]] = defaultdict(list)
    by_col: Dict[int, List[int]] = defaultdict(list)
    for position in set(matched):
        by_row[position.y].append(position.x)
        by_col[position.x].append(position.y)
    base = 0
    for groups in (by_row, by_col):
        for coords in groups.values():
            base += sum(points_for_run(length, rules) for length in run_lengths(coords))
    return int(base * rules.cascade_multiplier ** (cascade_level - 1))
