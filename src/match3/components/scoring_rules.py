from dataclasses import dataclass

from match3.constants import CASCADE_MULTIPLIER, FOUR_PLUS_MATCH_POINTS, THREE_MATCH_POINTS


@dataclass(frozen=True, slots=True)
class ScoringRules:
    """Point values for runs and the per-cascade multiplier.

    Runs of five or more score the same flat ``four_plus_match_points`` as runs of four.
    """

    three_match_points: int = THREE_MATCH_POINTS
    four_plus_match_points: int = FOUR_PLUS_MATCH_POINTS
    cascade_multiplier: float = CASCADE_MULTIPLIER

    def __post_init__(self) -> None:
        if self.three_match_points < 0 or self.four_plus_match_points < 0:
            raise ValueError("Match points must not be negative")
        if self.cascade_multiplier <= 0:
            raise ValueError(f"Cascade multiplier must be positive, got {self.cascade_multiplier}")
