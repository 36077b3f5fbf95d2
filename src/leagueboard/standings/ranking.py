"""
Leaderboard ordering.

Players are ordered by a deterministic tie-break chain:
  1. total points   (higher first)
  2. wins           (higher first)
  3. win rate       (higher first; no games counts as 0)

Ranks are strict ordinals: the 1-based position after sorting. Players
with identical keys get consecutive, distinct ranks in their input order
rather than a shared rank, which keeps ranks dense (1..N, no gaps) and
simple to render.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from leagueboard.constants import TREND_DOWN, TREND_SAME, TREND_UP
from leagueboard.standings.aggregator import PlayerAggregate


@dataclass(frozen=True)
class RankedPlayer:
    """An aggregate with its position on the leaderboard."""
    rank: int
    aggregate: PlayerAggregate
    trend: str = TREND_SAME
    previous_rank: Optional[int] = None


def ranking_key(aggregate: PlayerAggregate) -> tuple:
    """Sort key placing the best player first under an ascending sort."""
    return (-aggregate.total_points, -aggregate.wins, -aggregate.win_rate)


def trend_for(rank: int, previous_rank: Optional[int]) -> str:
    """
    Compare a rank with a previous snapshot.

    A smaller number is a better rank, so moving from 4th to 2nd is "up".
    """
    if previous_rank is None or previous_rank == rank:
        return TREND_SAME
    return TREND_UP if rank < previous_rank else TREND_DOWN


def rank_aggregates(
    aggregates: Iterable[PlayerAggregate],
    previous_ranks: Optional[Mapping[int, int]] = None,
) -> list[RankedPlayer]:
    """
    Order aggregates into a 1-indexed leaderboard.

    Args:
        aggregates: Player aggregates in any order (ties keep this order)
        previous_ranks: Optional earlier snapshot of player_id → rank used
                        to compute trend; without it every trend is "same"

    Returns:
        RankedPlayer list with ranks 1..N
    """
    previous_ranks = previous_ranks or {}
    ordered = sorted(aggregates, key=ranking_key)  # sorted() is stable

    ranked = []
    for index, aggregate in enumerate(ordered, start=1):
        previous = previous_ranks.get(aggregate.player_id)
        ranked.append(RankedPlayer(
            rank=index,
            aggregate=aggregate,
            trend=trend_for(index, previous),
            previous_rank=previous,
        ))
    return ranked
