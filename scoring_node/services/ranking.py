"""Deterministic ordering for group ranks, hackathon ranks and group winners."""
from __future__ import annotations

from collections.abc import Callable, Iterable
from operator import attrgetter
from typing import Any, TypeVar

T = TypeVar("T")

TieBreak = Callable[[Any], Any]

TIE_BREAKS: dict[str, TieBreak] = {
    # lowest team id wins a tie
    "team_id": attrgetter("team_id"),
    # keep storage order (sorting is stable)
    "insertion": lambda _item: 0,
}


def resolve_tie_break(name: str) -> TieBreak:
    try:
        return TIE_BREAKS[name]
    except KeyError:
        raise ValueError(f"Unknown tie-break {name!r}; expected one of {sorted(TIE_BREAKS)}") from None


def order_by_score(
    items: Iterable[T],
    score_of: Callable[[T], float | None],
    tie_break: TieBreak = TIE_BREAKS["team_id"],
) -> list[T]:
    """Highest score first, ``None`` scores last, ties by ``tie_break`` ascending."""
    def sort_key(item: T) -> tuple[Any, ...]:
        score = score_of(item)
        if score is None:
            return (1, 0.0, tie_break(item))
        return (0, -float(score), tie_break(item))

    return sorted(items, key=sort_key)


def assign_ranks(
    items: Iterable[T],
    score_of: Callable[[T], float | None],
    tie_break: TieBreak = TIE_BREAKS["team_id"],
) -> list[tuple[int, T]]:
    """Ranks 1..N in score order. Equal scores still get distinct ranks."""
    return list(enumerate(order_by_score(items, score_of, tie_break), start=1))
