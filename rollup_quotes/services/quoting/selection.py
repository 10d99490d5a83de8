"""
Hardware selection.

Chooses the motor and axle fitted to each gate. Selection is per unit:
the motor must lift one gate's curtain, the axle must span one gate's width.
"""

from decimal import Decimal
from enum import Enum
from typing import Callable, Iterable, Sequence, TypeVar

from rollup_quotes.services.quoting.catalog import Axle, Motor

T = TypeVar("T", Motor, Axle)


class SelectionMode(str, Enum):
    AUTOMATIC = "automatic"
    MANUAL = "manual"


def cheapest_covering(
    candidates: Iterable[T],
    covers: Callable[[T], bool],
) -> T | None:
    """
    Lowest-priced candidate that satisfies ``covers``.

    Ties keep catalog order: the first candidate at the minimum price wins.
    """
    best: T | None = None
    for candidate in candidates:
        if not covers(candidate):
            continue
        if best is None or candidate.price < best.price:
            best = candidate
    return best


def find_by_id(candidates: Iterable[T], candidate_id: str | None) -> T | None:
    if not candidate_id:
        return None
    return next((c for c in candidates if c.id == candidate_id), None)


def select_motor(
    unit_weight: Decimal,
    motors: Sequence[Motor],
    mode: SelectionMode = SelectionMode.AUTOMATIC,
    manual_id: str | None = None,
) -> Motor | None:
    """Motor for one gate of ``unit_weight`` kg, or None when unresolved."""
    if mode == SelectionMode.MANUAL:
        return find_by_id(motors, manual_id)
    return cheapest_covering(motors, lambda m: m.max_weight >= unit_weight)


def select_axle(
    width: Decimal,
    axles: Sequence[Axle],
    mode: SelectionMode = SelectionMode.AUTOMATIC,
    manual_id: str | None = None,
) -> Axle | None:
    """Axle for one gate ``width`` metres wide, or None when unresolved."""
    if mode == SelectionMode.MANUAL:
        return find_by_id(axles, manual_id)
    return cheapest_covering(axles, lambda a: a.max_width >= width)
