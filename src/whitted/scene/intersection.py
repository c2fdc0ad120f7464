"""Ray/object intersection records with a total order on t.

Intersections are ordered by their ray parameter only. Ray parameters can be
NaN for degenerate geometry, so the ordering is total: NaN sorts after every
number and compares equal to NaN. Sorting a list of intersections, or taking
min() of one, therefore never depends on input order.

Example:
    >>> from src.whitted.scene.intersection import Intersection
    >>> hits = [Intersection(float("nan"), None), Intersection(2.0, None)]
    >>> min(hits).t
    2.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import total_ordering
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.whitted.geometry.sphere import Sphere


def _order_key(t: float) -> tuple[int, float]:
    if math.isnan(t):
        return (1, 0.0)
    return (0, t)


@total_ordering
@dataclass(frozen=True, eq=False)
class Intersection:
    """A hit at parameter t on a scene object.

    Attributes:
        t: Ray parameter of the hit.
        obj: The sphere that was hit. This is the scene's own instance, not
            a copy.
    """

    t: float
    obj: Sphere

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Intersection):
            return NotImplemented
        return _order_key(self.t) == _order_key(other.t)

    def __lt__(self, other: Intersection) -> bool:
        if not isinstance(other, Intersection):
            return NotImplemented
        return _order_key(self.t) < _order_key(other.t)

    __hash__ = None  # type: ignore[assignment]
