"""Static k-d tree for rectangular range queries over planar coordinates.

The tree is stored flat: ``ids``, ``xs`` and ``ys`` are reordered in place so
that every segment ``[left, right]`` larger than ``node_size`` has its median
at ``(left + right) // 2``, split on alternating axes. Latitude/longitude are
treated as a plane, which is fine because box queries are approximate anyway.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from visit_finder.models import BoundingBox


class HasCoordinates(Protocol):
    """Anything that exposes planar (x, y) coordinates."""

    def coordinates(self) -> tuple[float, float]: ...


class KDBush:
    """A static, once-built 2-D index over a sequence of points.

    Args:
        points: Points to index. Their positions in the sequence are the ids
            returned by queries.
        node_size: Leaf bucket size; segments this small are scanned linearly.
    """

    def __init__(self, points: Sequence[HasCoordinates], node_size: int = 64) -> None:
        if node_size < 1:
            raise ValueError(f"node_size must be >= 1, got {node_size!r}")
        self.node_size = node_size
        self._ids: list[int] = list(range(len(points)))
        self._xs: list[float] = []
        self._ys: list[float] = []
        for p in points:
            x, y = p.coordinates()
            self._xs.append(x)
            self._ys.append(y)
        self._build(0, len(self._ids) - 1, 0)

    def __len__(self) -> int:
        return len(self._ids)

    def _build(self, left: int, right: int, axis: int) -> None:
        if right - left <= self.node_size:
            return
        keys = self._xs if axis == 0 else self._ys
        order = sorted(range(left, right + 1), key=keys.__getitem__)
        self._ids[left : right + 1] = [self._ids[i] for i in order]
        self._xs[left : right + 1] = [self._xs[i] for i in order]
        self._ys[left : right + 1] = [self._ys[i] for i in order]

        m = (left + right) // 2
        self._build(left, m - 1, 1 - axis)
        self._build(m + 1, right, 1 - axis)

    def range(self, min_x: float, min_y: float, max_x: float, max_y: float) -> list[int]:
        """Return ids of all points inside the inclusive rectangle.

        No ordering guarantee on the result.
        """

        ids, xs, ys = self._ids, self._xs, self._ys
        result: list[int] = []
        if not ids:
            return result

        stack = [(0, len(ids) - 1, 0)]
        while stack:
            left, right, axis = stack.pop()

            if right - left <= self.node_size:
                for i in range(left, right + 1):
                    if min_x <= xs[i] <= max_x and min_y <= ys[i] <= max_y:
                        result.append(ids[i])
                continue

            m = (left + right) // 2
            x, y = xs[m], ys[m]
            if min_x <= x <= max_x and min_y <= y <= max_y:
                result.append(ids[m])

            lo, hi, v = (min_x, max_x, x) if axis == 0 else (min_y, max_y, y)
            if lo <= v:
                stack.append((left, m - 1, 1 - axis))
            if hi >= v:
                stack.append((m + 1, right, 1 - axis))

        return result

    def query(self, box: BoundingBox) -> list[int]:
        """Range query with a lat/long box (x = latitude, y = longitude)."""

        return self.range(
            box.southwest.latitude,
            box.southwest.longitude,
            box.northeast.latitude,
            box.northeast.longitude,
        )
