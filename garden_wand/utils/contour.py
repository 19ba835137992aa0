"""Contour simplification — Ramer-Douglas-Peucker with pre-sampling."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

import numpy as np
from numpy.typing import NDArray

P = TypeVar("P", bound=Sequence[float])

DEFAULT_MAX_POINTS = 2000


def presample(points: Sequence[P], max_points: int = DEFAULT_MAX_POINTS) -> list[P]:
    """Uniformly subsample to exactly ``max_points`` points.

    Sample ``i`` is input ``floor(i * n / max_points)``. The final sample
    is pinned to the input's last point so both endpoints survive. Points
    dropped here carry no deviation guarantee.
    """
    n = len(points)
    if n <= max_points:
        return list(points)
    sampled = [points[i * n // max_points] for i in range(max_points)]
    sampled[-1] = points[-1]
    return sampled


def _line_distances(
    pts: NDArray[np.float64],
    start: NDArray[np.float64],
    end: NDArray[np.float64],
) -> NDArray[np.float64]:
    """Perpendicular distance of each point to the infinite line start→end."""
    line_vec = end - start
    line_len = float(np.hypot(line_vec[0], line_vec[1]))
    vecs = pts - start
    if line_len < 1e-10:
        return np.hypot(vecs[:, 0], vecs[:, 1])
    cross = line_vec[0] * vecs[:, 1] - line_vec[1] * vecs[:, 0]
    return np.abs(cross) / line_len


def rdp_keep_mask(points: NDArray[np.float64], epsilon: float) -> NDArray[np.bool_]:
    """Which points Ramer-Douglas-Peucker keeps.

    Works through an explicit stack of (first, last) spans; the result is
    identical to the recursive formulation, splitting at the first point
    of maximum distance.
    """
    n = len(points)
    keep = np.zeros(n, dtype=bool)
    keep[0] = keep[n - 1] = True

    stack = [(0, n - 1)]
    while stack:
        first, last = stack.pop()
        if last - first < 2:
            continue
        dists = _line_distances(points[first + 1 : last], points[first], points[last])
        idx = int(np.argmax(dists))
        if dists[idx] > epsilon:
            split = first + 1 + idx
            keep[split] = True
            stack.append((first, split))
            stack.append((split, last))

    return keep


def simplify(
    points: Sequence[P],
    epsilon: float,
    max_points: int = DEFAULT_MAX_POINTS,
) -> list[P]:
    """Simplify an open polyline.

    Keeps the first and last points; every dropped point that survived
    pre-sampling lies within ``epsilon`` of the result.
    """
    if len(points) <= 2:
        return list(points)

    pts = presample(points, max_points)
    if len(pts) <= 2:
        return pts

    keep = rdp_keep_mask(np.asarray(pts, dtype=np.float64), epsilon)
    return [p for p, k in zip(pts, keep) if k]


def simplify_closed(
    contour: Sequence[P],
    epsilon: float,
    max_points: int = DEFAULT_MAX_POINTS,
) -> list[P]:
    """Simplify an implicitly closed contour.

    Runs :func:`simplify` on the open sequence, then drops trailing
    vertices lying within ``epsilon`` of the closing edge back to the
    first vertex. A traced contour always ends one step short of its start,
    and without this a traced square keeps a fifth vertex beside a corner.
    """
    out = simplify(contour, epsilon, max_points)
    while len(out) > 3:
        if _segment_distance(out[-1], out[-2], out[0]) > epsilon:
            break
        out.pop()
    return out


def _segment_distance(p: Sequence[float], a: Sequence[float], b: Sequence[float]) -> float:
    """Distance from ``p`` to the segment a→b."""
    ax, ay = float(a[0]), float(a[1])
    dx, dy = float(b[0]) - ax, float(b[1]) - ay
    px, py = float(p[0]) - ax, float(p[1]) - ay
    seg_len_sq = dx * dx + dy * dy
    if seg_len_sq < 1e-20:
        return float(np.hypot(px, py))
    t = max(0.0, min(1.0, (px * dx + py * dy) / seg_len_sq))
    return float(np.hypot(px - t * dx, py - t * dy))
