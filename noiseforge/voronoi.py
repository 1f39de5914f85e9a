"""Cellular (Voronoi) noise built on a seeded scatter of nuclei."""

import math

import numpy as np

SENTINEL = -1.0

# Upper bound on point-to-nucleus distances held in memory at once
_CHUNK_ELEMENTS = 1 << 22


def _cell_count(extent):
    """Number of non-negative integers strictly below ``extent``."""
    return max(0, math.ceil(extent))


def make_nuclei(width, height, frequency, stream):
    """Scatter one nucleus per grid cell, in pixel space.

    The cell size is ``int(1 / frequency)``. The grid has one row for each
    integer below ``frequency * height`` and one column for each integer
    below ``frequency * width``, so frequencies that do not divide the
    image evenly can leave strips uncovered or overshoot the edge.
    Counts use float64 products, so at products that land near an integer
    they can differ by one from a float32 evaluation of the same loop.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        frequency: Non-zero base frequency.
        stream: RandomStream; x then y is drawn for each cell, row-major.

    Returns:
        float64 array of shape (N, 2).
    """
    cell_size = int(1 / frequency)
    rows = _cell_count(frequency * height)
    cols = _cell_count(frequency * width)

    nuclei = np.empty((rows * cols, 2), dtype=np.float64)
    for cell_y in range(rows):
        for cell_x in range(cols):
            x0 = cell_x * cell_size
            y0 = cell_y * cell_size
            i = cell_y * cols + cell_x
            nuclei[i, 0] = stream.uniform(x0, x0 + cell_size)
            nuclei[i, 1] = stream.uniform(y0, y0 + cell_size)
    return nuclei


def find_two_closest(point, nuclei):
    """Return the nearest and second-nearest nuclei to ``point``.

    Single pass with strict comparisons, so on ties the nucleus seen
    first wins. Returns None when fewer than two nuclei exist. This is the
    point-at-a-time reference for nearest_two_squared(), which rasterization
    uses.
    """
    if len(nuclei) < 2:
        return None

    px, py = point
    best = second = None
    best_d = second_d = math.inf
    for nx, ny in nuclei:
        d = (nx - px) ** 2 + (ny - py) ** 2
        if d < best_d:
            second, second_d = best, best_d
            best, best_d = (nx, ny), d
        elif d < second_d:
            second, second_d = (nx, ny), d
    return best, second


def nearest_two_squared(x, y, nuclei):
    """Squared distances to the nearest and second-nearest nuclei.

    Array form of find_two_closest(): the first minimum is taken by
    argmin (first occurrence), masked out, and the minimum of the rest is
    the runner-up. Points are processed in chunks to bound memory.

    Returns:
        Tuple of two flat float64 arrays, one entry per point.
    """
    px = np.asarray(x, dtype=np.float64).ravel()
    py = np.asarray(y, dtype=np.float64).ravel()
    n = len(nuclei)

    best = np.empty(px.size, dtype=np.float64)
    second = np.empty(px.size, dtype=np.float64)
    step = max(1, _CHUNK_ELEMENTS // n)

    for start in range(0, px.size, step):
        stop = start + step
        dx = px[start:stop, None] - nuclei[None, :, 0]
        dy = py[start:stop, None] - nuclei[None, :, 1]
        d = dx * dx + dy * dy

        rows = np.arange(d.shape[0])
        first = np.argmin(d, axis=1)
        best[start:stop] = d[rows, first]
        d[rows, first] = np.inf
        second[start:stop] = d.min(axis=1)

    return best, second


def voronoi_layer(x, y, nuclei):
    """Evaluate one octave of cellular noise.

    ``((d2 - d1) / (d2 + d1)) * 2 - 1`` where d1 and d2 are the distances
    to the two nearest nuclei. A point on a nucleus gives +1; a point
    equidistant from both gives -1. With fewer than two nuclei every
    point gets SENTINEL (-1).

    Args:
        x, y: Sample coordinates (scalars or arrays of equal shape).
        nuclei: Array from make_nuclei().

    Returns:
        Noise value(s) in [-1, 1], same shape as x and y.
    """
    shape = np.shape(x)
    if len(nuclei) < 2:
        return np.full(shape, SENTINEL)[()]

    best_sq, second_sq = nearest_two_squared(x, y, nuclei)
    d1 = np.sqrt(best_sq)
    d2 = np.sqrt(second_sq)

    # Coincident nuclei under the point give 0/0; treat as equidistant.
    spread = d2 + d1
    ratio = np.divide(d2 - d1, spread, out=np.zeros_like(spread),
                      where=spread > 0)
    return (ratio * 2.0 - 1.0).reshape(shape)[()]
