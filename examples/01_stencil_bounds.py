"""Box filter over a 2-D grid using clipped neighbourhoods.

For every cell ``I`` the window ``(I ± radius) ∩ R`` is the part of its
neighbourhood that lies inside the grid ``R``; no padding or bounds checks
are needed.  The result is checked against a padded NumPy computation.
"""

import numpy as np

from indexarith import RangeExpression, multi_index, region


def as_slices(window):
    return tuple(slice(r.first, r.last + 1, r.step) for r in window.ranges)


def box_filter(grid: np.ndarray, radius: int) -> np.ndarray:
    R = region(*(range(n) for n in grid.shape))
    window = RangeExpression("(I ± k) ∩ R")
    out = np.empty(grid.shape, dtype=np.float64)
    for I in R:
        W = window(I=I, k=radius, R=R)
        out[I.indices] = grid[as_slices(W)].mean()
    return out


def reference_filter(grid: np.ndarray, radius: int) -> np.ndarray:
    padded = np.pad(grid.astype(np.float64), radius, constant_values=np.nan)
    out = np.empty(grid.shape, dtype=np.float64)
    size = 2 * radius + 1
    for i in range(grid.shape[0]):
        for j in range(grid.shape[1]):
            out[i, j] = np.nanmean(padded[i : i + size, j : j + size])
    return out


if __name__ == "__main__":
    rng = np.random.default_rng(7)
    grid = rng.integers(0, 10, size=(6, 9))
    smoothed = box_filter(grid, radius=1)
    assert np.allclose(smoothed, reference_filter(grid, radius=1))

    corner = RangeExpression("(I ± 2) ∩ R")(I=multi_index(0, 8), R=region(range(6), range(9)))
    print("window around the top-right corner:", corner)
    print("interior:", RangeExpression("R ∓ 1")(R=region(range(6), range(9))))
    print(np.round(smoothed, 2))
