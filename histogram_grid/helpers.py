import logging

import numpy as np

logger = logging.getLogger(__name__)


class InvalidInputError(ValueError):
    """Raised when a grid (or a value derived from it) can't be used by the filter."""


def as_grid(grid):
    '''
    Validates a grid and returns it as a 2-D float array.
    :param grid: An HxW numpy ndarray or a list of equally long rows.
    :return: A float64 ndarray with the same values. Arrays are copied, never aliased.
    '''
    if isinstance(grid, np.ndarray):
        if grid.ndim != 2:
            raise InvalidInputError(f"Expected a 2-D grid, got an array with shape {grid.shape}")
        if grid.size == 0:
            raise InvalidInputError(f"Grid is empty (shape {grid.shape})")
        return np.array(grid, dtype=float)

    try:
        rows = list(grid)
        lengths = [len(row) for row in rows]
    except TypeError:
        raise InvalidInputError(f"Expected a 2-D grid given as a list of rows, got {grid!r}")
    if len(rows) == 0:
        raise InvalidInputError("Grid has no rows")

    width = lengths[0]
    if width == 0:
        raise InvalidInputError("Grid has empty rows")
    for r, length in enumerate(lengths):
        if length != width:
            raise InvalidInputError(
                f"Grid is not rectangular: row {r} has {length} cells, row 0 has {width}")

    try:
        array = np.array(rows, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Grid cells must be numbers: {e}")
    if array.ndim != 2:
        raise InvalidInputError(f"Expected a 2-D grid, got nested lists with shape {array.shape}")
    return array


def zeros(height, width):
    """Creates a height x width grid of zeros."""
    if height < 1 or width < 1:
        raise InvalidInputError(f"Grid dimensions must be positive, got {height}x{width}")
    return np.zeros((height, width), dtype=float)


def normalize(grid):
    '''
    Normalizes a grid of numbers.
    :param grid: An HxW grid where each entry is the unnormalized probability of that cell.
    :return: A new grid of the same shape whose entries sum to one.
    '''
    grid = as_grid(grid)

    normalizer = np.sum(grid)
    if not np.isfinite(normalizer) or normalizer <= 0:
        raise InvalidInputError(f"Cannot normalize a grid whose sum is {normalizer}")

    return grid / normalizer


def blur_kernel(blurring):
    """
    3x3 diffusion window for a given blur factor.

    The center keeps 1 - blurring, each edge neighbour gets blurring / 6 and
    each diagonal neighbour blurring / 12, so the weights sum to one.
    """
    prob = 1.0 - blurring
    adjacent_prob = blurring / 6.0
    corner_prob = blurring / 12.0

    return np.array([
        [corner_prob, adjacent_prob, corner_prob],
        [adjacent_prob, prob, adjacent_prob],
        [corner_prob, adjacent_prob, corner_prob]
    ])


def blur(grid, blurring):
    '''
    Blurs (and normalizes) a grid of probabilities by spreading probability from each
    cell over a 3x3 window of cells. The world is cyclic: probability that spills over
    the right edge comes back on the left, and over the bottom edge back on the top.

    After blurring (with blurring=0.12) a localized distribution like

        0.00  0.00  0.00
        0.00  1.00  0.00
        0.00  0.00  0.00

    looks like

        0.01  0.02  0.01
        0.02  0.88  0.02
        0.01  0.02  0.01

    :param grid: An HxW grid of (unnormalized) probabilities.
    :param blurring: Fraction of each cell's mass that spills over to its 8 neighbours,
                     expected in [0, 1]. 0.0 means no blurring.
    :return: A new normalized grid where probability has been blurred.
    '''
    grid = as_grid(grid)
    if not 0.0 <= blurring <= 1.0:
        logger.warning("blurring=%s is outside [0, 1], kernel weights won't sum to 1", blurring)

    window = blur_kernel(blurring)
    new_grid = np.zeros_like(grid)

    # Rolling by (dy, dx) sends cell (i, j) to ((i + dy) % H, (j + dx) % W).
    # On 1-wide grids several offsets land on the same cell and simply add up.
    for dy in (-1, 0, 1):
        for dx in (-1, 0, 1):
            new_grid += window[dy + 1, dx + 1] * np.roll(grid, (dy, dx), axis=(0, 1))

    logger.debug("blur: mass before normalization %.6f (input %.6f)", new_grid.sum(), grid.sum())
    return normalize(new_grid)


def close_enough(g1, g2, tolerance=0.001):
    """
    Determines when two grids of floats are close enough to be considered equal.
    Grids of different shapes are never close.
    """
    g1 = np.asarray(g1, dtype=float)
    g2 = np.asarray(g2, dtype=float)
    if g1.shape != g2.shape:
        return False
    return bool(np.all(np.abs(g1 - g2) < tolerance))
