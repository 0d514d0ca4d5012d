import logging

import numpy as np

from histogram_grid.helpers import InvalidInputError

logger = logging.getLogger(__name__)


def read_line(line):
    '''
    Reads one line of map data.
    :param line: A string like "r g g r", one token per cell separated by spaces.
    :return: A list of single characters, the color of each cell in that row.
    '''
    return [token[0] for token in line.strip().split(" ") if token]


def read_map(file_name):
    '''
    Reads a map file into a grid of cell colors.
    :param file_name: Path to a text file with one row of space-separated tokens per line.
    :return: An HxW numpy ndarray of single-character strings.
    '''
    with open(file_name, 'r') as f:
        rows = [read_line(line) for line in f if line.strip()]

    if not rows:
        raise InvalidInputError(f"Map file {file_name} contains no rows")

    width = len(rows[0])
    for r, row in enumerate(rows):
        if len(row) != width:
            raise InvalidInputError(
                f"Map {file_name} is not rectangular: row {r} has {len(row)} cells, row 0 has {width}")

    logger.debug("Read %dx%d map from %s", len(rows), width, file_name)
    return np.array(rows, dtype=str)


def uniform_belief(grid_map):
    """Uniform prior over every cell of a map."""
    grid_map = np.asarray(grid_map)
    if grid_map.ndim != 2 or grid_map.size == 0:
        raise InvalidInputError(f"Expected a non-empty 2-D map, got shape {grid_map.shape}")
    return np.ones(grid_map.shape, dtype=float) / grid_map.size
