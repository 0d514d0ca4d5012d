import numpy as np
import pytest
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from histogram_grid.helpers import (InvalidInputError, as_grid, blur, blur_kernel,
                                    close_enough, normalize, zeros)


def accumulate(grid, blurring):
    """Cell-by-cell diffusion without the final normalization"""
    rows, cols = grid.shape
    window = blur_kernel(blurring)
    new_grid = np.zeros((rows, cols))
    for i in range(rows):
        for j in range(cols):
            for dy in (-1, 0, 1):
                for dx in (-1, 0, 1):
                    new_grid[(i + dy) % rows, (j + dx) % cols] += grid[i, j] * window[dy + 1, dx + 1]
    return new_grid


class TestNormalize:

    def test_sums_to_one(self):
        grid = np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
        assert np.isclose(np.sum(normalize(grid)), 1.0, atol=1e-6)

    def test_keeps_proportions(self):
        grid = [[1.0, 3.0], [0.0, 4.0]]
        assert np.allclose(normalize(grid), [[0.125, 0.375], [0.0, 0.5]])

    def test_idempotent(self):
        rng = np.random.default_rng(0)
        grid = rng.random((4, 7))
        once = normalize(grid)
        assert np.allclose(normalize(once), once)

    def test_does_not_mutate_input(self):
        grid = np.array([[2.0, 2.0], [2.0, 2.0]])
        result = normalize(grid)
        assert np.all(grid == 2.0)
        assert result is not grid

    def test_all_zero_grid_raises(self):
        with pytest.raises(InvalidInputError):
            normalize(np.zeros((3, 3)))

    def test_empty_grid_raises(self):
        with pytest.raises(InvalidInputError):
            normalize([])
        with pytest.raises(InvalidInputError):
            normalize([[]])
        with pytest.raises(InvalidInputError):
            normalize(np.zeros((0, 4)))

    def test_ragged_grid_raises(self):
        with pytest.raises(InvalidInputError):
            normalize([[0.5, 0.5], [0.5]])

    def test_flat_list_raises(self):
        with pytest.raises(InvalidInputError):
            normalize([1.0, 2.0, 3.0])

    def test_three_level_nesting_raises(self):
        with pytest.raises(InvalidInputError):
            normalize([[[1.0, 3.0]]])

    def test_non_numeric_cells_raise(self):
        with pytest.raises(InvalidInputError):
            normalize([["a", "b"], ["c", "d"]])

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            normalize([[0.0]])


class TestBlur:

    def test_localized_distribution(self):
        """Impulse in the middle of a 3x3 world"""
        grid = np.zeros((3, 3))
        grid[1, 1] = 1.0

        blurred = blur(grid, 0.12)

        expected = np.array([
            [0.01, 0.02, 0.01],
            [0.02, 0.88, 0.02],
            [0.01, 0.02, 0.01]
        ])
        assert np.allclose(blurred, expected)
        assert np.isclose(np.sum(blurred), 1.0)

    def test_sums_to_one(self):
        rng = np.random.default_rng(1)
        grid = rng.random((5, 6)) * 10
        for blurring in [0.0, 0.12, 0.5, 1.0]:
            assert np.isclose(np.sum(blur(grid, blurring)), 1.0, atol=1e-6)

    def test_zero_blurring_is_normalize(self):
        grid = np.array([[1.0, 0.0, 3.0], [2.0, 2.0, 0.0]])
        assert np.allclose(blur(grid, 0.0), normalize(grid))

    def test_full_blurring_empties_center(self):
        grid = np.zeros((3, 3))
        grid[1, 1] = 1.0

        blurred = blur(grid, 1.0)

        assert blurred[1, 1] == 0.0
        assert np.isclose(blurred[0, 1], 1 / 6)
        assert np.isclose(blurred[0, 0], 1 / 12)

    def test_wraparound_corner(self):
        """Mass in the top left corner spills onto the opposite edges"""
        grid = np.zeros((3, 3))
        grid[0, 0] = 1.0

        blurred = blur(grid, 0.12)

        assert np.isclose(blurred[2, 2], 0.01)
        assert np.isclose(blurred[0, 2], 0.02)
        assert np.isclose(blurred[2, 0], 0.02)
        assert np.isclose(blurred[0, 0], 0.88)

    def test_single_row_collision(self):
        """Rows above and below a 1-row world are the row itself"""
        blurred = blur([[1.0, 0.0, 0.0]], 0.3)

        assert blurred.shape == (1, 3)
        assert np.isclose(np.sum(blurred), 1.0)
        assert np.isclose(blurred[0, 1], blurred[0, 2])
        assert np.allclose(blurred, [[0.8, 0.1, 0.1]])

    def test_single_column_collision(self):
        blurred = blur([[1.0], [0.0], [0.0]], 0.3)
        assert np.allclose(blurred, [[0.8], [0.1], [0.1]])

    def test_two_by_two_neighbours_add_up(self):
        grid = np.zeros((2, 2))
        grid[0, 0] = 1.0

        blurred = blur(grid, 0.12)

        assert np.allclose(blurred, [[0.88, 0.04], [0.04, 0.04]])

    def test_single_cell(self):
        assert np.allclose(blur([[0.3]], 0.7), [[1.0]])

    def test_matches_cell_by_cell_diffusion(self):
        rng = np.random.default_rng(2)
        grid = rng.random((4, 5))
        assert np.allclose(blur(grid, 0.25), normalize(accumulate(grid, 0.25)))

    def test_mass_conserved_before_normalization(self):
        grid = np.array([[3.0, 0.0, 1.0], [0.5, 0.0, 2.0]])
        assert np.isclose(np.sum(accumulate(grid, 0.4)), np.sum(grid))

    def test_shift_equivariant(self):
        rng = np.random.default_rng(3)
        grid = rng.random((4, 6))
        shifted = np.roll(grid, (1, -2), axis=(0, 1))
        assert np.allclose(blur(shifted, 0.3), np.roll(blur(grid, 0.3), (1, -2), axis=(0, 1)))

    def test_does_not_mutate_input(self):
        grid = np.zeros((3, 3))
        grid[1, 1] = 1.0
        original = grid.copy()

        blur(grid, 0.5)

        assert np.array_equal(grid, original)

    def test_accepts_nested_lists(self):
        blurred = blur([[0.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 0.0]], 0.12)
        assert isinstance(blurred, np.ndarray)
        assert np.isclose(blurred[1, 1], 0.88)

    def test_out_of_range_blurring_is_accepted(self, caplog):
        grid = np.ones((3, 3))
        with caplog.at_level("WARNING"):
            blurred = blur(grid, 1.5)
        assert np.isclose(np.sum(blurred), 1.0)
        assert "outside [0, 1]" in caplog.text

    def test_all_zero_grid_raises(self):
        with pytest.raises(InvalidInputError):
            blur(np.zeros((2, 2)), 0.1)

    def test_empty_grid_raises(self):
        with pytest.raises(InvalidInputError):
            blur([], 0.1)

    def test_ragged_grid_raises(self):
        with pytest.raises(InvalidInputError):
            blur([[0.2, 0.3, 0.1], [0.4]], 0.1)

    def test_flat_list_raises(self):
        with pytest.raises(InvalidInputError):
            blur([0.2, 0.3, 0.5], 0.1)


class TestKernel:

    @pytest.mark.parametrize("blurring", [0.0, 0.12, 0.5, 1.0])
    def test_weights_sum_to_one(self, blurring):
        assert np.isclose(np.sum(blur_kernel(blurring)), 1.0)

    def test_symmetric(self):
        window = blur_kernel(0.3)
        assert np.allclose(window, window.T)
        assert np.allclose(window, window[::-1, ::-1])

    def test_weights(self):
        window = blur_kernel(0.12)
        assert np.isclose(window[1, 1], 0.88)
        assert np.isclose(window[0, 1], 0.02)
        assert np.isclose(window[0, 0], 0.01)


def test_as_grid_rejects_three_dimensions():
    with pytest.raises(InvalidInputError):
        as_grid(np.ones((2, 2, 2)))


def test_as_grid_copies_arrays():
    grid = np.ones((2, 2))
    assert as_grid(grid) is not grid


def test_zeros():
    grid = zeros(2, 3)
    assert grid.shape == (2, 3)
    assert grid.dtype == float
    assert np.all(grid == 0.0)


def test_zeros_rejects_bad_dimensions():
    with pytest.raises(InvalidInputError):
        zeros(0, 3)


def test_close_enough():
    g1 = [[0.1, 0.2], [0.3, 0.4]]
    assert close_enough(g1, [[0.1, 0.2], [0.3, 0.4001]])
    assert not close_enough(g1, [[0.1, 0.2], [0.3, 0.5]])
    assert not close_enough(g1, [[0.1, 0.2, 0.0], [0.3, 0.4, 0.0]])
