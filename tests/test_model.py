import numpy as np
import pytest

from dblife.model import Universe
from conftest import live_cells

BLINKER_H = {(2, 1), (2, 2), (2, 3)}
BLINKER_V = {(1, 2), (2, 2), (3, 2)}
BLOCK = {(1, 1), (1, 2), (2, 1), (2, 2)}
GLIDER = {(0, 1), (1, 2), (2, 0), (2, 1), (2, 2)}
GLIDER_NEXT = {(1, 0), (1, 2), (2, 1), (2, 2), (3, 1)}


def test_new_universe_is_empty_128_square():
    universe = Universe(device='cpu')

    assert universe.width == 128
    assert universe.height == 128
    assert universe.size == 128 * 128
    assert len(universe.cells) == 2 * universe.size
    assert universe.active_is_a is True
    assert not universe.cells.any()
    assert universe.generation == 0


def test_index_is_row_major():
    universe = Universe(width=5, height=3, device='cpu')

    assert universe.index(0, 0) == 0
    assert universe.index(1, 0) == 5
    assert universe.index(2, 4) == 14


def test_invalid_arguments_raise():
    with pytest.raises(ValueError):
        Universe(backend='opencl')
    with pytest.raises(ValueError):
        Universe(width=-1)


def test_set_cells_marks_current_half(make_universe):
    universe = make_universe()
    universe.set_cells([(0, 0), (3, 4)])

    assert universe.get(0, 0)
    assert universe.get(3, 4)
    assert universe.live_count() == 2
    # Buffer A is current on a fresh universe
    assert universe.cells[universe.index(3, 4)]
    assert not universe.cells[universe.size:].any()


def test_set_cells_follows_the_flag(make_universe):
    universe = make_universe()
    universe.tick()
    assert universe.active_is_a is False

    universe.set_cells([(1, 1)])

    assert universe.get(1, 1)
    assert universe.cells[universe.size + universe.index(1, 1)]
    assert not universe.cells[:universe.size].any()


def test_toggle_cell_is_visible_immediately(make_universe):
    universe = make_universe()

    universe.toggle_cell(2, 5)
    assert universe.get(2, 5)
    universe.toggle_cell(2, 5)
    assert not universe.get(2, 5)


def test_toggle_cell_after_tick_flips_buffer_b(make_universe):
    universe = make_universe()
    universe.tick()

    universe.toggle_cell(0, 0)

    assert universe.cells[universe.size]
    assert not universe.cells[0]


def test_randomize_fills_hidden_half_and_flips(make_universe):
    universe = make_universe(16, 16, random_seed=7)
    universe.set_cells([(0, 0)])

    universe.randomize(1.0)

    assert universe.active_is_a is False
    assert universe.live_count() == universe.size
    # The half that was visible before is untouched
    assert universe.cells[0]
    assert universe.cells[:universe.size].sum() == 1


def test_randomize_density_bounds(make_universe):
    universe = make_universe()

    universe.randomize(0.0)
    assert universe.live_count() == 0
    with pytest.raises(ValueError):
        universe.randomize(1.5)


def test_randomize_is_reproducible_with_seed(make_universe):
    first = make_universe(32, 32, random_seed=42)
    second = make_universe(32, 32, random_seed=42)

    first.randomize()
    second.randomize()

    assert np.array_equal(first.cells, second.cells)
    assert 0 < first.live_count() < first.size


def test_clear_keeps_dimensions_and_flag(make_universe):
    universe = make_universe(6, 4, random_seed=1)
    universe.randomize(0.5)
    universe.tick()
    flag = universe.active_is_a

    universe.clear()

    assert not universe.cells.any()
    assert (universe.width, universe.height) == (6, 4)
    assert universe.active_is_a == flag
    assert universe.generation == 0


def test_cells_view_is_read_only_and_live(make_universe):
    universe = make_universe()
    cells = universe.cells

    with pytest.raises(ValueError):
        cells[0] = True
    universe.toggle_cell(0, 0)
    assert cells[0]


def test_as_blocks_packs_little_endian_words(make_universe):
    universe = make_universe(8, 8)
    universe.set_cells([(0, 0), (4, 1)])

    blocks = universe.as_blocks()

    assert len(blocks) == 4
    assert blocks[0] == 1
    assert blocks[1] == 2


def test_neighbor_count_wraps_around_corners(make_universe):
    universe = make_universe(5, 4)
    universe.set_cells([(0, 0)])
    assert universe.live_neighbor_count(3, 4) == 1

    universe.clear()
    universe.set_cells([(3, 4)])
    assert universe.live_neighbor_count(0, 0) == 1


def test_neighbor_count_range(make_universe):
    universe = make_universe(3, 3)
    universe.randomize(1.0)

    assert universe.live_neighbor_count(1, 1) == 8
    assert universe.live_neighbor_count(0, 0) == 8


def test_neighbor_count_narrow_grid_counts_wrapped_cells_twice(make_universe):
    universe = make_universe(1, 3)
    universe.set_cells([(1, 0)])

    # north-west, north and north-east of row 0 all resolve to the same cell
    assert universe.live_neighbor_count(0, 0) == 3
    universe.tick()
    assert universe.get(0, 0)


def test_blinker_oscillates(make_universe):
    universe = make_universe(5, 5)
    universe.set_cells(BLINKER_H)

    universe.tick()
    assert live_cells(universe) == BLINKER_V
    universe.tick()
    assert live_cells(universe) == BLINKER_H


def test_block_is_still(make_universe):
    universe = make_universe(6, 6)
    universe.set_cells(BLOCK)

    for _ in range(10):
        universe.tick()
        assert live_cells(universe) == BLOCK


def test_glider_next_generation(make_universe):
    universe = make_universe(8, 8)
    universe.set_cells(GLIDER)

    universe.tick()

    assert live_cells(universe) == GLIDER_NEXT


def test_glider_wraps_around_torus(make_universe):
    universe = make_universe(8, 8)
    universe.set_cells(GLIDER)

    # A glider moves one cell diagonally every 4 generations
    for _ in range(4 * 8):
        universe.tick()

    assert live_cells(universe) == GLIDER


def test_tick_writes_other_half_and_flips(make_universe):
    universe = make_universe(5, 5)
    universe.set_cells(BLINKER_H)
    before = universe.cells[:universe.size].copy()

    universe.tick()

    assert universe.active_is_a is False
    assert universe.generation == 1
    assert np.array_equal(universe.cells[:universe.size], before)
    assert universe.cells[universe.size:].sum() == 3


def test_tick_is_deterministic(make_universe):
    first = make_universe(10, 10, random_seed=3)
    second = make_universe(10, 10, random_seed=3)
    first.randomize()
    second.randomize()

    for _ in range(5):
        first.tick()
        second.tick()

    assert np.array_equal(first.current(), second.current())


def test_backends_agree_on_random_soup():
    scalar = Universe(width=17, height=11, random_seed=11, device='cpu', backend='scalar')
    vectorized = Universe(width=17, height=11, random_seed=11, device='cpu', backend='torch')
    scalar.randomize()
    vectorized.randomize()

    for _ in range(8):
        scalar.tick()
        vectorized.tick()
        assert np.array_equal(scalar.cells, vectorized.cells)


def test_repr_mentions_active_buffer():
    universe = Universe(width=4, height=4, device='cpu')

    assert 'active=A' in repr(universe)
