import logging

import numpy as np
import torch

from .constants import DEFAULT_WIDTH, DEFAULT_HEIGHT, DEFAULT_DENSITY, BACKENDS, DEFAULT_BACKEND
from .render import render_buffers

logger = logging.getLogger(__name__)


class Universe:
    """Conway's Game of Life on a toroidal grid with two cell buffers.

    Storage is one flat bit array of length ``2 * size``: buffer A holds
    indices ``[0, size)`` and buffer B holds ``[size, 2 * size)``. The
    ``active_is_a`` flag says which half is the current generation; every
    tick reads the current half, writes the other one and flips the flag.
    Coordinates passed in by the host are trusted to be in bounds.
    """

    def __init__(self, width=DEFAULT_WIDTH, height=DEFAULT_HEIGHT, random_seed=None, device='cuda',
                 backend=DEFAULT_BACKEND):
        if backend not in BACKENDS:
            raise ValueError(f"Unknown backend {backend!r}, expected one of {BACKENDS}")
        _check_dimension('width', width)
        _check_dimension('height', height)

        self._width = width
        self._height = height
        self._size = width * height
        self._cells = np.zeros(2 * self._size, dtype=bool)
        self._active_is_a = True
        self.generation = 0

        self.backend = backend
        self.device = device if torch.cuda.is_available() and device == 'cuda' else 'cpu'
        self._rng = np.random.default_rng(random_seed)

        # Convolution kernel for counting neighbors on the torch backend
        self.kernel = torch.tensor([
            [1, 1, 1],
            [1, 0, 1],
            [1, 1, 1]
        ], dtype=torch.float32, device=self.device).view(1, 1, 3, 3)

    # --- accessors ---

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    @property
    def size(self):
        return self._size

    @property
    def active_is_a(self):
        return self._active_is_a

    @property
    def cells(self):
        """Read-only view over the whole storage, both halves.

        The view shares memory with the engine, so it follows ticks and
        toggles. A resize that grows the storage leaves old views behind.
        """
        view = self._cells.view()
        view.flags.writeable = False
        return view

    def current(self):
        """Read-only ``(height, width)`` view of the current generation."""
        read, _ = self._offsets()
        view = self._cells[read:read + self._size].reshape(self._height, self._width)
        view.flags.writeable = False
        return view

    def as_blocks(self):
        """Storage packed into little-endian 32-bit words, cell ``i`` at bit ``i % 32`` of word ``i // 32``."""
        packed = np.packbits(self._cells, bitorder='little')
        pad = -len(packed) % 4
        if pad:
            packed = np.concatenate([packed, np.zeros(pad, dtype=np.uint8)])
        return packed.view('<u4')

    def live_count(self):
        read, _ = self._offsets()
        return int(np.count_nonzero(self._cells[read:read + self._size]))

    # --- cell access ---

    def index(self, row, col):
        return row * self._width + col

    def _offsets(self):
        # (offset of the current half, offset of the half the next generation goes to)
        if self._active_is_a:
            return 0, self._size
        return self._size, 0

    def get(self, row, col):
        read, _ = self._offsets()
        return bool(self._cells[read + self.index(row, col)])

    def set_cells(self, cells):
        """Mark every ``(row, col)`` in ``cells`` alive in the current half."""
        read, _ = self._offsets()
        for row, col in cells:
            self._cells[read + self.index(row, col)] = True

    def toggle_cell(self, row, col):
        read, _ = self._offsets()
        self._cells[read + self.index(row, col)] ^= True

    def randomize(self, density=DEFAULT_DENSITY):
        """Fill the hidden half at random and make it the current one."""
        if not 0.0 <= density <= 1.0:
            raise ValueError(f"density must be within [0, 1], got {density}")
        _, write = self._offsets()
        self._cells[write:write + self._size] = self._rng.random(self._size) < density
        self._active_is_a = not self._active_is_a
        logger.debug("Randomized %s buffer with density %.2f", 'A' if self._active_is_a else 'B', density)

    def clear(self):
        self._cells[:] = False
        self.generation = 0
        logger.debug("Cleared both buffers")

    # --- resizing ---

    def set_width(self, width):
        _check_dimension('width', width)
        self._width = width
        self._resize()

    def set_height(self, height):
        _check_dimension('height', height)
        self._height = height
        self._resize()

    def _resize(self):
        # Old contents have no meaning under a new row stride, so both halves are wiped
        self._size = self._width * self._height
        self._grow(2 * self._size)
        self._cells[:] = False
        logger.debug("Resized to %dx%d (%d cells per buffer, %d bits of storage)",
                     self._width, self._height, self._size, len(self._cells))

    def _grow(self, length):
        # Storage only ever grows
        if len(self._cells) < length:
            extra = np.zeros(length - len(self._cells), dtype=bool)
            self._cells = np.concatenate([self._cells, extra])

    # --- simulation ---

    def live_neighbor_count(self, row, col):
        """Count live neighbors of ``(row, col)`` in the current half, wrapping at the edges."""
        north = self._height - 1 if row == 0 else row - 1
        south = 0 if row == self._height - 1 else row + 1
        west = self._width - 1 if col == 0 else col - 1
        east = 0 if col == self._width - 1 else col + 1

        read, _ = self._offsets()
        cells = self._cells
        return (int(cells[read + self.index(north, west)]) +
                int(cells[read + self.index(north, col)]) +
                int(cells[read + self.index(north, east)]) +
                int(cells[read + self.index(row, west)]) +
                int(cells[read + self.index(row, east)]) +
                int(cells[read + self.index(south, west)]) +
                int(cells[read + self.index(south, col)]) +
                int(cells[read + self.index(south, east)]))

    def tick(self):
        """Advance one generation into the other half and make it current."""
        if self._size:
            if self.backend == 'torch':
                self._tick_torch()
            else:
                self._tick_scalar()
        self._active_is_a = not self._active_is_a
        self.generation += 1
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Generation %d: %d live cells", self.generation, self.live_count())

    def _tick_scalar(self):
        read, write = self._offsets()
        for row in range(self._height):
            for col in range(self._width):
                idx = self.index(row, col)
                alive = self._cells[read + idx]
                live_neighbors = self.live_neighbor_count(row, col)
                # Birth on 3, survival on 2 or 3
                self._cells[write + idx] = live_neighbors == 3 or (alive and live_neighbors == 2)

    def _tick_torch(self):
        read, write = self._offsets()
        current = self._cells[read:read + self._size].reshape(self._height, self._width)
        grid = torch.from_numpy(current.astype(np.float32)).to(self.device)

        # Pad with circular boundaries and count neighbors
        padded_grid = torch.nn.functional.pad(
            grid.unsqueeze(0).unsqueeze(0),
            (1, 1, 1, 1),
            mode='circular'
        )
        neighbors = torch.nn.functional.conv2d(
            padded_grid,
            self.kernel,
            padding=0
        ).view(self._height, self._width)

        is_alive = (grid == 1.0)
        survives = is_alive & ((neighbors == 2) | (neighbors == 3))
        births = ~is_alive & (neighbors == 3)

        self._cells[write:write + self._size] = (survives | births).cpu().numpy().reshape(-1)

    # --- rendering ---

    def render(self):
        return render_buffers(self._cells, self._width, self._height)

    def __str__(self):
        return self.render()

    def __repr__(self):
        return (f"Universe(width={self._width}, height={self._height}, "
                f"active={'A' if self._active_is_a else 'B'}, generation={self.generation})")


def _check_dimension(name, value):
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
