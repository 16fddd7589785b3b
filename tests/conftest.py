import numpy as np
import pytest

from dblife.model import Universe


@pytest.fixture(params=['scalar', 'torch'])
def backend(request):
    return request.param


@pytest.fixture
def make_universe(backend):
    def _make(width=8, height=8, **kwargs):
        kwargs.setdefault('device', 'cpu')
        return Universe(width=width, height=height, backend=backend, **kwargs)
    return _make


def live_cells(universe):
    """Set of (row, col) pairs alive in the current generation."""
    return {(int(row), int(col)) for row, col in np.argwhere(universe.current())}
