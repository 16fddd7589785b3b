"""
Conway's Game of Life - double-buffered toroidal engine
"""

from .model import Universe
from .render import render_buffers, render_grid
from .constants import *

__version__ = "0.1.0"
