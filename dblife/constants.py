# Default simulation parameters
DEFAULT_WIDTH = 128
DEFAULT_HEIGHT = 128
DEFAULT_INTERVAL = 30
DEFAULT_DENSITY = 0.30
DEFAULT_FRAME_SKIP = 1

# Tick backends: "torch" convolves the whole half at once, "scalar" walks cells
BACKENDS = ('torch', 'scalar')
DEFAULT_BACKEND = 'torch'

# Text rendering glyphs
DEAD_GLYPH = '\u25fb'
ALIVE_GLYPH = '\u25fc'

# Visualization settings
WINDOW_SIZE = (1024, 1024)
BACKGROUND_COLOR = (0.08, 0.08, 0.08, 1.0)
CELL_COLORMAP = 'grays'
