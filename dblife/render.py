"""
Text rendering of cell buffers.
"""

from .constants import DEAD_GLYPH, ALIVE_GLYPH


def render_rows(cells, width, rows, dead=DEAD_GLYPH, alive=ALIVE_GLYPH):
    """Render ``rows`` rows of ``width`` cells from a flat buffer, one line per row."""
    lines = []
    for row in range(rows):
        start = row * width
        lines.append(''.join(alive if cell else dead for cell in cells[start:start + width]))
        lines.append('\n')
    return ''.join(lines)


def render_buffers(cells, width, height, dead=DEAD_GLYPH, alive=ALIVE_GLYPH):
    """
    Render both halves of a double buffer stacked vertically.

    Args:
        cells: Flat boolean buffer holding buffer A followed by buffer B
        width: Grid width
        height: Grid height

    Returns:
        ``2 * height`` newline-terminated lines: buffer A rows, then buffer B rows
    """
    return render_rows(cells, width, 2 * height, dead, alive)


def render_grid(grid, dead=DEAD_GLYPH, alive=ALIVE_GLYPH):
    """Render a single ``(height, width)`` generation."""
    height, width = grid.shape
    return render_rows(grid.reshape(-1), width, height, dead, alive)
