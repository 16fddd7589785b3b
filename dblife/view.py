import logging

import numpy as np
import vispy.app
import vispy.scene
from vispy.scene import visuals

from .constants import (DEFAULT_INTERVAL, DEFAULT_DENSITY, WINDOW_SIZE,
                        BACKGROUND_COLOR, CELL_COLORMAP)

logger = logging.getLogger(__name__)

HELP_TEXT = 'SPACE start/pause  N step  R randomize  C clear  click toggles a cell'


def animate_game(universe, interval=DEFAULT_INTERVAL, frame_skip=1, density=DEFAULT_DENSITY):
    """
    Show the current generation of a Universe and drive it from a timer.

    Args:
        universe: The Universe to display and tick
        interval: Update interval in milliseconds
        frame_skip: Number of ticks per displayed frame
        density: Live cell probability used by the R key
    """
    if frame_skip < 1:
        raise ValueError("frame_skip must be at least 1")
    if interval <= 0:
        raise ValueError("interval must be positive")

    canvas = vispy.scene.SceneCanvas(keys='interactive', size=WINDOW_SIZE, resizable=True, show=True,
                                     bgcolor=BACKGROUND_COLOR)
    view = canvas.central_widget.add_view()
    view.camera = 'panzoom'
    view.camera.aspect = 1

    # Text display for generation counter and status
    text = visuals.Text('', pos=(10, 10), anchor_x='left', anchor_y='bottom', color='white',
                        font_size=10, parent=canvas.scene)
    text.order = 1

    image = visuals.Image(_frame(universe), cmap=CELL_COLORMAP, clim=(0, 1),
                          interpolation='nearest', parent=view.scene)
    view.camera.set_range()

    running = False

    def redraw(status=''):
        image.set_data(_frame(universe))
        text.text = (f'Generation: {universe.generation}  Live Cells: {universe.live_count()}'
                     f'  {status or HELP_TEXT}')
        canvas.update()

    def update(ev):
        if not running:
            return
        for _ in range(frame_skip):
            universe.tick()
        redraw('Running')

    def on_key_press(event):
        nonlocal running
        if event.key == ' ':
            running = not running
            redraw('Running' if running else 'Paused')
        elif event.key == 'N':
            universe.tick()
            redraw()
        elif event.key == 'R':
            universe.randomize(density)
            redraw()
        elif event.key == 'C':
            universe.clear()
            redraw()

    def on_mouse_press(event):
        # Map the click from canvas pixels into image (col, row) coordinates
        transform = canvas.scene.node_transform(image)
        col, row = transform.map(event.pos)[:2]
        row, col = int(np.floor(row)), int(np.floor(col))
        if 0 <= row < universe.height and 0 <= col < universe.width:
            universe.toggle_cell(row, col)
            redraw()
        else:
            logger.debug("Ignoring click outside the grid at (%d, %d)", row, col)

    canvas.events.key_press.connect(on_key_press)
    canvas.events.mouse_press.connect(on_mouse_press)
    redraw()

    timer = vispy.app.Timer(interval=interval / 1000.0)  # Convert ms to seconds
    timer.connect(update)
    timer.start()

    vispy.app.run()


def _frame(universe):
    return universe.current().astype(np.float32)
