import argparse
import logging

import torch

from dblife.model import Universe
from dblife.render import render_grid
from dblife.constants import (DEFAULT_WIDTH, DEFAULT_HEIGHT, DEFAULT_INTERVAL, DEFAULT_DENSITY,
                              DEFAULT_FRAME_SKIP, BACKENDS, DEFAULT_BACKEND)

logger = logging.getLogger(__name__)


def print_cuda_info():
    """Print information about CUDA configuration."""
    print("\n=== CUDA Configuration ===")
    print(f"PyTorch version: {torch.__version__}")
    print(f"CUDA available: {torch.cuda.is_available()}")
    print(f"CUDA version: {torch.version.cuda if torch.cuda.is_available() else 'N/A'}")
    print(f"GPU device count: {torch.cuda.device_count() if torch.cuda.is_available() else 0}")
    if torch.cuda.is_available():
        print(f"GPU device name: {torch.cuda.get_device_name(0)}")
    print("========================\n")


def build_parser():
    parser = argparse.ArgumentParser(description="Conway's Game of Life on a double-buffered toroidal grid")
    parser.add_argument("--width", type=int, default=DEFAULT_WIDTH, help="Grid width in cells")
    parser.add_argument("--height", type=int, default=DEFAULT_HEIGHT, help="Grid height in cells")
    parser.add_argument("--density", type=float, default=DEFAULT_DENSITY,
                        help="Probability of a live cell in a random fill (0.0 to 1.0)")
    parser.add_argument("--interval", type=int, default=DEFAULT_INTERVAL, help="Update interval in milliseconds")
    parser.add_argument("--frame_skip", type=int, default=DEFAULT_FRAME_SKIP, help="Number of ticks per frame")
    parser.add_argument("--device", type=str, default='cuda' if torch.cuda.is_available() else 'cpu',
                        choices=['cuda', 'cpu'], help="Computation device for the torch backend")
    parser.add_argument("--backend", type=str, default=DEFAULT_BACKEND, choices=BACKENDS,
                        help="Tick implementation")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the random fill")
    parser.add_argument("--no_gui", action='store_true',
                        help="Skip the settings dialog and use the command-line values")
    parser.add_argument("--text", type=int, default=0, metavar="N",
                        help="Print N generations to the console instead of opening a window")
    parser.add_argument("--log_level", type=str, default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging verbosity")
    return parser


def run_text(universe, generations):
    """Print the current generation, then tick, ``generations`` times."""
    for _ in range(generations):
        print(f"Generation {universe.generation}, live cells: {universe.live_count()}")
        print(render_grid(universe.current()))
        universe.tick()


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    print_cuda_info()

    width, height = args.width, args.height
    density = args.density
    interval = args.interval
    frame_skip = args.frame_skip
    device_text = args.device
    backend = args.backend

    if device_text == 'cuda' and not torch.cuda.is_available():
        print("Warning: CUDA requested but not available, falling back to CPU.")
        device_text = 'cpu'

    if args.text:
        universe = Universe(width=width, height=height, random_seed=args.seed, device=device_text, backend=backend)
        universe.randomize(density)
        run_text(universe, args.text)
        return

    from PyQt5.QtWidgets import QApplication, QDialog
    from dblife.settings import SettingsDialog
    from dblife.view import animate_game

    app = QApplication([])

    if not args.no_gui:
        # Show settings dialog, initializing with args
        settings = SettingsDialog()
        settings.width_spin.setValue(width)
        settings.height_spin.setValue(height)
        settings.density_spin.setValue(density)
        settings.interval_spin.setValue(interval)
        settings.frame_skip_spin.setValue(frame_skip)
        settings.device_combo.setCurrentIndex(max(0, settings.device_combo.findData(device_text)))
        settings.backend_combo.setCurrentIndex(settings.backend_combo.findData(backend))

        if settings.exec_() != QDialog.Accepted:
            return

        width = settings.width_spin.value()
        height = settings.height_spin.value()
        density = settings.density_spin.value()
        interval = settings.interval_spin.value()
        frame_skip = settings.frame_skip_spin.value()
        device_text = settings.device_combo.currentData()
        backend = settings.backend_combo.currentData()

    logger.info("Starting %dx%d grid, density %.2f, interval %dms, frame skip %d, device %s, backend %s",
                width, height, density, interval, frame_skip, device_text, backend)

    universe = Universe(width=width, height=height, random_seed=args.seed, device=device_text, backend=backend)
    universe.randomize(density)

    animate_game(universe, interval=interval, frame_skip=frame_skip, density=density)


if __name__ == "__main__":
    main()
