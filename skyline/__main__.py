"""Entry point for ``python -m skyline``.

Loads the YAML config, opens the local save store, builds a simulation
engine with a fresh city, and opens a Pygame window to play it.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from skyline.persistence.store import FileStore
from skyline.simulation.config import SimulationConfig
from skyline.simulation.engine import SimulationEngine

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def main() -> None:
    """Parse CLI args, create engine, launch renderer."""
    parser = argparse.ArgumentParser(
        prog="skyline",
        description="Skyline - city-building simulation",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--save-dir",
        type=pathlib.Path,
        default=None,
        help="Directory for saved cities (default: from config)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="RNG seed for terrain and names (default: from config)",
    )
    parser.add_argument(
        "--cell-size",
        type=int,
        default=20,
        help="Pixel size per tile (default: 20)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=30,
        help="Target frames per second (default: 30)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )

    if args.config.exists():
        config = SimulationConfig.from_yaml(args.config)
    else:
        logging.getLogger(__name__).warning(
            "Config %s not found, using built-in defaults",
            args.config,
        )
        config = SimulationConfig()
    if args.seed is not None:
        config.seed = args.seed

    store = FileStore(args.save_dir or config.save_dir)
    engine = SimulationEngine(config=config, store=store)

    # Imported late so the engine stays usable without a display
    from skyline.ui.pygame_client import PygameRenderer

    renderer = PygameRenderer(engine=engine, cell_size=args.cell_size)
    renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()
