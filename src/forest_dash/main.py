"""
Main entry point for Forest Dash.

Opens the pygame window and runs the game on the asyncio event loop.
"""

import asyncio
import logging
import os
import sys

from dotenv import load_dotenv


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


async def run_simulator() -> None:
    """Run the desktop window version."""
    from forest_dash.config import get_settings
    from forest_dash.core.events import EventBus
    from forest_dash.game.runner import RunnerGame
    from forest_dash.simulator.window import SimulatorWindow

    settings = get_settings()
    event_bus = EventBus()
    game = RunnerGame(settings, bus=event_bus)

    window = SimulatorWindow(game=game, settings=settings, event_bus=event_bus)
    await window.run()


def main() -> None:
    """Main entry point."""
    # Load environment variables
    load_dotenv()

    debug = os.getenv("FOREST_DASH_DEBUG", "false").lower() == "true"
    setup_logging(debug)

    logger = logging.getLogger(__name__)
    logger.info("Forest Dash starting...")

    try:
        asyncio.run(run_simulator())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    logger.info("Forest Dash stopped")


if __name__ == "__main__":
    main()
