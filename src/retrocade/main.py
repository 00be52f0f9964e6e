"""
Main entry point for RETROCADE.

Loads the environment, configures logging and runs the desktop window
with the configured starting game.
"""

import asyncio
import logging
import sys
from pathlib import Path

from retrocade.config.settings import Settings

ASSETS_DIR = Path(__file__).parent / "assets"
PLAYER_FRAMES = ("idle", "walk", "run", "jump")


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


async def run_simulator(settings: Settings) -> None:
    """Run the desktop simulator."""
    from retrocade.audio.engine import get_audio_engine
    from retrocade.games.manager import create_default_manager
    from retrocade.graphics.assets import AssetLibrary
    from retrocade.simulator.window import SimulatorWindow, WindowConfig

    audio = get_audio_engine()
    audio.init()

    assets = AssetLibrary(root=ASSETS_DIR)
    if ASSETS_DIR.is_dir():
        pf = settings.platformer
        for frame in PLAYER_FRAMES:
            assets.register(f"player_{frame}", f"player_{frame}.png",
                            size=(pf.player_width, pf.player_height))

    manager = create_default_manager(settings, audio, assets)
    manager.select(settings.start_game)

    window = SimulatorWindow(
        manager,
        config=WindowConfig(scale=settings.window_scale,
                            fullscreen=settings.fullscreen,
                            fps=settings.loop.fps),
        frame_cap=settings.loop.frame_cap,
        debug=settings.debug,
    )

    try:
        await window.run()
    finally:
        audio.cleanup()


def main() -> None:
    """Main entry point."""
    from dotenv import load_dotenv

    from retrocade.config.settings import get_settings

    # Load environment variables
    load_dotenv()
    settings = get_settings()

    setup_logging(settings.debug)

    logger = logging.getLogger(__name__)
    logger.info("RETROCADE starting...")
    logger.info("Controls: arrows move, SPACE jump/fire, ENTER start, "
                "P pause, R restart, 1-3 switch game, ESC quit")

    try:
        asyncio.run(run_simulator(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    logger.info("RETROCADE stopped")


if __name__ == "__main__":
    main()
