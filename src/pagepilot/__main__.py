"""PagePilot entry point.

Opens a URL in a fresh session, optionally draws element markers, and writes
a viewport screenshot. Mostly useful for eyeballing what the inspector sees.

Changes:
  - 2026-10-04: Added --elements to print the visible element scan.
"""

import argparse
import asyncio
import base64
import json
import logging
from pathlib import Path

from pagepilot.browser import BrowserEngine, MarkerOptions
from pagepilot.config import get_settings
from pagepilot.logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def run(args: argparse.Namespace) -> int:
    settings = get_settings()
    if args.headless:
        settings = settings.model_copy(update={"headless": True})

    async with BrowserEngine(settings) as engine:
        session_id = await engine.create_session()

        result = await engine.navigator.navigate(session_id, args.url)
        if not result.success:
            logger.error("%s", result.error)
            return 1

        if args.elements:
            elements = await engine.enumerate_elements(session_id, max_text_length=60)
            print(json.dumps([el.to_dict() for el in elements], indent=2))

        if args.mark:
            shot = await engine.screenshots.take_marked_screenshot(
                session_id, MarkerOptions(max_elements=args.max_elements)
            )
            image = shot.image
            logger.info("Marked %d elements", len(shot.elements))
        else:
            image = await engine.capture(session_id)

        if image is None:
            logger.error("No frame available for %s", args.url)
            return 1

        Path(args.output).write_bytes(base64.b64decode(image))
        logger.info("Screenshot saved to %s", args.output)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="PagePilot - inspect a page the way an agent sees it")
    parser.add_argument("url", help="Page to open")
    parser.add_argument("--output", "-o", default="pagepilot.jpg", help="Where to write the screenshot")
    parser.add_argument("--mark", action="store_true", help="Draw numbered markers before capturing")
    parser.add_argument("--max-elements", type=int, default=None, help="Cap on markers")
    parser.add_argument("--elements", action="store_true", help="Print visible elements as JSON")
    parser.add_argument("--headless", action="store_true", help="Run without a browser window")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR")
    args = parser.parse_args()

    setup_logging(level=args.log_level)
    raise SystemExit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
