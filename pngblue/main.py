"""Точка входа: `pngblue <file1.png> <file2.png> ...`."""
import logging
import sys
from typing import Tuple

import click

from pngblue.controllers.recolor_controller import RecolorController
from pngblue.exceptions import FatalError

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(message)s",
        datefmt="%Y/%m/%d %H:%M:%S",
        stream=sys.stderr,
    )


@click.command(context_settings={"ignore_unknown_options": True}, add_help_option=False)
@click.argument("files", nargs=-1, type=click.UNPROCESSED)
def cli(files: Tuple[str, ...]) -> None:
    """Перекрашивает чёрные пиксели PNG в голубой, сохраняя альфу.

    Для каждого FILES.png пишет рядом FILES-blue.png.
    """
    configure_logging()
    controller = RecolorController()
    try:
        controller.run(files)
    except FatalError as exc:
        logger.error("%s", exc)
        sys.exit(exc.exit_code)


if __name__ == "__main__":
    cli()
