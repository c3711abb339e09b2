"""Logging setup shared by the server and the CLI."""

import logging
import sys
from typing import Literal

_LOG_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
)

Level = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


def setup_logging(level: Level | str = "INFO") -> None:
    """
    Configure root logger once; later calls only adjust the level.
    """
    level = str(level).upper()
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return
    logging.basicConfig(
        level=level,
        format=_LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
