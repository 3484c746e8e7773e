import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger with a concise format.

    Calling it again only adjusts the level, so uvicorn reloads and test
    sessions don't stack handlers.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(numeric_level)
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt="%(asctime)s %(name)s: %(message)s", datefmt="%H:%M:%S"))

    root.setLevel(numeric_level)
    root.addHandler(handler)
