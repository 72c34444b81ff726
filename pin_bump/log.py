"""Logging setup shared by the library and the CLI."""

import logging
import sys


logger = logging.getLogger("pin_bump")


def configure_logging(verbose: bool):
    """
    Send pin_bump log records to stdout as bare messages.

    DEBUG when verbose, INFO otherwise. Calling it again only changes
    the level.
    """
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
