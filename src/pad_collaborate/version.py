"""Utilities to retrieve the information of the program version."""

import platform
import sys
from textwrap import dedent

__version__ = "0.1.0"


def version_info() -> str:
    """Display the version of the program, python and the platform."""
    return dedent(
        f"""\
        ------------------------------------------------------------------
             pad_collaborate: {__version__}
             Python: {sys.version.split(" ", maxsplit=1)[0]}
             Platform: {platform.platform()}
        ------------------------------------------------------------------"""
    )
