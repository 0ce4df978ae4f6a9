"""
Settings taken from environment variables.

HEATCTL_DEBUG=1 enables debug messages of all components
and configures logging to show them.
"""

from __future__ import annotations

from collections.abc import Mapping
import logging
import os

_logger = logging.getLogger(__package__)

debug = False

_TRUE_STRINGS =  ['yes', 'true', 'y', 't', 'on',  '1']
_FALSE_STRINGS = ['no', 'false', 'n', 'f', 'off', '0', '']

def str_to_bool(word: str, default: bool) -> bool:
    """Convert a yes/no string to bool, return default if not recognized."""
    word = word.strip().lower()
    if word in _TRUE_STRINGS:
        return True
    if word in _FALSE_STRINGS:
        return False
    _logger.warning("Cannot convert string %r to boolean. Use e.g. 'yes' or 'no'", word)
    return default


def process_env(env: Mapping[str, str]) -> None:
    """Process environment variables."""
    global debug     # pylint: disable=global-statement

    heatctl_env = {name: value for name, value in env.items() if name.startswith("HEATCTL_")}
    debug = str_to_bool(heatctl_env.pop('HEATCTL_DEBUG', "0"), default=False)
    if debug:
        logging.basicConfig(level=logging.DEBUG)
    for name in heatctl_env:
        _logger.warning("Unknown environment variable %r", name)


process_env(os.environ)        # yes, during import
