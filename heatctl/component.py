"""
Common base of the controller parts.

A component has a name used in log messages and a debug flag
enabling its DEBUG level messages.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from . import envvars

__all__ = ['Component']

_logger = logging.getLogger(__package__)


class Component:
    """
    Base class providing named logging.
    """

    def __init__(self, name: Optional[str] = None, *, debug: Optional[bool] = None) -> None:
        self.name: str = type(self).__name__ if name is None else name
        self.debug: bool = envvars.debug if debug is None else bool(debug)

    def log_msg(self, msg: str, *args: Any, level: int, **kwargs) -> None:
        """Add own name and log the message with given priority level."""
        _logger.log(level, f"{self}: {msg}", *args, **kwargs)

    def log_debug(self, msg: str, *args: Any, **kwargs) -> None:
        """Log a message only if debugging is enabled."""
        if self.debug:
            self.log_msg(msg, *args, level=logging.DEBUG, **kwargs)

    def log_info(self, msg: str, *args: Any, **kwargs) -> None:
        """Log a message with INFO priority."""
        self.log_msg(msg, *args, level=logging.INFO, **kwargs)

    def log_warning(self, msg: str, *args: Any, **kwargs) -> None:
        """Log a message with WARNING priority."""
        self.log_msg(msg, *args, level=logging.WARNING, **kwargs)

    def log_error(self, msg: str, *args: Any, **kwargs) -> None:
        """Log a message with ERROR priority."""
        self.log_msg(msg, *args, level=logging.ERROR, **kwargs)

    def __str__(self) -> str:
        try:
            return f"<{type(self).__name__} '{self.name}'>"
        except AttributeError:
            # name not set yet, str() must always succeed
            return super().__str__()
