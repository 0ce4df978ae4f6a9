"""
Helpers shared by the controller modules.
"""

from . import tconst, timeunits     # mypy, pylint
from .tconst import *
from .timeunits import *

# here is the public API only, corrections are private
__all__ = tconst.__all__ + timeunits.__all__
