"""
A thermostat controller for an electric heater.

The heatctl package contains:
 - sensor fusion of one or two temperature sensors
 - a threshold regulator with a communication fail-safe
 - a hysteresis on/off decision
 - a control loop driving the heater relay and an asyncio runner

Released under the MIT License.
"""

__version_info__ = (1, 0, 0)
__version__ = '.'.join(str(n) for n in __version_info__)

from . import exceptions, collaborators, config, fusion, hysteresis, loop, regulator, runner
from .collaborators import *
from .config import *
from .exceptions import *
from .fusion import *
from .hysteresis import *
from .loop import *
from .regulator import *
from .runner import *
# .demo and .mqtt are not imported to heatctl

__all__ = [
    '__version__',
    '__version_info__',
    *collaborators.__all__,
    *config.__all__,
    *exceptions.__all__,
    *fusion.__all__,
    *hysteresis.__all__,
    *loop.__all__,
    *regulator.__all__,
    *runner.__all__,
    ]
