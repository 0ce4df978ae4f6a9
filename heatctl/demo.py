"""
An interactive simulation of the heater controller.

The sensors and the relay are simulated, threshold messages
are typed in. Useful for learning how the controller reacts.

Usage:
    python3 -m heatctl.demo [config.json]
"""

from __future__ import annotations

import asyncio
import collections
from collections.abc import Callable
from dataclasses import dataclass
import logging
import signal
import sys
from typing import Optional

from . import runner
from .collaborators import MemoryRelay, SimulatedSensors
from .config import ControlConfig, load_config
from .loop import ControlLoop
from .utils import timestr


__all__ = ['DemoCommands', 'cli_repl', 'run_demo']

LIMIT = 4096    # StreamReader buffer limit
HISTSIZE = 20   # history list size
INITIAL_TEMP = 20.0

HELP = """\
Control commands:
    h[elp] or ?                 -- show this help
    exit
Simulation commands:
    p[ublish] <payload>         -- send a threshold message
    t[emp] <sensor> <value>     -- set a sensor temperature; 'none' = invalid
                                   reading, 'fail' = sensor not responding;
                                   sensor = id or number starting with 1
    s[how]                      -- print the controller state
    ti[ck]                      -- run a control period now
    d[ebug] 1|0                 -- debug messages on|off
Command history:
    !?                          -- print history
    !N                          -- repeat command N (integer)
    !-N                         -- repeat command current minus N
    !!                          -- repeat last command (same as !-1)
"""


class DemoCommands:
    """Commands operating on one simulated controller."""

    def __init__(self, control: ControlLoop, sensors: SimulatedSensors) -> None:
        self.control = control
        self.sensors = sensors

    def _sensor_id(self, name: str) -> str:
        sensor_ids = self.control.config.sensor_ids
        if name in sensor_ids:
            return name
        try:
            num = int(name)
        except ValueError:
            num = 0
        if not 1 <= num <= len(sensor_ids):
            raise LookupError(f"Unknown sensor: {name}")
        return sensor_ids[num - 1]

    def _sensor_str(self, sensor_id: str) -> str:
        if sensor_id not in self.sensors:
            return "not responding"
        value = self.sensors[sensor_id]
        return "invalid reading" if value is None else f"{value} °C"

    def debug(self, value: str) -> None:
        if value not in ('0', '1'):
            raise ValueError("Argument must be 0 (debug off) or 1 (debug on)")
        enable = value == '1'
        control = self.control
        control.debug = control.regulator.debug = control.fusion.debug = enable
        print(f"debug {'on' if enable else 'off'}")

    def help(self) -> None:
        print(HELP)

    def publish(self, payload: str) -> None:
        control = self.control
        accepted = control.on_message(control.config.topic, payload)
        print(f"{'accepted' if accepted else 'rejected'}, target: {control.regulator.target} °C")

    def show(self) -> None:
        control = self.control
        elapsed = control.regulator.elapsed_since(control.now())
        print(f"target: {control.regulator.target} °C")
        print(f"last update: {timestr(elapsed)} ago")
        print(f"fail-safe: {'ACTIVE' if control.failsafe_active else 'inactive'}")
        for sensor_id in control.config.sensor_ids:
            print(f"sensor {sensor_id}: {self._sensor_str(sensor_id)}")
        print(f"relay: {'ON' if control.relay.get_relay_state() else 'OFF'}")
        if control.last_result is not None:
            print(f"last period: {control.last_result.outcome.value}")

    def temp(self, name: str, value: str) -> None:
        sensor_id = self._sensor_id(name)
        value = value.lower()
        if value == 'fail':
            self.sensors.pop(sensor_id, None)
        elif value == 'none':
            self.sensors[sensor_id] = None
        else:
            self.sensors[sensor_id] = float(value)
        print(f"sensor {sensor_id}: {self._sensor_str(sensor_id)}")

    def tick(self) -> None:
        result = self.control.tick()
        relay = {None: 'unknown', False: 'OFF', True: 'ON'}[result.relay_on]
        print(f"{result.outcome.value}; relay {relay}")


@dataclass(frozen=True)
class CmdInfo:
    name: str
    args: int = 0       # number of arguments, the last one takes the rest of the line

_COMMANDS = {
    'debug': CmdInfo('debug', args=1),
    # exit is handled in the loop
    'help': CmdInfo('help'),
    'publish': CmdInfo('publish', args=1),
    'show': CmdInfo('show'),
    'temp': CmdInfo('temp', args=2),
    'tick': CmdInfo('tick'),
}


def _complete(cmd: str) -> str:
    if cmd == '?':
        return 'help'
    if cmd in _COMMANDS:
        return cmd
    for fullcmd in _COMMANDS:
        if fullcmd.startswith(cmd):
            # first match wins: 't' = 'temp', 'ti' = 'tick'
            return fullcmd
    raise ValueError(f"Unknown command: {cmd}, try: help")


def parse_command(line: str) -> tuple[str, list[str]]:
    """Split a command line to a full command name and its arguments."""
    cmd, *rest = line.split(None, 1)
    cmd = _complete(cmd)
    nargs = _COMMANDS[cmd].args
    args = rest[0].split(None, nargs - 1) if rest and nargs else rest
    if len(args) != nargs:
        raise TypeError(f"{cmd} command takes {nargs} argument(s)")
    return cmd, args


_HFORMAT = " cmd {:2d}> {}"

async def _cli_repl(commands: DemoCommands) -> None:
    """
    Demo CLI REPL.

    CLI = command line interface; REPL = read-evaluate-print loop.
    """
    loop = asyncio.get_running_loop()
    rstream = asyncio.StreamReader(limit=LIMIT, loop=loop)
    protocol = asyncio.StreamReaderProtocol(rstream, loop=loop)
    await loop.connect_read_pipe(lambda: protocol, sys.stdin)

    history: collections.deque[tuple[str, Callable, list]] = collections.deque(maxlen=HISTSIZE)
    cmdnum = 1
    print("Type 'help' to get a summary of available commands.")
    while True:
        await asyncio.sleep(0)
        print(f'--- heatctl {cmdnum}> ', end='', flush=True)
        line = (await rstream.readline()).decode()
        if not line:
            print('received EOF')
            break
        line = line.strip()
        if not line:
            continue
        if line.split()[0] == 'exit':
            break
        try:
            if line[0] == '!':
                # history
                hcmd = line[1:]
                hlen = len(history)
                if hcmd == '?':
                    for hnum, line_func_args in enumerate(history, start=cmdnum-hlen):
                        print(_HFORMAT.format(hnum, line_func_args[0]))
                    continue
                if hcmd == '!':
                    hnum = -1
                else:
                    try:
                        hnum = int(hcmd)
                    except ValueError:
                        raise ValueError("history !N: invalid command number N") from None
                if hnum < 0:
                    hnum += cmdnum
                if not 1 <= hnum < cmdnum:
                    raise LookupError(f"history: command {hnum} does not exist")
                idx = hnum + hlen - cmdnum
                # beware: no IndexError for small negative indices
                if not 0 <= idx < hlen:
                    raise LookupError(f"history: command {hnum} not in memory")
                line, func, args = history[idx]
                print(_HFORMAT.format(hnum, line))
            else:
                cmd, args = parse_command(line)
                func = getattr(commands, cmd)
            func(*args)
            history.append((line, func, args))
            cmdnum += 1
        except Exception as err:
            print(f"ERROR: {err}")


async def cli_repl(commands: DemoCommands, setup_logging: bool = True) -> None:
    """
    A wrapper preparing the run environment for _cli_repl().

    Set up:
    - SIGINT handler for better UX.
    - logging configuration that displays info messages
    """
    if setup_logging:
        logging.basicConfig(level=logging.INFO)

    task = asyncio.current_task()
    assert task is not None
    def sigint_handler(_signum, _frame):
        # using the _threadsafe variant because we need also to wake up the event loop
        call_soon = asyncio.get_running_loop().call_soon_threadsafe
        call_soon(print, " -- Interrupt signal received, exiting the heatctl demo")
        call_soon(task.cancel)
        # NOT calling the Python's default interrupt handler
    saved_sigint_handler = signal.signal(signal.SIGINT, sigint_handler)
    try:
        await _cli_repl(commands)
    finally:
        # revert to the original state, because we broke the SIGINT handlers chain
        signal.signal(signal.SIGINT, saved_sigint_handler)


def create_demo(config: Optional[ControlConfig] = None) -> DemoCommands:
    """Create a controller with simulated sensors and relay."""
    if config is None:
        config = ControlConfig()
    sensors = SimulatedSensors({sensor_id: INITIAL_TEMP for sensor_id in config.sensor_ids})
    control = ControlLoop(config, MemoryRelay(), sensors, name='demo')
    return DemoCommands(control, sensors)


async def run_demo(config: Optional[ControlConfig] = None) -> None:
    """Run the simulated controller with the interactive CLI."""
    commands = create_demo(config)
    await runner.run(commands.control, cli_repl(commands))


if __name__ == '__main__':
    asyncio.run(run_demo(load_config(sys.argv[1]) if len(sys.argv) > 1 else None))
