"""
Run the control loop periodically in asyncio.

The first control period starts immediately, the next ones follow
at a fixed rate given by the timer_interval configuration item.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
import logging
import signal
from types import FrameType
from typing import NoReturn, Optional
import weakref

from .exceptions import add_note, HeatctlInvalidState
from .loop import ControlLoop


__all__ = ['run']

_logger = logging.getLogger(__package__)
_running: weakref.WeakSet[ControlLoop] = weakref.WeakSet()


async def _control_task(control: ControlLoop) -> NoReturn:
    """Call control.tick() every timer_interval seconds."""
    loop = asyncio.get_running_loop()
    interval = control.config.timer_interval
    next_tick = loop.time()
    while True:
        control.tick()
        next_tick += interval
        delay = next_tick - loop.time()
        if delay < 0.0:
            # periods are skipped, not made up for
            control.log_warning("control period overrun by %.3f s", -delay)
            next_tick = loop.time()
            delay = 0.0
        await asyncio.sleep(delay)


class _TerminatingSignal:
    """
    A context manager for catching a signal terminating the run.
    """

    def __init__(self, signo: Optional[int], terminate: Callable[[], object]):
        self._signo = signo
        self._terminate = terminate
        if signo is None:
            return
        self._saved_handler: Callable[[int, FrameType|None], None]|int|None
        self._signame = signal.strsignal(signo) or f"#{signo}"

    def __enter__(self):
        if self._signo is None:
            return
        self._saved_handler = signal.getsignal(self._signo)
        if self._saved_handler is None:
            _logger.warning(
                "An incompatible handler for signal %s was found; "
                + "heatctl will not catch this signal.",
                self._signame
                )
        else:
            signal.signal(self._signo, self._handler)

    def __exit__(self, _exc_type, _exc_val, _exc_tb):
        if self._signo is not None and self._saved_handler is not None:
            signal.signal(self._signo, self._saved_handler)
        return False

    def _handler(self, signo: int, frame: FrameType|None) -> None:
        """A signal handler."""
        # the _threadsafe variant of call_soon wakes up the event loop
        call_soon = asyncio.get_running_loop().call_soon_threadsafe
        call_soon(_logger.warning, "Signal %r caught", self._signame)
        call_soon(self._terminate)
        if callable(self._saved_handler):
            self._saved_handler(signo, frame)


async def run(
        control: ControlLoop, *coroutines: Coroutine, catch_sigterm: bool = True) -> None:
    """
    Run the control loop and supporting coroutines as tasks.

    If any of the tasks exits, cancel all remaining tasks.
    The heater is switched off before returning.

    Return None if all tasks exited normally or were cancelled.
    If any task raises, re-raise the first error.
    """
    if control in _running:
        raise HeatctlInvalidState(f"{control} is already running")
    _running.add(control)
    try:
        ctrltask = asyncio.create_task(_control_task(control), name="heatctl: control loop")
        all_tasks = [ctrltask]
        all_tasks.extend(
            asyncio.create_task(coro, name=f"heatctl: supporting task #{i}")
            for i, coro in enumerate(coroutines, start=1))
        with _TerminatingSignal(signal.SIGTERM if catch_sigterm else None, ctrltask.cancel):
            try:
                await asyncio.wait(all_tasks, return_when=asyncio.FIRST_COMPLETED)
            except asyncio.CancelledError:
                pass
            for task in all_tasks:
                if not task.done():
                    task.cancel()

        # collect exceptions
        run_error = None
        for tnum, task in enumerate(all_tasks):   # ctrltask, coro#1, coro#2, ...
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception as err:
                if tnum == 0:
                    msg = "Control loop failed"
                else:
                    msg = (
                        "Failure in the supporting coroutine "
                        + f"#{tnum} '{coroutines[tnum-1].__name__}'")
                    add_note(err, msg)
                _logger.error("%s: %r", msg, err)
                if run_error is None:
                    run_error = err
    finally:
        control.shutdown()
        _running.discard(control)
    if run_error is not None:
        raise run_error
