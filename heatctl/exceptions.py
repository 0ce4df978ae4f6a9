"""Exceptions raised by heatctl."""

_exception_notes = hasattr(BaseException, 'add_note')

__all__ = [
    'add_note',
    'HeatctlError', 'HeatctlConfigError', 'HeatctlInvalidState', 'InvalidThreshold']

class HeatctlError(Exception):
    """Base class for heatctl exceptions."""

class HeatctlConfigError(HeatctlError, ValueError):
    """Invalid controller configuration."""

class HeatctlInvalidState(HeatctlError):
    """Invalid state error."""

class InvalidThreshold(HeatctlError, ValueError):
    """Threshold payload is not a finite number."""

def add_note(exc: BaseException, note:str) -> None:
    """Add a note to an exception."""
    if _exception_notes:
        # supported natively in Python >= 3.11
        exc.add_note(note)
    elif exc.args and isinstance(exc.args[0], str):
        # fallback: prepend the note to the error message
        exc.args = (f"[{note}] {exc.args[0]}", *exc.args[1:])
