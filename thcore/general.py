"""Error reporting, argument checking and small numeric helpers."""

from __future__ import annotations

import math
import threading
from typing import Callable, NoReturn, Optional

ErrorHandler = Callable[[str], None]
ArgErrorHandler = Callable[[int, Optional[str]], None]

_MESSAGE_LIMIT = 1023


class TorchError(Exception):
    """Raised when an operation of the library fails."""


class ArgumentError(TorchError):
    """Raised when an argument check fails."""

    def __init__(self, arg_number: int, message: Optional[str] = None) -> None:
        self.arg_number = arg_number
        self.message = message
        if message is not None:
            text = f"Invalid argument {arg_number}: {message}"
        else:
            text = f"Invalid argument {arg_number}"
        super().__init__(text)


def _default_error_handler(message: str) -> None:
    raise TorchError(message)


def _default_arg_error_handler(arg_number: int, message: Optional[str]) -> None:
    raise ArgumentError(arg_number, message)


_handlers = threading.local()


def _error_handler() -> ErrorHandler:
    return getattr(_handlers, "error", _default_error_handler)


def _arg_error_handler() -> ArgErrorHandler:
    return getattr(_handlers, "arg_error", _default_arg_error_handler)


def raise_error(message: str) -> NoReturn:
    """Report an error through the current thread's error handler.

    The message is cut to 1023 characters. If the handler returns instead
    of raising, a TorchError is raised.
    """
    text = str(message)[:_MESSAGE_LIMIT]
    _error_handler()(text)
    raise TorchError(text)


def arg_check(condition: object, arg_number: int, message: Optional[str]) -> None:
    """Report an invalid argument unless ``condition`` holds."""
    if condition:
        return
    _arg_error_handler()(arg_number, message)
    raise ArgumentError(arg_number, message)


def set_error_handler(handler: Optional[ErrorHandler]) -> None:
    """Install a per-thread error handler; ``None`` restores the default."""
    _handlers.error = handler if handler is not None else _default_error_handler


def set_arg_error_handler(handler: Optional[ArgErrorHandler]) -> None:
    """Install a per-thread argument error handler; ``None`` restores the default."""
    _handlers.arg_error = handler if handler is not None else _default_arg_error_handler


def log1p(x: float) -> float:
    """Return log(1 + x), accurate for small x."""
    return math.log1p(x)