"""
argprogram faults (user input errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing error
  raised while scanning a command line. Codes are grouped by domain to keep
  logs/searches predictable.
- CommandException: base type that carries a message + options and knows how to
  render itself: "error: <message>", a blank line, then the relevant usage block.
- trigger(): central entry point to surface a fault (print it and terminate).

Two tiers of errors
- configuration defects (bad registrations, unknown accessor names) are plain
  TypeError/ValueError/LookupError raised where they happen; they are bugs in the
  host program and are never rendered here.
- user input defects are CommandException subclasses raised by the scanner. The
  scanner never prints; the Program driver catches them and calls trigger().

Options understood by the renderer
- program: the Program whose usage is shown.
- command: the active Command (None for the program root).
- usage: bool, append the usage block (default True).
- colorful: bool, apply the rich palette (overridable via __styles__ in __main__).
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .usage import render
from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the cli (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • MISSING_COMMAND, UNKNOWN_COMMAND
    - options (1111x)
      • UNKNOWN_OPTION, MISSING_OPTION_VALUE, INVALID_OPTION_VALUE
    - positionals (1112x)
      • MISSING_ARGUMENTS, TOO_MANY_ARGUMENTS
    """
    # --- routing errors (11xxx) ---
    MISSING_COMMAND             = 11101
    UNKNOWN_COMMAND             = 11102

    # --- option errors (11xxx) ---
    UNKNOWN_OPTION              = 11111
    MISSING_OPTION_VALUE        = 11112
    INVALID_OPTION_VALUE        = 11113

    # --- positional errors (11xxx) ---
    MISSING_ARGUMENTS           = 11121
    TOO_MANY_ARGUMENTS          = 11122


class CommandException(Exception):
    code = Unset

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        styles = defaultdict(str, {
            "error-label": "bold #FF4DA6",  # friendly pinky label
            "error-message": "#C8C8D0",  # soft light gray message
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self.options.get("colorful", False) else ""

        renders = [Text.assemble(("error", styler("error-label")), ": ", (str(self.message), styler("error-message")))]

        if self.options.get("usage", True) and (program := self.options.get("program")) is not None:
            renders.append(Text(""))
            renders.append(render(program, self.options.get("command"), colorful=self.options.get("colorful", False)))

        return Group(*renders)

    def __trigger__(self) -> None:
        console.print(self, soft_wrap=True)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MissingCommandError(CommandException):
    code = FaultCode.MISSING_COMMAND

class UnknownCommandError(CommandException):
    code = FaultCode.UNKNOWN_COMMAND

class UnknownOptionError(CommandException):
    code = FaultCode.UNKNOWN_OPTION

class MissingOptionValueError(CommandException):
    code = FaultCode.MISSING_OPTION_VALUE

class InvalidOptionValueError(CommandException):
    code = FaultCode.INVALID_OPTION_VALUE

class MissingArgumentsError(CommandException):
    code = FaultCode.MISSING_ARGUMENTS

class TooManyArgumentsError(CommandException):
    code = FaultCode.TOO_MANY_ARGUMENTS


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - the default __trigger__ prints the fault to the diagnostic stream and exits
      with status 1; it never returns.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "CommandException",
    "MissingCommandError",
    "UnknownCommandError",
    "UnknownOptionError",
    "MissingOptionValueError",
    "InvalidOptionValueError",
    "MissingArgumentsError",
    "TooManyArgumentsError",
    "trigger",
)
