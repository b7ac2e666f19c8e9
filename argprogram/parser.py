"""
argprogram command-line scanner.

scan(program, tokens) consumes the tokens following the program name in a
single left-to-right pass:

1. leading options, matched against the global options;
2. the command name, when the program has commands;
3. command options, matched against global + command options;
4. positional arguments of the active argument list (the command's list when a
   command was dispatched, else the program's).

Token shapes
- short option: exactly two characters, "-" followed by anything but "-" (e.g. -h);
- long option: more than two characters starting with "--" (e.g. --help);
- "--" alone ends option scanning and is consumed; anything else that does not
  look like an option ends option scanning and is left for the next step.
  A "--" before the command name also skips the command option scan.

Option scanning stops early once --help is seen, so a help request never fails
on a missing command or missing arguments.

The scanner is pure: it never prints and never exits. The first user input error
is raised as a CommandException subclass carrying the program and the active
command, which is all the driver needs to render the relevant usage. Parse state
lives in a ParseResult, never on the schema, so one schema can be parsed any
number of times.
"""
import itertools
import shlex
from collections import deque

from .faults import *


class ParseResult:
    """
    Values bound by one scan of a command line.

    State is keyed by Option and Argument identity: an option registered
    under both a short and a long key is a single Option, so querying either
    name answers the same.

    Accessors (name lookups search the active command first, then the program;
    an unknown name is a programming error and raises LookupError)
    - is_option_set(name): whether the option appeared on the command line.
    - option_value(name): the bound value when set, else the declared default.
    - argument_value(name): the bound value, "" when an optional argument is absent.
    - trailing_argument_values(name): the captured tokens as a tuple (maybe empty).
    """

    def __init__(self, program, /):
        self._program = program
        self._command = None
        self._options = {}
        self._arguments = {}
        self._trailing = {}

    @property
    def program(self):
        return self._program

    @property
    def command(self):
        return self._command

    @property
    def command_name(self):
        if not self._program.commands:
            raise LookupError("no command defined")
        return self._command.name if self._command else None

    @property
    def help(self):
        return self.is_option_set("help")

    def _option(self, name):
        for scope in filter(None, (self._command, self._program)):
            try:
                return scope._keys[name]
            except KeyError:
                pass
        raise LookupError(f"unknown option {name!r}")

    def _argument(self, name):
        for scope in filter(None, (self._command, self._program)):
            for argument in scope.arguments:
                if argument.name == name:
                    return argument
        raise LookupError(f"unknown argument {name!r}")

    def is_option_set(self, name, /):
        return self._option(name) in self._options

    def option_value(self, name, /):
        option = self._option(name)
        return self._options.get(option, option.default)

    def argument_value(self, name, /):
        return self._arguments.get(self._argument(name), "")

    def trailing_argument_values(self, name, /):
        return self._trailing.get(self._argument(name), ())

    def __rich_repr__(self):
        yield "command", self._command.name if self._command else None
        yield "options", {option.long or option.short: value for option, value in self._options.items()}
        yield "arguments", {argument.name: value for argument, value in self._arguments.items()}
        yield "trailing", {argument.name: values for argument, values in self._trailing.items()}

    def __repr__(self):
        return f"parse-result({", ".join("%s=%r" % pair for pair in self.__rich_repr__())})"


def _is_option(token):
    short = len(token) == 2 and token[0] == "-" and token[1] != "-"
    long = len(token) > 2 and token.startswith("--")
    return short or long


def _scan_options(result, tokens, keys):
    """
    Consume option tokens from the front of `tokens`, binding them into `result`.

    A value-bearing option consumes the following token verbatim as its value,
    even when that token looks like an option.

    Returns whether scanning ended on a "--" terminator.
    """
    while tokens and _is_option(token := tokens[0]):
        tokens.popleft()
        key = token.lstrip("-")

        try:
            option = keys[key]
        except KeyError:
            raise UnknownOptionError(f"unknown option {key!r}", program=result.program, command=result.command) from None

        if option.flag:
            result._options[option] = ""
            continue

        if not tokens:
            raise MissingOptionValueError(f"missing value for option {key!r}", program=result.program, command=result.command)
        result._options[option] = tokens.popleft()

    if tokens and tokens[0] == "--":
        tokens.popleft()
        return True
    return False


def _scan_command(result, tokens):
    try:
        name = tokens.popleft()
    except IndexError:
        raise MissingCommandError("missing command", program=result.program) from None

    try:
        return result.program.commands[name]
    except KeyError:
        raise UnknownCommandError(f"unknown command {name!r}", program=result.program) from None


def _bind_arguments(result, tokens, arguments):
    """
    Bind the remaining tokens to positional arguments.

    Mandatory arguments take the first tokens, optional ones take what is left
    in order, and a trailing argument captures everything else.
    """
    mandatory = sum(1 for _ in itertools.takewhile(lambda argument: argument.mandatory, arguments))
    if len(tokens) < mandatory:
        raise MissingArgumentsError("missing argument(s)", program=result.program, command=result.command)

    for argument in arguments:
        if argument.trailing:
            result._trailing[argument] = tuple(tokens)
            tokens.clear()
            break
        if not tokens:
            break
        result._arguments[argument] = tokens.popleft()

    if tokens:
        raise TooManyArgumentsError("too many arguments", program=result.program, command=result.command)


def scan(program, tokens, /):
    """
    Scan `tokens` against the schema of `program`.

    Parameters
    - program: Program
    - tokens: Iterable[str] | str
      The arguments following the program name. A string is split with
      shell-like syntax first (shlex.split).

    Returns
    - ParseResult

    Raises
    - CommandException subclasses on the first user input error.
    """
    if isinstance(tokens, str):
        tokens = shlex.split(tokens)
    tokens = deque(tokens)
    if not all(isinstance(token, str) for token in tokens):
        raise TypeError("scan() tokens must be strings")

    result = ParseResult(program)

    terminated = _scan_options(result, tokens, program._keys)
    if result.help:
        return result

    if not program.commands:
        _bind_arguments(result, tokens, program.arguments)
        return result

    result._command = command = _scan_command(result, tokens)

    if not terminated:
        _scan_options(result, tokens, program._keys | command._keys)
        if result.help:
            return result

    _bind_arguments(result, tokens, command.arguments)
    return result


__all__ = (
    "ParseResult",
    "scan",
)
