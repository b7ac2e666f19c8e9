"""
argprogram command layer: declare a program, parse its command line, run it.

What this module provides
- Program: the root schema. It owns the global options, either a main callback
  with top-level positional arguments or a set of commands, and acts as the
  process driver (parse, report, dispatch).
- Command: one sub-command with its own options, positional arguments and main
  callback. Nesting beyond one level is not supported.

Quick start
    from argprogram import Program

    program = Program("tool", "an example tool")
    program.add_flag("v", "verbose", "print more")
    program.add_option("o", "output", "path", "-", "output file")

    @program.command("copy", "copy files")
    def copy(program):
        program.info("copying %s", program.trailing_argument_values("source"))

    copy.add_argument("target", "the destination")
    copy.add_trailing_argument("source", "the files to copy")

    if __name__ == "__main__":
        program.start()

Registration rules (checked immediately; violations are configuration defects
raised as TypeError/ValueError/LookupError and are never reported to the user)
- an option needs a short or a long name;
- option keys are unique in their scope and the global scope: a command option
  may not reuse a global key, and a global option may not reuse a command key;
- a program has either a main callback or commands, never both;
- positional arguments follow the placement rules (mandatory, then optional,
  then at most one trailing argument);
- command-scoped registration by name requires an existing command.

Built-ins
- -h/--help on every program; prints the usage of the active view and exits 0.
- -q/--quiet (Program(quiet=True)) silences info().
- --debug <level> (Program(debug=True)) enables debug() messages up to level.
- a "help" command, synthesized for programs with commands, printing the usage
  of the commands named as its arguments.

Driver
- parse(tokens) is pure and returns a ParseResult (or raises a CommandException).
- parse_command_line(), run() and start() are the only places that print faults
  or terminate the process.
"""
import inspect
import os.path
import re
import sys

from rich.console import Console
from rich.text import Text

from .arguments import Argument, ArgumentType, Option, _check_placement
from .faults import *
from .parser import scan
from .usage import render
from .utils import *

console = Console(stderr=True)

_DEBUG_LEVEL_MAX = 2 ** 31 - 1


def _help(program, /):
    """
    Entry callback of the built-in "help" command.

    Prints the usage of every command named as an argument, or the program
    usage when none is given. Names are all checked before anything is printed.
    """
    commands = []
    for name in program.trailing_argument_values("command"):
        try:
            commands.append(program.commands[name])
        except KeyError:
            raise UnknownCommandError(f"unknown command {name!r}", program=program, usage=False) from None

    if not commands:
        program.print_usage()
        return

    for index, command in enumerate(commands):
        if index > 0:
            console.line(2)
        program.print_usage(command)


class CommandType(ArgumentType):
    """
    Metaclass for programs and commands.

    Shares the introspection plumbing of argument specs: __typename__, read-only
    properties for __introspectable__ names, and stable __repr__/__rich_repr__.
    """


class Scope(metaclass=CommandType):
    """
    Common registration surface of programs and commands.

    A scope owns an option arena (each Option stored once, in registration
    order), a key mapping where the short and the long name of an option both
    reference the same Option, and an ordered list of positional arguments.
    """

    __introspectable__ = ()

    def _setup(self):
        self._options = []
        self._keys = {}
        self._arguments = []

    def _register(self, option, /):
        raise NotImplementedError

    def add_option(self, short, long, metavar, default="", descr=""):
        """
        Register a value-bearing option and return it.

        An empty metavar registers a flag instead (see add_flag()).
        """
        option = Option(short, long, metavar, default, descr)
        self._register(option)
        return option

    def add_flag(self, short, long, descr=""):
        """
        Register a presence-only option and return it.
        """
        return self.add_option(short, long, "", "", descr)

    def _append(self, argument):
        if any(other.name == argument.name for other in self._arguments):
            raise ValueError(f"duplicate argument name {argument.name!r}")
        _check_placement(self._arguments, argument)
        self._arguments.append(argument)
        return argument

    def add_argument(self, name, descr=""):
        return self._append(Argument(name, descr))

    def add_optional_argument(self, name, descr=""):
        return self._append(Argument(name, descr, optional=True))

    def add_trailing_argument(self, name, descr=""):
        return self._append(Argument(name, descr, trailing=True))


def _sanitize_identity(cls, name, descr, /):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not re.fullmatch(r"[^\s-]\S*", name):
        raise ValueError(f"{cls.__typename__} 'name' must be non-empty, not start with '-' and contain no whitespace")
    if not isinstance(descr, str):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    return name, descr.strip()


class Command(Scope):
    """
    A sub-command of a Program.

    Options registered on a command are matched only after the command name on
    the command line, together with the global options. The owning program is
    kept to enforce key uniqueness against the global scope.
    """

    __introspectable__ = (
        "name",
        "descr",
        "main",
        "options",
        "arguments",
    )

    def __init__(self, program, name, descr="", main=Unset, /):
        if not isinstance(program, Program):
            raise TypeError(f"{type(self).__typename__} 'program' must be a program")
        if not callable(main):
            raise TypeError(f"{type(self).__typename__} 'main' must be callable")
        self._name, self._descr = _sanitize_identity(type(self), name, descr)
        self._main = main
        self._program = program
        self._setup()

    @property
    def program(self):
        return self._program

    def _register(self, option, /):
        self._program._register_option(option, self)


class Program(Scope):
    """
    Root schema and process driver.

    Parameters
    - name: str | Unset
      Program name shown in usage lines. Defaults to the basename of sys.argv[0].
    - descr: str
      Short description, rendered as a sentence below the usage line.
    - main: Callable[[Program], Any] | Unset
      Direct entry callback; mutually exclusive with commands.
    - quiet: bool
      Register the -q/--quiet built-in.
    - debug: bool
      Register the --debug <level> built-in.
    - colorful: bool
      Style usage and faults with the rich palette.

    Accessors
    - after parse_command_line(), is_option_set(), option_value(),
      argument_value(), trailing_argument_values() and command_name answer
      from the stored ParseResult.
    """

    __introspectable__ = (
        "name",
        "descr",
        "main",
        "commands",
        "options",
        "arguments",
        "colorful",
    )

    def __init__(self, name=Unset, descr="", /, main=Unset, *, quiet=False, debug=False, colorful=False):
        self._name, self._descr = _sanitize_identity(
            type(self), coalesce(name, os.path.basename(sys.argv[0])), descr
        )
        self._setup()
        self._main = Unset
        self._commands = {}
        self._colorful = bool(colorful)
        self._quiet = bool(quiet)
        self._debug = bool(debug)
        self._result = Unset
        self._silent = False
        self._debug_level = 0

        self.add_flag("h", "help", "print help and exit")
        if self._quiet:
            self.add_flag("q", "quiet", "do not print status and information messages")
        if self._debug:
            self.add_option("", "debug", "level", "0", "print debug messages")

        if main is not Unset:
            self.set_main(main)

    # ── registration ────────────────────────────────────────────────────────

    def _register_option(self, option, command=None, /):
        scopes = [self] if command is None else [command, self]
        if command is None:
            scopes.extend(self._commands.values())
        for key in option.keys:
            if any(key in scope._keys for scope in scopes):
                raise ValueError(f"duplicate option name {key!r}")
        owner = command or self
        owner._options.append(option)
        owner._keys.update(dict.fromkeys(option.keys, option))

    def _register(self, option, /):
        self._register_option(option)

    def set_main(self, main, /):
        """
        Set the direct entry callback; returns it so it can be used as a decorator.
        """
        if self._commands:
            raise ValueError("cannot have a main function with commands")
        if not callable(main):
            raise TypeError(f"{type(self).__typename__} 'main' must be callable")
        self._main = main
        return main

    def add_command(self, name, descr, main):
        """
        Register a command and return it.
        """
        if self._main is not Unset:
            raise ValueError("cannot have a main function with commands")
        command = Command(self, name, descr, main)
        if self._commands.setdefault(command.name, command) is not command:
            raise ValueError(f"{type(command).__typename__} name {command.name!r} is already in use")
        return command

    def command(self, name=Unset, descr=Unset, /):
        """
        Decorator form of add_command().

        The name defaults to the function name (underscores become hyphens) and
        the description to its docstring. Usable bare (@program.command) or
        called (@program.command("name", "description")).
        """
        if callable(name):
            return self.command()(name)

        def wrapper(main):
            return self.add_command(
                coalesce(name, main.__name__.strip("_").replace("_", "-")),
                coalesce(descr, inspect.getdoc(main) or ""),
                main,
            )

        return rename(wrapper, "command")

    def _lookup(self, name):
        try:
            return self._commands[name]
        except KeyError:
            raise LookupError(f"unknown command {name!r}") from None

    def add_command_option(self, command, short, long, metavar, default="", descr=""):
        return self._lookup(command).add_option(short, long, metavar, default, descr)

    def add_command_flag(self, command, short, long, descr=""):
        return self._lookup(command).add_flag(short, long, descr)

    def add_command_argument(self, command, name, descr=""):
        return self._lookup(command).add_argument(name, descr)

    def add_command_optional_argument(self, command, name, descr=""):
        return self._lookup(command).add_optional_argument(name, descr)

    def add_command_trailing_argument(self, command, name, descr=""):
        return self._lookup(command).add_trailing_argument(name, descr)

    def _synthesize(self):
        """
        Add the built-in "help" command once the program has commands.
        """
        if not self._commands or "help" in self._commands:
            return
        self.add_command("help", "print help and exit", _help).add_trailing_argument(
            "command", "the name of the command(s)"
        )

    # ── usage ───────────────────────────────────────────────────────────────

    def usage(self, command=None, /):
        """
        Return the usage text (rich Text) of the program, or of a command given
        by object or by name.
        """
        self._synthesize()
        if isinstance(command, str):
            command = self._lookup(command)
        return render(self, command, colorful=self._colorful)

    def print_usage(self, command=None, /):
        console.print(self.usage(command), soft_wrap=True)

    # ── diagnostics ─────────────────────────────────────────────────────────

    @property
    def quiet(self):
        return self._silent

    @property
    def debug_level(self):
        return self._debug_level

    def info(self, message, /, *args):
        if self._silent:
            return
        console.print(Text(message % args if args else message), soft_wrap=True)

    def debug(self, level, message, /, *args):
        if level > self._debug_level:
            return
        console.print(Text(message % args if args else message), soft_wrap=True)

    def error(self, message, /, *args):
        style = "bold #FF4DA6" if self._colorful else ""
        console.print(Text.assemble(("error", style), ": ", message % args if args else message), soft_wrap=True)

    def fatal(self, message, /, *args):
        self.error(message, *args)
        sys.exit(1)

    # ── parsing ─────────────────────────────────────────────────────────────

    def parse(self, tokens, /):
        """
        Scan `tokens` (the arguments after the program name) and return a
        ParseResult. Never prints, never exits; user input errors are raised
        as CommandException subclasses.
        """
        self._synthesize()
        return scan(self, tokens)

    def _configure(self, result):
        """
        Apply the quiet/debug built-ins from a parse result.
        """
        self._silent = self._quiet and result.is_option_set("quiet")
        self._debug_level = 0
        if not (self._debug and result.is_option_set("debug")):
            return
        value = result.option_value("debug")
        if not re.fullmatch(r"[+-]?0*[0-9]{1,10}", value) or not 0 <= int(value) <= _DEBUG_LEVEL_MAX:
            raise InvalidOptionValueError(f"invalid debug level {value!r}", program=self, command=result.command)
        self._debug_level = int(value)

    def parse_command_line(self, tokens=Unset, /):
        """
        Parse the process command line (or `tokens`) and store the result.

        - --help prints the usage of the active view and exits with status 0;
        - a user input error prints "error: <message>", a blank line and the
          relevant usage, then exits with status 1.
        """
        try:
            result = self.parse(coalesce(tokens, sys.argv[1:]))
            if result.help:
                self.print_usage(result.command)
                sys.exit(0)
            self._configure(result)
        except CommandException as fault:
            trigger(fault, colorful=self._colorful)
        self._result = result
        return result

    def run(self):
        """
        Call the entry callback of the active command (or the program main)
        with the program. A CommandException raised by the callback is
        reported like a parse error.
        """
        result = self.result
        main = result.command.main if result.command else self._main
        if main is Unset:
            raise ValueError("program has no main function")
        try:
            return main(self)
        except CommandException as fault:
            trigger(fault, colorful=self._colorful)

    def start(self, tokens=Unset, /):
        """
        parse_command_line() followed by run().
        """
        self.parse_command_line(tokens)
        return self.run()

    # ── accessors ───────────────────────────────────────────────────────────

    @property
    def result(self):
        if self._result is Unset:
            raise RuntimeError("command line has not been parsed")
        return self._result

    @property
    def command_name(self):
        return self.result.command_name

    def is_option_set(self, name, /):
        return self.result.is_option_set(name)

    def option_value(self, name, /):
        return self.result.option_value(name)

    def argument_value(self, name, /):
        return self.result.argument_value(name)

    def trailing_argument_values(self, name, /):
        return self.result.trailing_argument_values(name)


__all__ = (
    "Command",
    "Program",
)
