from rich.pretty import pprint

from argprogram import *

program = Program("example", "an example program with commands", quiet=True, debug=True)

program.add_flag("", "flag-a", "a long flag")
program.add_flag("b", "", "a short flag")
program.add_option("c", "option-c", "value", "foo", "an option with both a short and long name")


@program.command("foo", "foo command")
def foo(program):
    program.info("running command foo")
    program.debug(1, "arguments: %r", program.trailing_argument_values("arg-3"))
    pprint(program.result)


foo.add_flag("d", "flag-d", "a command flag")
foo.add_argument("arg-1", "the first argument")
foo.add_optional_argument("arg-2", "an optional argument")
foo.add_trailing_argument("arg-3", "all trailing arguments")


@program.command
def bar(program):
    """bar command"""
    program.info("running command bar")
    pprint(program.result)


if __name__ == '__main__':
    program.start()
