r"""
argprogram argument specifications.

Overview
- Specs
  • Option: named switch with a short (-x) and/or long (--xxx) name. It either
    carries one value (when a metavar is given) or is a presence-only flag.
  • Argument: positional value, mandatory by default; may be optional (may be
    absent) or trailing (captures every remaining token).

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields listed in __introspectable__ through read-only properties.

Specs are immutable schema: they never hold parse state. Values bound while
scanning a command line live in a separate ParseResult keyed by object identity,
so one schema can be parsed any number of times.

Validation highlights
- Option requires at least one of short/long.
- Short names are exactly one character; names never start with '-' and never
  contain whitespace (the scanner strips leading dashes to find the key).
- Argument names are non-empty and contain no whitespace.
- Argument lists follow the placement rules enforced by _check_placement():
  mandatory arguments come first, then optional ones, then at most one
  trailing argument.

Quick example:
    >>> verbose = Option("v", "verbose", descr="print more")
    >>> verbose.flag, verbose.keys
    (True, ('v', 'verbose'))
    >>> Option("o", "output", "path").label
    '-o, --output <path>'
"""
import functools
import operator
import re

from .utils import *


class ArgumentType(type):
    """
    Metaclass that turns specs into introspectable, read-only records.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in messages and representations.
    - Expose every name listed in __introspectable__ as a read-only property
      backed by the private "_{name}" field (see mirror()).
    - Provide stable, readable __repr__/__rich_repr__ implementations.
    """

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with the introspectable fields.

            Example
            - option(short='h', long='help', metavar='', default='', descr='print help and exit')
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_name(cls, field, value, /):
    """
    Internal: validate a single option/argument name.

    Empty strings are accepted here (an option may lack one of its names);
    callers decide whether emptiness is an error.
    """
    if not isinstance(value, str):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    if value and not re.fullmatch(r"[^\s-]\S*", value):
        raise ValueError(f"{cls.__typename__} {field!r} must not start with '-' or contain whitespace")
    return value


class Option(metaclass=ArgumentType):
    """
    Named option specification.

    An option is matched on the command line either as "-<short>" or as
    "--<long>". When a metavar is set, the token following the option is
    consumed as its value; otherwise the option is a boolean flag.

    Properties
    - short, long, metavar, default, descr: sanitized construction fields.
    - flag: True when the option carries no value.
    - keys: the non-empty names (short first), i.e. the lookup keys.
    - label: the signature rendered in the options table.
    - sortkey: short name if present, else long name.
    """

    __introspectable__ = (
        "short",
        "long",
        "metavar",
        "default",
        "descr",
    )

    def __new__(cls, short="", long="", metavar="", default="", descr=""):
        if not short and not long:
            raise TypeError(f"{cls.__typename__} must specify a short or a long name")

        _sanitize_name(cls, "short", short)
        _sanitize_name(cls, "long", long)
        if len(short) > 1:
            raise ValueError(f"{cls.__typename__} 'short' must be a single character")
        if short == long:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")

        for field, value in (("metavar", metavar), ("default", default), ("descr", descr)):
            if not isinstance(value, str):
                raise TypeError(f"{cls.__typename__} {field!r} must be a string")

        self = super().__new__(cls)
        self._short = short
        self._long = long
        self._metavar = metavar.strip()
        self._default = default
        self._descr = descr.strip()
        return self

    @property
    def flag(self):
        return not self._metavar

    @property
    def keys(self):
        return tuple(name for name in (self._short, self._long) if name)

    @property
    def sortkey(self):
        return self._short or self._long

    @property
    def label(self):
        """
        Signature shown in usage tables.

        Forms
        - "-s, --long"   both names
        - "-s"           short only
        - "    --long"   long only (blank placeholder for the short name and separator)
        A value-bearing option appends " <metavar>".
        """
        label = "-" + self._short if self._short else "  "
        if self._long:
            label += (", " if self._short else "  ") + "--" + self._long
        if self._metavar:
            label += f" <{self._metavar}>"
        return label


class Argument(metaclass=ArgumentType):
    """
    Positional argument specification.

    Modifiers
    - optional: the argument may be absent; it binds only when tokens remain.
    - trailing: the argument captures all remaining tokens (zero or more) as an
      ordered tuple instead of a single value.
    """

    __introspectable__ = (
        "name",
        "descr",
        "optional",
        "trailing",
    )

    def __new__(cls, name, descr="", *, optional=False, trailing=False):
        if not _sanitize_name(cls, "name", name):
            raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
        if not isinstance(descr, str):
            raise TypeError(f"{cls.__typename__} 'descr' must be a string")

        self = super().__new__(cls)
        self._name = name
        self._descr = descr.strip()
        self._optional = bool(optional)
        self._trailing = bool(trailing)
        return self

    @property
    def mandatory(self):
        return not (self._optional or self._trailing)

    @property
    def signature(self):
        """
        Positional rendering used in usage lines: <name>, [<name>] or [<name>...].
        """
        if self._trailing:
            return f"[<{self._name}>...]"
        if self._optional:
            return f"[<{self._name}>]"
        return f"<{self._name}>"


def _check_placement(arguments, argument, /):
    """
    Internal: validate that `argument` may be appended to `arguments`.

    Rules
    - nothing may follow a trailing argument (and only one may exist);
    - a mandatory argument may not follow an optional one.

    Raises
    - ValueError describing the violated rule.
    """
    if not arguments:
        return
    last = arguments[-1]
    if last.trailing:
        if argument.trailing:
            raise ValueError("cannot add multiple trailing arguments")
        raise ValueError(f"cannot add argument {argument.name!r} after trailing argument {last.name!r}")
    if last.optional and argument.mandatory:
        raise ValueError(f"cannot add non-optional argument {argument.name!r} after optional argument {last.name!r}")


__all__ = (
    "Option",
    "Argument",
)
