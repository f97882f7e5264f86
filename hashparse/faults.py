"""
Hashparse faults (errors and warnings) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing issue.
- ParseException / ParseWarning: base types that carry a message plus read-only
  options and know how to render themselves with rich.
- NumberOfValuesError / OutOfContextError: the two terminal parse errors.
- UnknownParentWarning: registration-time notice for a child whose parent
  identifier is not registered (yet).
- trigger(): central entry point to surface a fault (raise, warn, or print in shell mode).

Integration
- Parser.parse() raises faults through trigger(); invoke() re-triggers them in
  shell mode so they are printed on stderr and the process exits with code 1.
- Hosts can tune the output from __main__: __styles__ (palette overrides),
  __codes__ (code labels) and __prog__ (program name in headers).
"""
import copy
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - parse errors (211xx)
      • NUMBER_OF_VALUES, OUT_OF_CONTEXT
    - registration warnings (221xx)
      • UNKNOWN_PARENT
    """
    # --- parse errors (21xxx) ---
    NUMBER_OF_VALUES = 21101
    OUT_OF_CONTEXT   = 21102

    # --- warnings (22xxx) ---
    UNKNOWN_PARENT   = 22101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, title):
    main = __import__("__main__")
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = fault.options.get("colorful", True)
    fancy = fault.options.get("fancy", False)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    prog = text(getattr(main, "__prog__", fault.options.get("prog") or "hashparse"), "prog-name")
    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(fault.options["code"].normalize(), "code"),
        " | ",
        text(fault.options["title"].title(), title),
        " ]"
    )
    message = text(fault.message, title.replace("title", "message"))
    hint = Text.assemble(text(" → ", "hint-arrow"), text(fault.options.get("hint"), "hint"))

    if fancy:
        return Panel(Group(message, hint), title=header, title_align="left")
    return Group(header, message, hint)


class ParseException(Exception):
    """
    base class for faults that stop a parse pass.

    options (read-only mapping)
    - title, code, hint: rendering copy (set by subclasses).
    - prog, colorful, fancy: rendering switches (set by the parser).
    - shell: when true, __trigger__ prints and exits instead of raising.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        }, "error-title")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class NumberOfValuesError(ParseException):
    """
    a non-optional template matched but fewer values than its arity were
    available before the end of input or the next recognized argument.
    """

    def __init__(self, token, got, expected, /, **options):
        self.token = token
        self.got = got
        self.expected = expected
        super().__init__(
            "in argument %r, expected %d value/s, received %d" % (token, expected, got),
            **{
                "title": "number of values",
                "code": FaultCode.NUMBER_OF_VALUES,
                "hint": "supply %d more value/s after %r" % (expected - got, token),
            } | options
        )

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.token, self.got, self.expected, **{**self.options, **overrides})


class OutOfContextError(ParseException):
    """
    a token names a subcommand whose parent command was not matched earlier
    in the same pass.
    """

    def __init__(self, token, parent, /, **options):
        self.token = token
        self.parent = parent
        super().__init__(
            "out of context argument, %r is a subcommand of %r and %r is not present in the command" % (
                token, parent, parent
            ),
            **{
                "title": "out of context",
                "code": FaultCode.OUT_OF_CONTEXT,
                "hint": "place %r before %r" % (parent, token),
            } | options
        )

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.token, self.parent, **{**self.options, **overrides})


class ParseWarning(Warning):
    """
    base class for non-fatal notices; rendered like ParseException.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",

            # body
            "warning-message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        }, "warning-title")

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=self.options.get("stacklevel", 2))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownParentWarning(ParseWarning):
    """
    a child template was registered under an identifier that is not registered.
    """

    def __init__(self, parent, /, **options):
        self.parent = parent
        super().__init__(
            "parent identifier %d is not registered" % parent,
            **{
                "title": "unknown parent",
                "code": FaultCode.UNKNOWN_PARENT,
                "hint": "register the parent first; its subcommands are reported out of context until then",
            } | options
        )

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.parent, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into a copy of the fault via copy.replace() before triggering.
    - exceptions are raised and warnings go through the warnings module, unless
      shell=True, in which case both are printed on stderr (exceptions then exit 1).
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
    "ParseException",
    "NumberOfValuesError",
    "OutOfContextError",
    "ParseWarning",
    "UnknownParentWarning",
    "trigger",
)
