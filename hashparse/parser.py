"""
Hashparse parser: register templates, match tokens, render help.

What this module provides
- Parser: owns a Registry and exposes
  • registration: add(), add_template(), add_subcommand(), add_subcommand_template().
  • matching: parse(), a single left-to-right pass over the tokens.
  • help: format_help() / print_help(), a listing of the registered templates
    nested by parent, rendered with rich.
- invoke(parser, prompt): runner that prints parse faults and exits with code 1.

Matching, in short
- The pass keeps a "context": the identifier of the latest matched template
  (0 before any match). A token is resolved under the context first, then
  under the top level, so a subcommand alias only resolves after its parent.
- A match consumes up to `arity` following tokens as values, stopping before
  any token that is itself registered under the new context or the top level.
- A token that resolves nowhere but belongs to a subcommand somewhere is an
  out-of-context fault; any other unknown token is ignored.

Quick start
    from hashparse import Parser, template

    parser = Parser("calc", "hashparse example calculator")

    @template("add", "+", arity=99, optional=True, descr="add the numbers supplied")
    def add(*numbers):
        print(sum(map(float, numbers)))

    parser.add_template(add)
    parser.parse(["add", "2", "3", "4"])   # prints 9.0
"""
import itertools
import os.path
import shlex
import sys
from collections import defaultdict
from collections.abc import Iterable

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .faults import *
from .registry import Registry
from .results import *
from .templates import Template
from .utils import *

# Reserved aliases: always render help, whatever is registered.
HELP_ALIASES = ("-h", "--help")


def _process_strings(metadata):
    """
    Normalize scalar string metadata fields.

    - each value must be str | Unset.
    - strings are trimmed; empty strings are rejected.
    - Unset resolves to None.
    """
    for name in ("name", "descr", "author", "usage", "help"):
        if not isinstance(object := metadata[name], str | Unset):
            raise TypeError(f"parser {name!r} must be a string")
        elif isinstance(object, str) and not (object := object.strip()):
            raise ValueError(f"parser {name!r} cannot be empty")
        metadata[name] = coalesce(object)


def _aliases(aliases):
    # add("--say", ...) and add(("-s", "--say"), ...) are both accepted
    if isinstance(aliases, str):
        return (aliases,)
    if isinstance(aliases, Iterable):
        return tuple(aliases)
    raise TypeError("aliases must be a string or an iterable of strings")


class Parser:
    """
    Template registry plus the matching pass and help rendering.

    Configuration
    - name, descr, author, usage: help header; name defaults to the script name.
    - help: an explicit help text replacing the generated listing.
    - exit_on_help: raise SystemExit(0) after rendering help (default True);
      when False the pass carries on after the help token.
    - colorful, fancy: rich styling switches for help and fault rendering.
      Palette entries can be overridden through __main__.__styles__.
    """

    name = mirror("name")
    descr = mirror("descr")
    author = mirror("author")
    usage = mirror("usage")
    help = mirror("help")
    exit_on_help = mirror("exit_on_help")
    colorful = mirror("colorful")
    fancy = mirror("fancy")
    registry = mirror("registry")

    def __init__(
            self,
            name=Unset,
            descr=Unset,
            author=Unset,
            usage=Unset,
            help=Unset,
            *,
            exit_on_help=True,
            colorful=True,
            fancy=False
    ):
        metadata = {
            "name": coalesce(name, os.path.basename(sys.argv[0]) or Unset),
            "descr": descr,
            "author": author,
            "usage": usage,
            "help": help,
            "exit_on_help": bool(exit_on_help),
            "colorful": bool(colorful),
            "fancy": bool(fancy),
        }
        _process_strings(metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._registry = Registry()

    # ── Registration ──────────────────────────────────────────────────────────

    def add(self, aliases, arity, descr=Unset, /):
        """
        Register a top-level, non-optional template built from its fields.
        """
        return self._registry.register(Template(*_aliases(aliases), arity=arity, descr=descr))

    def add_template(self, template, /):
        return self._registry.register(template)

    def add_subcommand(self, parent, aliases, arity, descr=Unset, /):
        """
        Register a non-optional template as a subcommand of `parent`.
        """
        return self._registry.register_child(parent, Template(*_aliases(aliases), arity=arity, descr=descr))

    def add_subcommand_template(self, parent, template, /):
        return self._registry.register_child(parent, template)

    # ── Matching ──────────────────────────────────────────────────────────────

    def _tokenize(self, prompt):
        """
        Normalize a prompt into a list of tokens.

        - Unset: sys.argv[1:] (the program name is not a token).
        - str: shell-like string split with shlex.split.
        - Iterable[str]: used as-is; every item must be a string.
        """
        if prompt is Unset:
            return sys.argv[1:]
        if isinstance(prompt, str):
            return shlex.split(prompt)
        if isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("parse() argument must be a string or an iterable of strings")
            return tokens
        raise TypeError("parse() argument must be a string or an iterable of strings")

    def _consume(self, template, tokens, index):
        """
        Collect up to template.arity values following position `index`.

        Stops before the first token registered under the template's own
        context or the top level; any other text is a value.
        """
        values = []
        for token in itertools.islice(tokens, index + 1, index + 1 + template.arity):
            if (template.identifier, token) in self._registry or (0, token) in self._registry:
                break
            values.append(token)
        return values

    def parse(self, prompt=Unset, /):
        """
        Match the tokens against the registered templates.

        Every successful match fires the template's callback with its values,
        in token order. The latest occurrence of a template is the one kept in
        the result maps; all occurrences are listed in `occurrences`.

        Raises
        - NumberOfValuesError: a non-optional template got fewer values than its arity.
        - OutOfContextError: a subcommand appeared without its parent before it.
        - SystemExit(0): help was requested and exit_on_help is set.
        - anything raised by a callback, unchanged.
        """
        tokens = self._tokenize(prompt)
        options = {"prog": self.name, "colorful": self.colorful, "fancy": self.fancy}

        keys = {}
        ids = {}
        occurrences = []
        context = 0
        index = 0
        while index < len(tokens):
            token = tokens[index]

            if token in HELP_ALIASES:
                self.print_help()
                if self.exit_on_help:
                    sys.exit(0)

            if (template := self._registry.find(context, token)) is not None:
                key = context, token
            elif (template := self._registry.find_top_level(token)) is not None:
                key = 0, token
            else:
                owner = self._registry.find_anywhere(token)
                if owner is not None and owner.parent:
                    parent = self._registry.get(owner.parent)
                    trigger(OutOfContextError(
                        token, parent.aliases[0] if parent is not None else "#%d" % owner.parent
                    ), **options)
                index += 1
                continue

            context = template.identifier
            values = self._consume(template, tokens, index)
            if len(values) < template.arity and not template.optional:
                trigger(NumberOfValuesError(token, len(values), template.arity), **options)

            template(*values)
            keys[key] = ids[template.identifier] = ParsedArgument(template.identifier, values)
            occurrences.append(Occurrence(index, token, key[0], template.identifier, values))
            index += 1 + len(values)

        return ParsedArguments(keys, ids, occurrences)

    # ── Help ──────────────────────────────────────────────────────────────────

    def _rows(self):
        """
        Yield (level, template) pairs: every top-level template followed by its
        subcommands, depth-first, in registration order.
        """
        def walk(template, level):
            yield level, template
            for child in self._registry.children(template.identifier):
                yield from walk(child, level + 1)

        for template in self._registry:
            if not template.parent:
                yield from walk(template, 0)

    def format_help(self):
        """
        Build the help listing as rich Text.

        Palette keys
        - program-name, description-section, author-label, author-section
        - usage-label, usage-section, arguments-label
        - alias, arity, argument-description

        An explicit `help` text is returned as-is (unstyled).
        """
        if self.help:
            return Text(self.help)

        styles = defaultdict(str, {
            "program-name": "bold #FF4D94",  # magenta-pink brand pop
            "description-section": "italic #A3A3A3",
            "author-label": "bold #36C5F0",
            "author-section": "#D1D5DB",
            "usage-label": "bold #00E6FF",
            "usage-section": "bold #36C5F0",
            "arguments-label": "bold #FFFFFF",
            "alias": "bold #00E6FF",
            "arity": "bold #FFD600",
            "argument-description": "#9CA3AF",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self.colorful else ""

        def label(template):
            text = Text(" | ").join(Text(alias, styler("alias")) for alias in template.aliases)
            if template.arity > 0:
                text.append(" ").append(
                    "[%d%s values]" % (template.arity, " optional" if template.optional else ""),
                    styler("arity")
                )
            return text

        rows = [(level, label(template), template.descr) for level, template in self._rows()]
        rows.append((0, Text(", ".join(HELP_ALIASES), styler("alias")), "print this help message and exit"))
        column = max(4 * level + len(text) for level, text, _ in rows) + 4

        renders = Text()
        if self.name:
            renders.append(self.name, styler("program-name"))
            if self.descr:
                renders.append(": ").append(self.descr, styler("description-section"))
            renders.append("\n")
        if self.author:
            renders.append("author", styler("author-label")).append(": ")
            renders.append(self.author, styler("author-section")).append("\n")

        renders.append("usage", styler("usage-label")).append(":\n    ")
        renders.append(
            self.usage or "$ %s -[-command] [value/s...]" % (self.name or ""),
            styler("usage-section")
        ).append("\n")

        renders.append("arguments", styler("arguments-label")).append(":")
        for level, text, descr in rows:
            indent = 4 * level
            renders.append("\n    ").append(" " * indent).append(text)
            if descr:
                renders.append(" " * (column - indent - len(text)))
                renders.append(descr, styler("argument-description"))
        return renders

    def print_help(self):
        renderable = self.format_help()
        if self.fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[ ", f"{self.name or ''} HELP".strip().upper(), " ]"),
                title_align="left",
            )
        Console().print(renderable)

    def __repr__(self):
        return f"parser(name={self.name!r}, templates={len(self._registry)})"


def invoke(parser, prompt=Unset, /):
    """
    Convenience runner: parse, or print the fault and exit with code 1.

    Parameters
    - parser: Parser
    - prompt: Unset (sys.argv[1:]) | str (shlex-split) | Iterable[str]

    Returns
    - ParsedArguments when the pass succeeds.
    """
    if not isinstance(parser, Parser):
        raise TypeError("invoke() first argument must be a parser")
    try:
        return parser.parse(prompt)
    except ParseException as exception:
        trigger(exception, shell=True)


__all__ = (
    "HELP_ALIASES",
    "Parser",
    "invoke",
)
