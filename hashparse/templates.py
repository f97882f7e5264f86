r"""
Hashparse argument templates and the @template decorator.

Overview
- Template: one matchable argument definition.
  • aliases: ordered, distinct names that all refer to the template ("add", "+").
  • arity: number of values consumed after the alias when it is matched.
  • optional: when False, a match with fewer than `arity` values is an error.
  • descr: short help text shown in the arguments listing.
  • callback: invoked with the consumed values, once per occurrence.
  • parent / identifier: stamped by the registry; None on an unregistered template.

- Decorator
  • @template(...): build a Template and bind the decorated function as its callback.

Immutability
- Public fields are read-only properties mirroring private backing fields.
- Registration never edits a template in place: the registry stores the copy
  returned by copy.replace(template, identifier=..., parent=...), so a single
  template object can be registered several times.

Quick example:
    >>> from hashparse.templates import Template, template
    >>> say = Template("--say", arity=1, descr="repeat something")
    >>> @template("add", "+", arity=99, optional=True)
    ... def add(*numbers): ...
"""
import functools
import operator
import re
from types import MethodType

from .utils import *


class TemplateType(type):
    """
    Metaclass wiring read-only properties and stable representations.

    - every name in __introspectable__ becomes a mirror() property over "_{name}".
    - __typename__ is derived from the class name and used in messages.
    - __repr__/__rich_repr__ list the __displayable__ fields (or __introspectable__).
    """
    __introspectable__ = ()
    __displayable__ = Unset

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
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_aliases(cls, metadata, /):
    """
    Internal: validate and normalize the alias collection.

    - at least one alias is required.
    - each alias must be a string, non-empty after trimming.
    - duplicates are dropped silently; the first occurrence keeps its position.
    """
    if not metadata["aliases"]:
        raise TypeError(f"{cls.__typename__} must specify at least one alias")

    aliases = []
    for alias in metadata["aliases"]:
        if not isinstance(alias, str):
            raise TypeError(f"{cls.__typename__} aliases must be strings")
        elif not (alias := alias.strip()):
            raise ValueError(f"{cls.__typename__} aliases cannot be empty-strings")
        elif alias not in aliases:
            aliases.append(alias)

    metadata["aliases"] = aliases


def _sanitize_arity(cls, metadata, /):
    # bool is an int subclass; "arity=True" is a mistake, not one value
    if not isinstance(arity := metadata["arity"], int) or isinstance(arity, bool):
        raise TypeError(f"{cls.__typename__} 'arity' must be an integer")
    elif arity < 0:
        raise ValueError(f"{cls.__typename__} 'arity' must be a non-negative integer")


def _sanitize_descr(cls, metadata, /):
    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


def _sanitize_identifier(cls, name, identifier, /):
    if identifier is None:
        return
    if not isinstance(identifier, int) or isinstance(identifier, bool):
        raise TypeError(f"{cls.__typename__} {name!r} must be an integer")
    elif identifier < 1:
        raise ValueError(f"{cls.__typename__} {name!r} must be a positive integer")


class Template(metaclass=TemplateType):
    """
    Named, value-bearing argument definition.

    Highlights
    - Aliases are matched exactly; any text is accepted ("add", "+", "--say").
    - Arity 0 still matters: the match switches the parsing context so the
      template's subcommands become recognizable.
    - Calling the template forwards values to the callback (no-op without one).

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    - context: the parent identifier, or 0 for a top-level template.
    """

    __introspectable__ = (
        "aliases",
        "arity",
        "optional",
        "descr",
        "callback",
        "parent",
        "identifier",
    )

    __displayable__ = (
        "aliases",
        "arity",
        "optional",
        "descr",
        "parent",
        "identifier",
    )

    def __new__(cls, *aliases, arity=0, optional=False, descr=Unset, callback=Unset):
        """
        Construct a Template.

        Parameters
        - aliases: one or more str, trimmed; duplicates are ignored.
        - arity: int >= 0, number of values to consume.
        - optional: bool, whether fewer values than `arity` are accepted.
        - descr: Unset | str, help text (None when Unset).
        - callback: Unset | Callable, receives the values as positional arguments.
        """
        metadata = {
            "aliases": aliases,
            "arity": arity,
            "optional": bool(optional),
            "descr": descr,
            "callback": callback,
        }
        _sanitize_aliases(cls, metadata)
        _sanitize_arity(cls, metadata)
        _sanitize_descr(cls, metadata)

        if callback is not Unset and not callable(callback):
            raise TypeError(f"{cls.__typename__} 'callback' must be callable")
        metadata["callback"] = coalesce(callback)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._parent = None
        self._identifier = None
        return self

    @property
    def context(self):
        """
        Context under which the aliases are recognized (0 for top-level).
        """
        return self._parent or 0

    def __call__(self, *values):
        if self._callback is None:
            return
        return self._callback(*values)

    def __replace__(self, *unused, **overrides):
        """
        Return a copy with the given fields replaced (used by copy.replace).

        The registry calls copy.replace(template, identifier=..., parent=...)
        to obtain the stamped copy it stores.
        """
        assert not unused, "positional arguments are not allowed"
        if unknown := overrides.keys() - set(type(self).__introspectable__):
            raise TypeError(f"{type(self).__typename__} has no field(s) {", ".join(sorted(unknown))}")

        fields = {name: getattr(self, "_" + name) for name in type(self).__introspectable__} | overrides
        _sanitize_identifier(type(self), "identifier", fields["identifier"])
        _sanitize_identifier(type(self), "parent", fields["parent"])

        replica = type(self)(
            *fields["aliases"],
            arity=fields["arity"],
            optional=fields["optional"],
            descr=Unset if fields["descr"] is None else fields["descr"],
            callback=Unset if fields["callback"] is None else fields["callback"],
        )
        replica._parent = fields["parent"]
        replica._identifier = fields["identifier"]
        return replica


def template(*args, **kwargs):
    """
    Decorator/factory for defining a template with a bound callback.

    Usage
        @template("add", "+", arity=99, optional=True, descr="add numbers")
        def add(*numbers): ...

    Behavior
    - The decorated function becomes the callback; the decorator returns the Template.
    - A decorator instance can be applied only once.
    """
    spec = Template(*args, **kwargs)

    @rename("template")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@template() must be applied to a callable")
        if spec._callback is not None:
            raise TypeError("@template() must be applied only once")
        spec._callback = callback
        return spec

    wrapper.__template__ = MethodType(rename(lambda self: spec, "__template__"), wrapper)
    return wrapper


__all__ = (
    # Classes
    "Template",

    # Decorators
    "template",
)

del TemplateType
