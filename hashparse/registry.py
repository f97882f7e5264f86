"""
Hashparse template registry: context-qualified alias lookup.

Every registered template is stored once per alias under the composite key
(context, alias), where context is the identifier of the parent template, or 0
for top-level templates. The same alias text can therefore live under several
parents without collision, and resolving a token in the active context is a
single dict lookup.

Ownership
- A registry belongs to one parser. It is mutated only while templates are
  registered and read-only while parsing; it is not thread-safe.
- Identifiers come from a counter owned by the registry: they start at 1,
  increase monotonically and are never reused. Nothing is ever removed.
"""
import copy

from .faults import UnknownParentWarning, trigger
from .templates import Template


class Registry:
    """
    Append-only store of templates keyed by (context, alias).

    Lookup
    - find(context, token): exact key match.
    - find_top_level(token): find() in context 0.
    - find_anywhere(token): linear scan by alias regardless of context; only
      used to diagnose subcommands that appear out of context.
    """

    def __init__(self):
        self._entries = {}
        self._templates = {}
        self._last = 0

    @property
    def last(self):
        """
        Identifier assigned by the latest registration (0 before any).
        """
        return self._last

    def register(self, template, /):
        """
        Register a template under its own context and return its identifier.

        A stamped copy is stored; the given template is left untouched, so
        registering the same object twice yields two independent templates.

        Raises
        - TypeError: when template is not a Template.
        - ValueError: when one of its aliases is already registered in the same
          context. Nothing is written in that case.
        """
        if not isinstance(template, Template):
            raise TypeError("register() argument must be a template")
        return self._insert(template, template.parent)

    def register_child(self, parent, template, /):
        """
        Register a template as a subcommand of `parent` and return its identifier.

        The parent identifier is not required to be registered; an unknown one
        emits an UnknownParentWarning and the child is then reported as out of
        context by the parser until that identifier gets registered.
        """
        if not isinstance(template, Template):
            raise TypeError("register_child() second argument must be a template")
        if not isinstance(parent, int) or isinstance(parent, bool):
            raise TypeError("register_child() first argument must be an integer")
        elif parent < 1:
            raise ValueError("register_child() first argument must be a positive integer")

        if parent not in self._templates:
            trigger(UnknownParentWarning(parent), stacklevel=4)
        return self._insert(template, parent)

    def _insert(self, template, parent):
        context = parent or 0
        for alias in template.aliases:
            if (context, alias) in self._entries:
                raise ValueError(f"alias {alias!r} is already registered in context {context}")

        self._last += 1
        stamped = copy.replace(template, identifier=self._last, parent=parent)
        for alias in stamped.aliases:
            self._entries[context, alias] = stamped
        self._templates[stamped.identifier] = stamped
        return stamped.identifier

    def find(self, context, token, /):
        return self._entries.get((context, token))

    def find_top_level(self, token, /):
        return self._entries.get((0, token))

    def find_anywhere(self, token, /):
        """
        Return the first registered template owning `token` as an alias, in any context.
        """
        for template in self._templates.values():
            if token in template.aliases:
                return template
        return None

    def get(self, identifier, /):
        return self._templates.get(identifier)

    def children(self, identifier, /):
        """
        Templates registered directly under `identifier`, in registration order.
        """
        return [template for template in self._templates.values() if template.parent == identifier]

    def depth(self, template, /):
        """
        Nesting level of a registered template (0 for top-level).

        Returns None when the parent chain reaches an unregistered identifier
        or loops back on itself; such templates can never be matched.
        """
        level, seen = 0, {template.identifier}
        while template.parent:
            if (template := self._templates.get(template.parent)) is None or template.identifier in seen:
                return None
            seen.add(template.identifier)
            level += 1
        return level

    def __contains__(self, key, /):
        return key in self._entries

    def __iter__(self):
        return iter(self._templates.values())

    def __len__(self):
        return len(self._templates)

    def __repr__(self):
        return f"registry(templates={len(self)}, entries={len(self._entries)})"


__all__ = (
    "Registry",
)
