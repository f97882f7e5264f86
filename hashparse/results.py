"""
Hashparse parse results.

- ParsedArgument: the values recorded for one template (its latest occurrence).
- Occurrence: one successful match at a token position; every occurrence of a
  pass is kept, in token order.
- ParsedArguments: the read-only result set returned by Parser.parse().

Lookups are exact: by top-level alias, by (context, alias) and by identifier.
A template matched several times in one pass is recorded with its last
occurrence only; the occurrences tuple still lists all of them.
"""
from .utils import mirror


class ParsedArgument:
    """
    Values consumed by one matched template.
    """
    __slots__ = ("_identifier", "_values")

    identifier = mirror("identifier")
    values = mirror("values")

    def __init__(self, identifier, values=(), /):
        self._identifier = identifier
        self._values = tuple(values)

    @property
    def number_of_values(self):
        return len(self._values)

    def __eq__(self, other):
        if not isinstance(other, ParsedArgument):
            return NotImplemented
        return (self._identifier, self._values) == (other._identifier, other._values)

    def __hash__(self):
        return hash((self._identifier, self._values))

    def __rich_repr__(self):
        yield "identifier", self._identifier
        yield "values", self._values

    def __repr__(self):
        return f"parsed-argument(identifier={self._identifier!r}, values={self._values!r})"


class Occurrence:
    """
    One match of a template within a single parse pass.

    Fields
    - index: position of the matched token in the token sequence.
    - token: the alias text as it appeared.
    - context: context the alias was resolved in (0 for top-level).
    - identifier: identifier of the matched template.
    - values: consumed values, in order.

    Callers that prefer folding over the matches to capturing state in
    callbacks can iterate ParsedArguments.occurrences instead.
    """
    __slots__ = ("_index", "_token", "_context", "_identifier", "_values")

    index = mirror("index")
    token = mirror("token")
    context = mirror("context")
    identifier = mirror("identifier")
    values = mirror("values")

    def __init__(self, index, token, context, identifier, values=(), /):
        self._index = index
        self._token = token
        self._context = context
        self._identifier = identifier
        self._values = tuple(values)

    def _fields(self):
        return self._index, self._token, self._context, self._identifier, self._values

    def __eq__(self, other):
        if not isinstance(other, Occurrence):
            return NotImplemented
        return self._fields() == other._fields()

    def __hash__(self):
        return hash(self._fields())

    def __rich_repr__(self):
        for name in self.__slots__:
            yield name.lstrip("_"), getattr(self, name)

    def __repr__(self):
        return "occurrence(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


class ParsedArguments:
    """
    Read-only result of a parse pass.

    Mappings
    - keys: (context, alias) -> ParsedArgument
    - ids: identifier -> ParsedArgument
    - occurrences: tuple of Occurrence, in token order

    The parser hands over fresh containers and keeps no reference to them, so
    results of separate passes are independent; equal inputs compare equal.
    """
    __slots__ = ("_keys", "_ids", "_occurrences")

    keys = mirror("keys")
    ids = mirror("ids")
    occurrences = mirror("occurrences")

    def __init__(self, keys=None, ids=None, occurrences=(), /):
        self._keys = dict(keys or {})
        self._ids = dict(ids or {})
        self._occurrences = tuple(occurrences)

    def get(self, alias, /):
        """
        Return the argument recorded for a top-level alias, or None.
        """
        return self._keys.get((0, alias))

    def get_with_id(self, identifier, /):
        return self._ids.get(identifier)

    def get_with_context(self, context, alias, /):
        """
        Return the argument recorded for `alias` resolved under `context`, or None.
        """
        return self._keys.get((context, alias))

    def has(self, alias, /):
        return self.get(alias) is not None

    def has_with_id(self, identifier, /):
        return self.get_with_id(identifier) is not None

    def has_with_context(self, context, alias, /):
        return self.get_with_context(context, alias) is not None

    def __len__(self):
        return len(self._keys)

    def __eq__(self, other):
        if not isinstance(other, ParsedArguments):
            return NotImplemented
        return (
            self._keys == other._keys and
            self._ids == other._ids and
            self._occurrences == other._occurrences
        )

    __hash__ = None

    def __rich_repr__(self):
        yield "keys", self._keys
        yield "ids", self._ids
        yield "occurrences", self._occurrences

    def __repr__(self):
        return f"parsed-arguments(keys={self._keys!r}, ids={self._ids!r})"


__all__ = (
    "ParsedArgument",
    "Occurrence",
    "ParsedArguments",
)
