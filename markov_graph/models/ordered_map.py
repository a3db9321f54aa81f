"""
Insertion-ordered associative container backed by two parallel lists.

Every lookup is a linear scan over the keys, so lookups are O(n) in the
number of entries. The map is meant for small mappings where insertion order
matters, such as the per-node edge weights of a MarkovChain. It has no
deletion.
"""

import copy


class OrderedMap:
    """
    A map over unique keys that remembers insertion order.

    Entries are stored as two lists of equal length, `_keys` in insertion
    order and `_values` paired with them by position.
    """

    def __init__(self):
        self._keys = []
        self._values = []

    @classmethod
    def from_pairs(cls, pairs):
        """
        Build a map from ``(key, value)`` pairs using raw inserts.

        Args:
            pairs (iterable): ``(key, value)`` tuples, kept in the given order

        Returns:
            OrderedMap: The populated map
        """
        out = cls()
        for key, value in pairs:
            out.insert(key, value)
        return out

    def _index_of(self, key):
        for i, existing in enumerate(self._keys):
            if existing == key:
                return i
        return None

    def insert(self, key, value):
        """
        Append a new entry without checking for an existing key.

        Inserting a key twice leaves a shadowed duplicate: lookups keep
        returning the first entry. Prefer `add` unless the key is known to be
        absent.
        """
        self._keys.append(key)
        self._values.append(value)

    def set(self, key, value):
        """
        Overwrite the value of the first entry matching ``key``.

        Returns:
            bool: True if the key was found, False if nothing changed
        """
        i = self._index_of(key)
        if i is None:
            return False
        self._values[i] = value
        return True

    def add(self, key, value):
        """Set ``key`` to ``value``, inserting it when it is not present."""
        if not self.set(key, value):
            self.insert(key, value)

    def get(self, key, default=None):
        """
        Return a shallow copy of the value for ``key``.

        Args:
            key: Key to look up
            default: Returned when the key is absent

        Returns:
            The copied value, or ``default``
        """
        i = self._index_of(key)
        if i is None:
            return default
        return copy.copy(self._values[i])

    def has(self, key):
        """Return True if any entry matches ``key``."""
        return self._index_of(key) is not None

    def __contains__(self, key):
        return self.has(key)

    def __getitem__(self, key):
        # Callers must have established presence; a miss is a broken invariant.
        i = self._index_of(key)
        if i is None:
            raise KeyError(f"cannot find key {key!r} in OrderedMap")
        return self._values[i]

    def __setitem__(self, key, value):
        i = self._index_of(key)
        if i is None:
            raise KeyError(f"cannot find key {key!r} in OrderedMap")
        self._values[i] = value

    def items(self):
        """Return a fresh single-pass iterator of ``(key, value)`` pairs."""
        return zip(iter(self._keys), iter(self._values))

    def keys(self):
        return iter(self._keys)

    def values(self):
        return iter(self._values)

    def __iter__(self):
        return self.items()

    def __len__(self):
        return len(self._keys)

    def __eq__(self, other):
        if not isinstance(other, OrderedMap):
            return NotImplemented
        return self._keys == other._keys and self._values == other._values

    def __repr__(self):
        pairs = ", ".join(f"{k!r}: {v!r}" for k, v in self.items())
        return f"OrderedMap({{{pairs}}})"
