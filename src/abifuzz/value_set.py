"""
Deduplicated corpus of leaf values, keyed by leaf type identity.
"""

from __future__ import annotations

import random
from typing import Any, Dict, Hashable, Iterator, List, Optional, Set, Tuple

from abifuzz.abi_types import (
    AbiArray,
    AbiSlice,
    AbiTuple,
    AbiType,
    LEAF_KINDS,
)

TypeKey = Tuple[Any, ...]


def _identity(value: Any) -> Hashable:
    # `True == 1` in Python, so values are tagged with their class
    return (isinstance(value, bool), value)


class ValueSet:
    """
    Append-only store of previously observed leaf values.

    Entries are never removed; capping is left to the caller. The set holds
    no RNG of its own: `sample` draws from the caller's, so a seeded
    generator reproduces its corpus picks. Not safe for unsynchronized
    concurrent use.
    """

    def __init__(self):
        self._entries: Dict[TypeKey, List[Any]] = {}
        self._seen: Dict[TypeKey, Set[Hashable]] = {}

    def __len__(self) -> int:
        return sum(len(values) for values in self._entries.values())

    def __contains__(self, item: Tuple[TypeKey, Any]) -> bool:
        key, value = item
        return _identity(value) in self._seen.get(key, ())

    def __repr__(self) -> str:
        return f"ValueSet(keys={len(self._entries)}, entries={len(self)})"

    def keys(self) -> Iterator[TypeKey]:
        return iter(self._entries)

    def values(self, key: TypeKey) -> List[Any]:
        return list(self._entries.get(key, ()))

    def count(self, key: TypeKey) -> int:
        return len(self._entries.get(key, ()))

    def add(self, key: TypeKey, value: Any) -> bool:
        """Insert `value` under `key`; returns False if it was already present."""
        ident = _identity(value)
        seen = self._seen.setdefault(key, set())
        if ident in seen:
            return False
        seen.add(ident)
        self._entries.setdefault(key, []).append(value)
        return True

    def sample(self, key: TypeKey, rng: random.Random) -> Optional[Any]:
        """Uniformly pick a stored value for `key`, or None if there are none."""
        values = self._entries.get(key)
        if not values:
            return None
        return rng.choice(values)

    def add_all(self, typ: AbiType, value: Any) -> int:
        """Add every leaf of `value` under its leaf type key.

        Returns the number of newly inserted entries.
        """
        if isinstance(typ, LEAF_KINDS):
            return int(self.add(typ.type_key, value))
        if isinstance(typ, (AbiArray, AbiSlice)):
            return sum(self.add_all(typ.elem, item) for item in value)
        if isinstance(typ, AbiTuple):
            return sum(
                self.add_all(field.type, item)
                for field, item in zip(typ.fields, value)
            )
        raise TypeError(f"unsupported ABI type kind: {type(typ).__name__}")

    def clone(self) -> ValueSet:
        """Copy the corpus, e.g. to hand an independent one to each worker."""
        result = ValueSet()
        result._entries = {k: list(v) for k, v in self._entries.items()}
        result._seen = {k: set(v) for k, v in self._seen.items()}
        return result
