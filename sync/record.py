"""
Tracked Record Module
Field map plus the bookkeeping needed to detect changes against persisted state
"""

import copy
from collections.abc import MutableMapping
from typing import Any, Dict, Iterator, Mapping, Optional


def sanitize(fields: Mapping[str, Any], identity: str) -> Dict[str, Any]:
    """
    Deep copy of a field map without the identity field

    Args:
        fields: Field values
        identity: Name of the identity field to strip

    Returns:
        New dictionary safe to persist or compare
    """
    return {key: copy.deepcopy(val) for key, val in fields.items() if key != identity}


def same_value(left: Any, right: Any) -> bool:
    """
    Deep equality that keeps booleans apart from numbers

    Mappings compare regardless of key order, sequences element by element.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        return left.keys() == right.keys() and all(same_value(left[key], right[key]) for key in left)
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return (type(left) is type(right) and len(left) == len(right)
                and all(same_value(a, b) for a, b in zip(left, right)))
    return left == right


class TrackedRecord(MutableMapping):
    """
    A row bound to a table binding's change tracking

    Behaves like a dict of column values; ``existing`` and ``original`` live
    on the wrapper and never leak into the persisted fields.
    """

    def __init__(self, fields: Mapping[str, Any], identity: str,
                 existing: bool = False, original: Optional[Mapping[str, Any]] = None):
        # A caller's dict is kept by reference so edits to it are tracked too
        self.fields: Dict[str, Any] = fields if isinstance(fields, dict) else dict(fields)
        self.identity = identity
        self.existing = existing
        self.original: Dict[str, Any] = copy.deepcopy(dict(fields if original is None else original))

    def __getitem__(self, key: str) -> Any:
        return self.fields[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.fields[key] = value

    def __delitem__(self, key: str) -> None:
        del self.fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    # Tracked records are distinct even when their contents match
    __eq__ = object.__eq__
    __hash__ = object.__hash__

    @property
    def identity_value(self) -> Any:
        """Current identity value, None until assigned"""
        return self.fields.get(self.identity)

    def sanitized(self) -> Dict[str, Any]:
        """Current fields as they would be written, identity excluded"""
        return sanitize(self.fields, self.identity)

    def modified(self) -> bool:
        """True when the content differs from the last persisted snapshot"""
        return not same_value(sanitize(self.fields, self.identity), sanitize(self.original, self.identity))

    def mark_persisted(self, snapshot: Mapping[str, Any]) -> None:
        """Record that ``snapshot`` now matches the stored row"""
        self.existing = True
        self.original = copy.deepcopy(dict(snapshot))

    def __repr__(self) -> str:
        state = "existing" if self.existing else "new"
        if self.existing and self.modified():
            state = "modified"
        return f"TrackedRecord({self.fields!r}, {state})"
