from collections.abc import Mapping
from typing import Any

SEQUENCE_TYPES = (list, tuple)


def are_equal(a: Any, b: Any, strict: bool = True) -> bool:
    """Return True if two product field values need no update.

    With ``strict`` set, sequences are compared as multisets. Without it the
    legacy rule applies: equal lengths and every element of ``a`` has some
    equal element in ``b``, so ``["x", "x"]`` equals ``["x", "y"]``.
    """
    if isinstance(a, str) and isinstance(b, str):
        return a.lower() == b.lower()

    if isinstance(a, SEQUENCE_TYPES) and isinstance(b, SEQUENCE_TYPES):
        if len(a) != len(b):
            return False
        if strict:
            return _sequences_match_as_multisets(a, b)
        return all(any(are_equal(x, y, strict) for y in b) for x in a)

    if isinstance(a, Mapping) and isinstance(b, Mapping):
        if len(a) != len(b):
            return False
        return all(key in b and are_equal(value, b[key], strict)
                   for key, value in a.items())

    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b

    if a is None or b is None:
        return a is b

    return a == b


def _sequences_match_as_multisets(a, b) -> bool:
    unmatched = list(b)
    for x in a:
        for index, y in enumerate(unmatched):
            if are_equal(x, y, strict=True):
                del unmatched[index]
                break
        else:
            return False
    return True
