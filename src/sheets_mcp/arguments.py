"""
Typed extraction from the loosely-typed argument bag delivered with a tool call.

``get_argument`` is deliberately permissive: a value whose shape differs from
the default is treated as if it had been omitted. Set ``strict=True`` (or
``STRICT_ARGUMENTS=1`` for the server) to reject such values instead.
"""

from typing import Any, Dict, List, Optional, Sequence

from sheets_mcp.errors import InvalidArgument, MissingArgument

ArgumentBag = Dict[str, Any]

_SCALAR_TYPES = (str, int, float, bool)


def _shape(value: Any) -> Optional[str]:
    # bool is an int subclass, so it has to be checked first
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, (int, float)):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, dict):
        return 'object'
    if isinstance(value, (list, tuple)):
        return 'array'
    return None


def get_argument(bag: ArgumentBag, key: str, default: Any, strict: bool = False) -> Any:
    """
    Return ``bag[key]`` if it has the same shape as ``default``, else ``default``.

    Numbers match numbers regardless of int/float. ``None`` counts as absent.
    """
    value = bag.get(key)
    if value is None:
        return default
    if _shape(value) == _shape(default):
        return value
    if strict:
        raise InvalidArgument(
            f"{key} must be a {_shape(default)}, got {_shape(value) or type(value).__name__}"
        )
    return default


def get_int(bag: ArgumentBag, key: str, default: int = 0, strict: bool = False) -> int:
    """Numeric argument truncated to an integer."""
    return int(get_argument(bag, key, float(default), strict=strict))


def _join_names(names: Sequence[str]) -> str:
    if len(names) == 1:
        return names[0]
    if len(names) == 2:
        return f"{names[0]} and {names[1]}"
    return f"{', '.join(names[:-1])}, and {names[-1]}"


def require(bag: ArgumentBag, *keys: str) -> None:
    """Raise MissingArgument unless every key holds a non-empty string."""
    for key in keys:
        value = bag.get(key)
        if not isinstance(value, str) or not value:
            verb = 'is' if len(keys) == 1 else 'are'
            raise MissingArgument(f"{_join_names(keys)} {verb} required")


def get_values(bag: ArgumentBag, key: str) -> List[List[Any]]:
    """
    Read a 2-D array of cell values.

    Every row must be a list and every cell a scalar (string, number, boolean
    or null). Rows may have different lengths; the API pads them.
    """
    if bag.get(key) is None:
        raise MissingArgument(f"{key} is required")
    return to_values(bag[key])


def to_values(raw: Any) -> List[List[Any]]:
    if not isinstance(raw, (list, tuple)):
        raise InvalidArgument("invalid data format: expected a 2D array of values")
    rows = []
    for row_index, row in enumerate(raw):
        if not isinstance(row, (list, tuple)):
            raise InvalidArgument(f"invalid data format: row {row_index} is not an array")
        for cell in row:
            if cell is not None and not isinstance(cell, _SCALAR_TYPES):
                raise InvalidArgument(
                    f"invalid data format: row {row_index} contains a non-scalar value"
                )
        rows.append(list(row))
    return rows


def get_list_of(bag: ArgumentBag, key: str, item_type: type) -> list:
    """Read a list argument whose items must all be ``item_type``."""
    raw = bag.get(key)
    if raw is None:
        raise MissingArgument(f"{key} is required")
    if not isinstance(raw, (list, tuple)) or not all(isinstance(item, item_type) for item in raw):
        raise InvalidArgument(f"invalid {key} format")
    return list(raw)


class Arguments:
    """Argument bag bound to one call's coercion mode."""

    def __init__(self, bag: Optional[ArgumentBag] = None, strict: bool = False):
        self.bag = dict(bag or {})
        self.strict = strict

    def __contains__(self, key: str) -> bool:
        return self.bag.get(key) is not None

    def has(self, key: str, default: Any) -> bool:
        """True when ``key`` holds a value of the same shape as ``default``."""
        if key not in self:
            return False
        # raises in strict mode on a shape mismatch
        get_argument(self.bag, key, default, strict=self.strict)
        return _shape(self.bag[key]) == _shape(default)

    def get(self, key: str, default: Any) -> Any:
        return get_argument(self.bag, key, default, strict=self.strict)

    def get_int(self, key: str, default: int = 0) -> int:
        return get_int(self.bag, key, default, strict=self.strict)

    def require(self, *keys: str) -> None:
        require(self.bag, *keys)

    def values(self, key: str) -> List[List[Any]]:
        return get_values(self.bag, key)

    def list_of(self, key: str, item_type: type) -> list:
        return get_list_of(self.bag, key, item_type)
