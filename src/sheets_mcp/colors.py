"""Parsing of {red, green, blue, alpha} color objects."""

from dataclasses import dataclass
from typing import Any, Dict

from sheets_mcp.arguments import get_argument
from sheets_mcp.errors import InvalidColorFormat


@dataclass(frozen=True)
class Color:
    red: float = 0.0
    green: float = 0.0
    blue: float = 0.0
    alpha: float = 1.0

    def to_dict(self) -> Dict[str, float]:
        return {'red': self.red, 'green': self.green, 'blue': self.blue, 'alpha': self.alpha}


def parse_color(value: Any) -> Color:
    """
    Build a Color from a nested object.

    Missing or non-numeric components take their defaults. Values outside
    0.0-1.0 are passed through; the Sheets API validates them.
    """
    if not isinstance(value, dict):
        raise InvalidColorFormat("color must be an object with red, green, blue and alpha fields")

    return Color(
        red=float(get_argument(value, 'red', 0.0)),
        green=float(get_argument(value, 'green', 0.0)),
        blue=float(get_argument(value, 'blue', 0.0)),
        alpha=float(get_argument(value, 'alpha', 1.0)),
    )
