"""
Fan-out over independent batch items.

Each item is processed on its own; a failing item is recorded with its
identifying keys and an error message and the next item is processed.
Results come back in input order.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from googleapiclient.errors import HttpError

from sheets_mcp.errors import SheetsMCPError, describe_remote_error

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass
class OperationResult:
    """Outcome of one batch item."""

    success: bool
    data: Any = None
    error: Optional[str] = None
    keys: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Identifying keys plus either ``data`` or ``error``."""
        if self.success:
            return {**self.keys, 'data': self.data}
        return {**self.keys, 'error': self.error}


def fan_out(items: Iterable[T],
            worker: Callable[[T], Any],
            keys: Callable[[T], Dict[str, Any]],
            describe_error: Optional[Callable[[T, str], str]] = None) -> List[OperationResult]:
    """
    Run ``worker`` on every item, isolating failures.

    Args:
        items: Batch items, processed in order
        worker: Single-item logic; raises to signal failure
        keys: Returns the identifying keys copied onto the item's result
        describe_error: Optional formatter for the per-item error message

    Returns:
        One OperationResult per item, in input order
    """
    results = []
    for item in items:
        item_keys = keys(item)
        try:
            data = worker(item)
        except SheetsMCPError as e:
            message = str(e)
        except HttpError as e:
            message = describe_remote_error(e)
            logger.warning(f"Batch item {item_keys} failed: {message}")
        except Exception as e:
            message = str(e)
            logger.warning(f"Batch item {item_keys} failed: {message}")
        else:
            results.append(OperationResult(success=True, data=data, keys=item_keys))
            continue

        if describe_error is not None:
            message = describe_error(item, message)
        results.append(OperationResult(success=False, error=message, keys=item_keys))
    return results
