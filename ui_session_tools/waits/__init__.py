"""
Polling waits and the condition library they evaluate.
"""

from .conditions import (
    Condition,
    Found,
    NotYetReady,
    element_count_equals,
    element_enabled,
    element_selected,
    text_matches_pattern,
)
from .polling_waiter import (
    CancellationToken,
    FluentWait,
    PollingWaiter,
    WaitSpec,
    poll_until,
)

__all__ = [
    "CancellationToken",
    "Condition",
    "FluentWait",
    "Found",
    "NotYetReady",
    "PollingWaiter",
    "WaitSpec",
    "element_count_equals",
    "element_enabled",
    "element_selected",
    "poll_until",
    "text_matches_pattern",
]
