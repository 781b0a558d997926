"""Parser for textual replay logs.

Each entry is ``0`` (failure) or ``1`` (success), optionally followed by
``:TIMESTAMP`` (unix epoch) or ``:+SECS`` (seconds after the previous entry).
Without a suffix the entry happens at the same time as the previous one::

    0 0:+2 0:+4 0:+6 1

Entries may also be given comma-separated in a single string.
"""

import re
from typing import Iterable, List

from rebound.domain.errors import InvalidEventError
from rebound.domain.models.replay_event import EventKind, ReplayEvent

_ENTRY_RE = re.compile(r"^([01])(?::(\+)?(\d+(?:\.\d+)?))?$")


def parse_replay_entry(entry: str, index: int = 0) -> ReplayEvent:
    """Parse one log entry

    Args:
        entry: Entry text, e.g. "0:+2"
        index: Position of the entry, reported on error

    Returns:
        ReplayEvent

    Raises:
        InvalidEventError: If the entry does not match the syntax
    """
    match = _ENTRY_RE.match(entry.strip())
    if not match:
        raise InvalidEventError(
            index,
            f"invalid syntax {entry!r}, must be 0 or 1 followed by :TIMESTAMP or :+SECS",
        )
    outcome, relative, seconds = match.groups()
    kind = EventKind.SUCCESS if outcome == "1" else EventKind.FAILURE
    if seconds is None:
        return ReplayEvent(kind)
    if relative:
        return ReplayEvent(kind, delta=float(seconds))
    return ReplayEvent(kind, timestamp=float(seconds))


def parse_replay_log(entries: Iterable[str]) -> List[ReplayEvent]:
    """Parse a sequence of log entries (each possibly comma-separated)"""
    tokens: List[str] = []
    for entry in entries:
        tokens.extend(part for part in entry.split(",") if part.strip())
    return [parse_replay_entry(token, index) for index, token in enumerate(tokens)]
