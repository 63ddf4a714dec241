"""
Roster Tracking for the Chat Room

This module keeps the client's view of who is in the room, in the order
they joined, driven by the membership announcements the relay sends.

Usage:
    roster = Roster()
    roster.apply_join("41")
    roster_label(roster.current())  # "Member:"
"""

import logging
from typing import Iterator, List, Sequence, Tuple

logger = logging.getLogger(__name__)

SINGULAR_LABEL = "Member:"
PLURAL_LABEL = "Members:"


class Roster:
    """
    Ordered set of participant ids currently present in the room.

    Insertion order reflects join order and an id appears at most once.
    All operations are total: joining twice and leaving an unknown id are
    both no-ops.
    """

    def __init__(self):
        self._members: List[str] = []

    def apply_join(self, participant_id: str) -> bool:
        """
        Append a participant if not already present.

        Returns:
            True if the roster changed
        """
        if participant_id in self._members:
            logger.debug("Duplicate join ignored: %s", participant_id)
            return False
        self._members.append(participant_id)
        return True

    def apply_leave(self, participant_id: str) -> bool:
        """
        Remove a participant if present.

        Returns:
            True if the roster changed
        """
        try:
            self._members.remove(participant_id)
        except ValueError:
            logger.debug("Leave for unknown participant: %s", participant_id)
            return False
        return True

    def current(self) -> Tuple[str, ...]:
        """Read-only snapshot of the members in join order."""
        return tuple(self._members)

    def reset(self) -> None:
        """Clear the roster, e.g. when the connection goes away."""
        self._members.clear()

    def __len__(self) -> int:
        return len(self._members)

    def __contains__(self, participant_id: object) -> bool:
        return participant_id in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self.current())


def roster_label(members: Sequence[str]) -> str:
    """Heading for the member list: singular for zero or one entry."""
    if len(members) <= 1:
        return SINGULAR_LABEL
    return PLURAL_LABEL
