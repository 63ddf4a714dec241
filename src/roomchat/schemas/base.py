"""
Base Event Classes

This module provides the base class for chat event schemas with common
serialization and deserialization for the tagged (JSON envelope) wire
format, so the concrete event classes only declare their fields.
"""

import json
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple, TypeVar

T = TypeVar("T", bound="BaseEvent")


@dataclass(frozen=True)
class BaseEvent:
    """
    Base class for chat events.

    Events are produced once per inbound frame and consumed immediately
    by the dispatcher, so they are immutable.
    """

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the tagged envelope dictionary.

        Returns:
            Dictionary with 'type' key and a 'data' key holding the fields.
        """
        return {"type": self._message_type, "data": self._to_data()}

    def to_json(self) -> str:
        """
        Convert to JSON string.

        Returns:
            JSON string representation of the event.
        """
        return json.dumps(self.to_dict())

    def _to_data(self) -> Dict[str, Any]:
        """
        Field dictionary placed under the envelope's 'data' key.

        Should be overridden by subclasses whose wire names differ from
        their attribute names.
        """
        return asdict(self)

    @classmethod
    def from_dict(cls: type[T], data: Dict[str, Any]) -> T:
        """
        Create instance from an envelope or a bare data dictionary.

        Args:
            data: Dictionary containing event data.

        Returns:
            Instance of the event class.
        """
        event_data = data.get("data", data)
        return cls._from_data(event_data)

    @classmethod
    def _from_data(cls: type[T], data: Dict[str, Any]) -> T:
        """
        Create instance from event data dictionary.

        Should be overridden by subclasses for custom deserialization.
        """
        return cls(**data)

    @property
    def _message_type(self) -> str:
        """
        Message type identifier on the tagged wire format.

        Should be overridden by subclasses to provide the specific type.
        """
        raise NotImplementedError("Subclasses must define _message_type")

    def render_pair(self) -> Tuple[Optional[str], str]:
        """
        Return the (sender, body) pair handed to the message renderer.
        """
        raise NotImplementedError("Subclasses must define render_pair")
