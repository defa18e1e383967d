from abc import ABC, abstractmethod
from typing import Any, Dict
from uuid import UUID


class BaseRealtimeClient(ABC):
    """Abstract base class for live delivery transports."""

    @abstractmethod
    async def publish(
        self, recipient_id: UUID, event_type: str, data: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Push an event to a connected recipient.

        Returns:
            Dict containing the raw transport response data.
        """
