from typing import Any, Dict
from uuid import UUID

import httpx

from app.clients.base_realtime_client import BaseRealtimeClient


class HttpRealtimeClient(BaseRealtimeClient):
    """Live delivery through a pub/sub gateway's HTTP API using httpx."""

    def __init__(self, base_url: str, api_key: str, timeout: float = 5.0):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    async def publish(
        self, recipient_id: UUID, event_type: str, data: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Publish an event on the recipient's channel."""
        payload = {
            "channel": f"user:{recipient_id}",
            "event": event_type,
            "data": data,
        }

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                f"{self.base_url}/events", json=payload, headers=headers
            )
            response.raise_for_status()
            result: Dict[str, Any] = response.json() if response.content else {}

            return result
