from unittest.mock import AsyncMock, patch
from uuid import uuid4

from fastapi.testclient import TestClient

from app.models.api.conversations import (
    ConversationResponse,
    ReceiptsUpdatedResponse,
    TypingResponse,
)
from app.models.api.messages import MessageResponse
from app.models.api.participants import TypingEntry
from app.models.api.users import UserResponse


class TestConversationsRouter:
    """Unit tests for the conversations router endpoints."""

    def test_list_returns_conversations(
        self,
        authed_client: TestClient,
        principal: UserResponse,
        sample_conversation: ConversationResponse,
    ) -> None:
        with patch(
            "app.services.list_conversations_service"
            ".ListConversationsService.list_conversations",
            new_callable=AsyncMock,
            return_value=[sample_conversation],
        ) as mock_service:
            response = authed_client.get("/api/conversations?page=2&limit=10")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["id"] == str(sample_conversation.id)
        assert data[0]["participants"][0]["user"]["name"] == "Grace"

        args, kwargs = mock_service.call_args
        assert args[0].id == principal.id
        assert kwargs["page"] == 2
        assert kwargs["limit"] == 10

    def test_list_validates_limit(self, authed_client: TestClient) -> None:
        assert authed_client.get("/api/conversations?limit=0").status_code == 422
        assert authed_client.get("/api/conversations?limit=101").status_code == 422
        assert authed_client.get("/api/conversations?page=0").status_code == 422

    def test_create_accepts_camel_case(
        self, authed_client: TestClient, sample_conversation: ConversationResponse
    ) -> None:
        other_id = uuid4()
        with patch(
            "app.services.start_conversation_service"
            ".StartConversationService.get_or_create",
            new_callable=AsyncMock,
            return_value=sample_conversation,
        ) as mock_service:
            response = authed_client.post(
                "/api/conversations",
                json={
                    "participants": [str(other_id)],
                    "isGroup": True,
                    "groupName": "Book club",
                },
            )

        assert response.status_code == 200
        request = mock_service.call_args.args[1]
        assert request.participants == [other_id]
        assert request.is_group is True
        assert request.group_name == "Book club"

    def test_create_requires_participants(self, authed_client: TestClient) -> None:
        response = authed_client.post("/api/conversations", json={})
        assert response.status_code == 422

    def test_get_conversation(
        self, authed_client: TestClient, sample_conversation: ConversationResponse
    ) -> None:
        with patch(
            "app.services.list_conversations_service"
            ".ListConversationsService.get_conversation_summary",
            new_callable=AsyncMock,
            return_value=sample_conversation,
        ):
            response = authed_client.get(f"/api/conversations/{sample_conversation.id}")

        assert response.status_code == 200
        assert response.json()["is_group"] is False

    def test_invalid_conversation_id(self, authed_client: TestClient) -> None:
        response = authed_client.get("/api/conversations/not-a-uuid")
        assert response.status_code == 422

    def test_get_messages(
        self, authed_client: TestClient, sample_message: MessageResponse
    ) -> None:
        with patch(
            "app.services.get_conversation_messages_service"
            ".GetConversationMessagesService.get_conversation_messages",
            new_callable=AsyncMock,
            return_value=[sample_message],
        ) as mock_service:
            response = authed_client.get(
                f"/api/conversations/{sample_message.conversation_id}/messages?limit=5"
            )

        assert response.status_code == 200
        assert response.json()[0]["content"] == "Hello"
        args, kwargs = mock_service.call_args
        assert args[1] == sample_message.conversation_id
        assert kwargs["page"] == 1
        assert kwargs["limit"] == 5

    def test_send_message(
        self, authed_client: TestClient, sample_message: MessageResponse
    ) -> None:
        with patch(
            "app.services.send_message_service.SendMessageService.send_message",
            new_callable=AsyncMock,
            return_value=sample_message,
        ) as mock_service:
            response = authed_client.post(
                f"/api/conversations/{sample_message.conversation_id}/messages",
                json={"content": "Hello", "messageType": "text"},
            )

        assert response.status_code == 200
        assert response.json()["sequence"] == 1
        request = mock_service.call_args.args[2]
        assert request.content == "Hello"

    def test_send_message_rejects_too_many_attachments(
        self, authed_client: TestClient
    ) -> None:
        attachment = {"type": "image", "url": "https://cdn.example.com/x.png"}
        response = authed_client.post(
            f"/api/conversations/{uuid4()}/messages",
            json={"content": "pics", "attachments": [attachment] * 6},
        )
        assert response.status_code == 422

    def test_send_message_rejects_unknown_type(self, authed_client: TestClient) -> None:
        response = authed_client.post(
            f"/api/conversations/{uuid4()}/messages",
            json={"content": "hi", "messageType": "sticker"},
        )
        assert response.status_code == 422

    def test_mark_read_and_delivered(self, authed_client: TestClient) -> None:
        conversation_id = uuid4()
        result = ReceiptsUpdatedResponse(conversation_id=conversation_id, updated=3)
        with (
            patch(
                "app.services.get_conversation_messages_service"
                ".GetConversationMessagesService.mark_conversation_read",
                new_callable=AsyncMock,
                return_value=result,
            ),
            patch(
                "app.services.get_conversation_messages_service"
                ".GetConversationMessagesService.mark_conversation_delivered",
                new_callable=AsyncMock,
                return_value=result,
            ) as mock_delivered,
        ):
            read = authed_client.put(f"/api/conversations/{conversation_id}/read")
            delivered = authed_client.put(
                f"/api/conversations/{conversation_id}/delivered"
            )

        assert read.status_code == 200
        assert read.json() == {"conversation_id": str(conversation_id), "updated": 3}
        assert delivered.status_code == 200
        mock_delivered.assert_called_once()

    def test_archive(
        self, authed_client: TestClient, sample_conversation: ConversationResponse
    ) -> None:
        archived = sample_conversation.model_copy(update={"is_archived": True})
        with patch(
            "app.services.conversation_state_service.ConversationStateService.archive",
            new_callable=AsyncMock,
            return_value=archived,
        ):
            response = authed_client.put(
                f"/api/conversations/{sample_conversation.id}/archive"
            )

        assert response.status_code == 200
        assert response.json()["is_archived"] is True

    def test_mute_with_null_clears(
        self, authed_client: TestClient, sample_conversation: ConversationResponse
    ) -> None:
        with patch(
            "app.services.conversation_state_service.ConversationStateService.mute",
            new_callable=AsyncMock,
            return_value=sample_conversation,
        ) as mock_service:
            response = authed_client.put(
                f"/api/conversations/{sample_conversation.id}/mute",
                json={"mutedUntil": None},
            )

        assert response.status_code == 200
        assert mock_service.call_args.args[2] is None

    def test_mute_requires_field(self, authed_client: TestClient) -> None:
        response = authed_client.put(f"/api/conversations/{uuid4()}/mute", json={})
        assert response.status_code == 422

    def test_typing(self, authed_client: TestClient, principal: UserResponse) -> None:
        conversation_id = uuid4()
        result = TypingResponse(
            conversation_id=conversation_id,
            typing_users=[
                TypingEntry(user_id=principal.id, started_at=principal.created_at)
            ],
        )
        with patch(
            "app.services.conversation_state_service"
            ".ConversationStateService.set_typing",
            new_callable=AsyncMock,
            return_value=result,
        ) as mock_service:
            response = authed_client.post(
                f"/api/conversations/{conversation_id}/typing",
                json={"isTyping": True},
            )

        assert response.status_code == 200
        assert response.json()["typing_users"][0]["user_id"] == str(principal.id)
        assert mock_service.call_args.args[2] is True
