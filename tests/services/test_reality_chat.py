"""Tests for one chat turn with the assistant."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.domain.exceptions import DomainValidationError
from app.domain.reality_operations import RealityOperations
from app.models.database.reality import ChatRole
from app.services.llm import BaseLLMClient
from app.services.reality_chat import (
    IMAGE_FAILED_MESSAGE,
    IMAGE_STORED_MESSAGE,
    NO_RESPONSE_MESSAGE,
    parse_image_request,
    send_message,
)


@pytest.fixture
def mock_llm():
    llm = MagicMock(spec=BaseLLMClient)
    llm.generate_content = AsyncMock(return_value="Interesting day!")
    llm.generate_image = AsyncMock(return_value="aW1hZ2U=")
    return llm


@pytest.mark.parametrize(
    "message, expected",
    [
        ("image of a red fox", "a red fox"),
        ("Generate Image Of the moon", "the moon"),
        ("what did the image of my dream mean?", None),
        ("hello", None),
    ],
)
def test_parse_image_request(message, expected):
    assert parse_image_request(message) == expected


@pytest.mark.asyncio
async def test_text_turn_stores_both_messages(db_session, scope, mock_llm):
    turn = await send_message(db_session, scope, mock_llm, "  Had a long day  ")

    assert turn.failed is False
    assert turn.user_message.text == "Had a long day"
    assert turn.user_message.role == ChatRole.USER
    assert turn.model_message.text == "Interesting day!"
    assert turn.model_message.role == ChatRole.MODEL

    contents = mock_llm.generate_content.await_args.args[0]
    assert contents == [{"role": "user", "parts": [{"text": "Had a long day"}]}]


@pytest.mark.asyncio
async def test_history_limited_and_excludes_current(db_session, scope, mock_llm):
    for i in range(3):
        await send_message(db_session, scope, mock_llm, f"message {i}")

    await send_message(db_session, scope, mock_llm, "latest", history_limit=4)

    contents = mock_llm.generate_content.await_args.args[0]
    assert len(contents) == 5
    assert [c["role"] for c in contents[:4]] == ["user", "model", "user", "model"]
    assert contents[0]["parts"][0]["text"] == "message 1"
    assert contents[-1] == {"role": "user", "parts": [{"text": "latest"}]}


@pytest.mark.asyncio
async def test_no_answer_stores_fallback(db_session, scope, mock_llm):
    mock_llm.generate_content.return_value = None

    turn = await send_message(db_session, scope, mock_llm, "hello?")

    assert turn.failed is True
    assert turn.model_message.text == NO_RESPONSE_MESSAGE
    messages = RealityOperations.list_messages(db_session, turn.conversation.id)
    assert [m.text for m in messages] == ["hello?", NO_RESPONSE_MESSAGE]


@pytest.mark.asyncio
async def test_image_turn(db_session, scope, mock_llm):
    turn = await send_message(db_session, scope, mock_llm, "image of a lighthouse")

    mock_llm.generate_image.assert_awaited_once_with("a lighthouse")
    mock_llm.generate_content.assert_not_called()
    assert turn.image_url == "data:image/png;base64,aW1hZ2U="
    assert turn.model_message.text == IMAGE_STORED_MESSAGE


@pytest.mark.asyncio
async def test_image_failure(db_session, scope, mock_llm):
    mock_llm.generate_image.return_value = None

    turn = await send_message(db_session, scope, mock_llm, "generate image of nothing")

    assert turn.failed is True
    assert turn.image_url is None
    assert turn.model_message.text == IMAGE_FAILED_MESSAGE


@pytest.mark.asyncio
async def test_blank_message_rejected(db_session, scope, mock_llm):
    with pytest.raises(DomainValidationError):
        await send_message(db_session, scope, mock_llm, "   ")
    mock_llm.generate_content.assert_not_called()
