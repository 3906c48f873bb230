"""
Reality chat - one turn of conversation with the AI assistant.

Messages starting with "image of" / "generate image of" go to the image
model; everything else goes to the text model with recent history. The
assistant's answer, or a fallback text when it gave none, is stored as a
model message so the transcript stays complete.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from sqlmodel import Session

from app.core.config import settings
from app.domain.exceptions import DomainValidationError
from app.domain.persistence import UserScope
from app.domain.reality_operations import RealityOperations
from app.models.database.reality import ChatMessage, ChatRole, Conversation
from app.services.llm import BaseLLMClient, text_content

logger = logging.getLogger(__name__)

EMPTY_MESSAGE = "Please enter a message."
IMAGE_STORED_MESSAGE = "Generated an image. Note: Images cannot be archived due to storage limitations."
IMAGE_FAILED_MESSAGE = "Failed to generate image."
NO_RESPONSE_MESSAGE = "No response from Gemini API."

_IMAGE_REQUEST = re.compile(r"^(image of|generate image of)\s*", re.IGNORECASE)


@dataclass
class ChatTurn:
    conversation: Conversation
    user_message: ChatMessage
    model_message: ChatMessage
    image_url: Optional[str] = None
    failed: bool = False


def parse_image_request(message: str) -> Optional[str]:
    """Image prompt if the message asks for an image, else None."""
    match = _IMAGE_REQUEST.match(message)
    if match is None:
        return None
    return message[match.end():].strip()


async def send_message(
    session: Session,
    scope: UserScope,
    llm: BaseLLMClient,
    text: str,
    history_limit: Optional[int] = None,
) -> ChatTurn:
    message = (text or "").strip()
    if not message:
        raise DomainValidationError(EMPTY_MESSAGE)

    conversation = RealityOperations.get_or_create_active_conversation(session, scope)
    user_message = RealityOperations.add_message(session, scope, conversation, message, ChatRole.USER)

    image_prompt = parse_image_request(message)
    if image_prompt is not None:
        encoded = await llm.generate_image(image_prompt) if image_prompt else None
        if encoded:
            reply_text, image_url, failed = IMAGE_STORED_MESSAGE, f"data:image/png;base64,{encoded}", False
        else:
            reply_text, image_url, failed = IMAGE_FAILED_MESSAGE, None, True
    else:
        limit = history_limit if history_limit is not None else settings.CHAT_HISTORY_LIMIT
        history = RealityOperations.recent_history(
            session, conversation.id, limit, exclude_id=user_message.id
        )
        contents = [text_content(m.text, ChatRole(m.role).value) for m in history]
        contents.append(text_content(message))

        reply = await llm.generate_content(contents)
        if reply:
            reply_text, image_url, failed = reply, None, False
        else:
            reply_text, image_url, failed = NO_RESPONSE_MESSAGE, None, True

    if failed:
        logger.warning("Chat turn in conversation %s got no AI answer", conversation.id)

    model_message = RealityOperations.add_message(
        session, scope, conversation, reply_text, ChatRole.MODEL
    )
    return ChatTurn(
        conversation=conversation,
        user_message=user_message,
        model_message=model_message,
        image_url=image_url,
        failed=failed,
    )
