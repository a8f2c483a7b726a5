"""
Responder - produces the assistant turn for a conversation.

Only a simulated responder ships here. A real one would send the chat history
built by ``build_chat_history`` to the selected provider and return its answer
as a single assistant Message.
"""

from typing import List, Protocol, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from config.app_config import ChatConfig, ModelEntry, ProviderEntry
from services.chat_service.models import Attachment, Message, Role
from utils.logging_config import get_logger


def pluralize(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def build_chat_history(messages: Sequence[Message]) -> List[BaseMessage]:
    """
    Convert conversation messages into LangChain chat messages

    User attachments become ``image_url`` content blocks next to the text.
    """
    history: List[BaseMessage] = []
    for message in messages:
        if message.role is Role.ASSISTANT:
            history.append(AIMessage(content=message.content))
            continue

        if not message.attachments:
            history.append(HumanMessage(content=message.content))
            continue

        blocks = [{"type": "text", "text": message.content}]
        blocks.extend(
            {"type": "image_url", "image_url": {"url": attachment.preview}}
            for attachment in message.attachments
        )
        history.append(HumanMessage(content=blocks))
    return history


class Responder(Protocol):
    """Anything that can answer a conversation with one assistant message"""

    def reply(
        self,
        history: Sequence[Message],
        provider: ProviderEntry,
        model: ModelEntry,
        attachments: Sequence[Attachment],
        message_id: str,
    ) -> Message:
        ...


class SimulatedResponder:
    """Answers with a canned note naming the provider and model it pretends to call"""

    def __init__(self, chat_config: ChatConfig):
        self.logger = get_logger(__name__)
        self.chat_config = chat_config

    def compose_text(self, provider: ProviderEntry, model: ModelEntry, attachment_count: int) -> str:
        parts = [f"Pretending to call {provider.label} • {model.label}."]
        if attachment_count:
            parts.append(
                f"I spotted {pluralize(attachment_count, 'attachment')}. "
                "Replace this with your vision/tool call."
            )
        parts.append("Swap this helper with your real API handler and stream tokens into the conversation.")
        return "\n\n".join(parts)

    def reply(
        self,
        history: Sequence[Message],
        provider: ProviderEntry,
        model: ModelEntry,
        attachments: Sequence[Attachment],
        message_id: str,
    ) -> Message:
        prompt = build_chat_history(history)
        self.logger.debug(
            f"Simulated call to {provider.id}/{model.id} with {len(prompt)} messages "
            f"and {len(attachments)} attachments"
        )
        return Message(
            message_id=message_id,
            role=Role.ASSISTANT,
            name=self.chat_config.assistant_name,
            avatar_fallback=self.chat_config.assistant_avatar,
            content=self.compose_text(provider, model, len(attachments)),
            markdown=True,
        )
