"""
Conversation store - the single source of truth for message content.
"""

from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from services.chat_service.models import Conversation, Message, Reaction, Role
from utils.logging_config import get_logger


class ConversationStore:
    """
    Maps conversation identifiers to their ordered messages.
    Messages are only ever appended; reactions replace a message in place.
    """

    def __init__(self):
        self.logger = get_logger(__name__)
        self._conversations: Dict[str, Conversation] = {}

    def get(self, conversation_id: str) -> Tuple[Message, ...]:
        """Messages of a conversation, empty when unknown"""
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            return ()
        return tuple(conversation.messages)

    def append(self, conversation_id: str, message: Message):
        """Add a message at the end, creating the conversation if needed"""
        conversation = self._conversations.setdefault(conversation_id, Conversation(conversation_id))
        conversation.messages.append(message)

    def set_reaction(self, conversation_id: str, message_id: str, reaction: Reaction) -> Optional[Message]:
        """
        Toggle a reaction on an assistant message

        Applying the current reaction again clears it; a different reaction
        replaces it. Unknown targets are ignored.

        Returns:
            The updated message, or None when nothing changed
        """
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            self.logger.debug(f"Reaction ignored, unknown conversation {conversation_id}")
            return None

        for index, message in enumerate(conversation.messages):
            if message.message_id != message_id:
                continue
            if message.role is not Role.ASSISTANT:
                self.logger.debug(f"Reaction ignored on {message.role.value} message {message_id}")
                return None
            new_reaction = None if message.reaction == reaction else Reaction(reaction)
            updated = replace(message, reaction=new_reaction)
            conversation.messages[index] = updated
            return updated

        self.logger.debug(f"Reaction ignored, message {message_id} not in {conversation_id}")
        return None

    def ensure_seeded(self, conversation_id: str, builder: Callable[[], Iterable[Message]]) -> bool:
        """
        Populate a conversation from ``builder`` unless it already exists

        Returns:
            True when the conversation was created by this call
        """
        if conversation_id in self._conversations:
            return False
        messages: List[Message] = list(builder())
        self._conversations[conversation_id] = Conversation(conversation_id, messages)
        return True

    def conversation_ids(self) -> List[str]:
        return list(self._conversations.keys())

    def __contains__(self, conversation_id: str) -> bool:
        return conversation_id in self._conversations

    def __len__(self) -> int:
        return len(self._conversations)
