"""
Chat service data models for conversations, messages, attachments and history.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple


class Role(str, Enum):
    """Author of a message"""
    USER = "user"
    ASSISTANT = "assistant"


class Reaction(str, Enum):
    """Feedback a user can leave on an assistant message"""
    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


class SubmitState(str, Enum):
    """Phases of the submit protocol"""
    IDLE = "idle"
    SUBMITTING = "submitting"
    AWAITING_REPLY = "awaiting_reply"


def format_file_size(size: int) -> str:
    """Human readable byte size, 1024-based"""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


@dataclass(frozen=True)
class ImageUpload:
    """Raw file handed over by a paste or upload, before staging"""
    name: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_image(self) -> bool:
        return (self.mime_type or "").lower().startswith("image/")


@dataclass(frozen=True)
class Attachment:
    """Image attached to the composer or to a sent message"""
    attachment_id: str
    name: str
    mime_type: str
    size: int
    preview: str  # data URI

    @property
    def human_size(self) -> str:
        return format_file_size(self.size)


@dataclass(frozen=True)
class Message:
    """Individual message in a conversation"""
    message_id: str
    role: Role
    name: str
    avatar_fallback: str
    content: str
    markdown: bool = False
    avatar_url: Optional[str] = None
    attachments: Tuple[Attachment, ...] = ()
    reaction: Optional[Reaction] = None
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if not self.message_id:
            raise ValueError("Message identifier must not be empty")
        # Accept plain strings from templates, store the enum
        object.__setattr__(self, "role", Role(self.role))
        if self.reaction is not None:
            object.__setattr__(self, "reaction", Reaction(self.reaction))
        object.__setattr__(self, "attachments", tuple(self.attachments))

        if self.attachments and self.role is not Role.USER:
            raise ValueError("Only user messages can carry attachments")
        if self.reaction is not None and self.role is not Role.ASSISTANT:
            raise ValueError("Only assistant messages can carry a reaction")

    @property
    def is_user(self) -> bool:
        return self.role is Role.USER


@dataclass(frozen=True)
class MessageTemplate:
    """Message shape without identity, stamped into a Message on demand"""
    role: Role
    name: str
    avatar_fallback: str
    content: str
    markdown: bool = False
    avatar_url: Optional[str] = None

    def build(self, message_id: str) -> Message:
        return Message(
            message_id=message_id,
            role=self.role,
            name=self.name,
            avatar_fallback=self.avatar_fallback,
            content=self.content,
            markdown=self.markdown,
            avatar_url=self.avatar_url,
        )


@dataclass
class Conversation:
    """Conversation containing messages"""
    conversation_id: str
    messages: List[Message] = field(default_factory=list)


@dataclass(frozen=True)
class HistoryConversationSummary:
    """Summary of conversation for listing/navigation"""
    conversation_id: str
    title: str
    preview: str
    timestamp: str


@dataclass(frozen=True)
class HistoryGroup:
    """Labelled bucket of conversation summaries, most recent first"""
    label: str
    conversations: Tuple[HistoryConversationSummary, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "conversations", tuple(self.conversations))


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session handed to the renderer"""
    active_conversation_id: str
    active_conversation_title: str
    messages: Tuple[Message, ...]
    history_groups: Tuple[HistoryGroup, ...]
    staged_attachments: Tuple[Attachment, ...]
    composer_text: str
    is_generating: bool
    pending_conversation_id: Optional[str]
    copied_message_id: Optional[str]
    provider_id: str
    model_id: str
    state: SubmitState = SubmitState.IDLE

    @property
    def has_pending_input(self) -> bool:
        return bool(self.composer_text.strip()) or bool(self.staged_attachments)

    @property
    def awaiting_reply_here(self) -> bool:
        """The in-flight reply belongs to the conversation on screen"""
        return self.pending_conversation_id == self.active_conversation_id
