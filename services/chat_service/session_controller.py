"""
Session controller - owns the chat session state and is the only writer of
the conversation store and the history index.

Submit protocol: IDLE -> SUBMITTING -> AWAITING_REPLY -> IDLE. The user
message is applied synchronously; the assistant reply is a scheduler task
that lands in the conversation that was active at submit time.
"""

from dataclasses import replace
from typing import Iterable, List, Optional, Protocol

from config.app_config import AppConfig, get_config
from services.ai_service.provider_selector import ProviderSelector
from services.ai_service.responder import Responder, SimulatedResponder, pluralize
from services.chat_service.attachment_buffer import AttachmentBuffer
from services.chat_service.conversation_store import ConversationStore
from services.chat_service.errors import ClipboardError, UnsupportedMediaKindError
from services.chat_service.history_index import HistoryIndex, truncate_preview
from services.chat_service.identifiers import IdGenerator
from services.chat_service.models import (
    Attachment,
    HistoryConversationSummary,
    HistoryGroup,
    ImageUpload,
    Message,
    Reaction,
    Role,
    SessionSnapshot,
    SubmitState,
)
from services.chat_service.scheduler import ScheduledTask, TaskScheduler
from services.chat_service.seed_content import HISTORY_SEED, intro_templates, placeholder_template
from utils.logging_config import get_logger, log_conversation_event, log_user_interaction


class Clipboard(Protocol):
    """Platform clipboard; raises ClipboardError when the write is refused"""

    def write_text(self, text: str) -> None:
        ...


class SessionController:
    """
    Orchestrates one chat session: the active conversation, the composer,
    optimistic submits and the simulated assistant turn.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        scheduler: Optional[TaskScheduler] = None,
        id_generator: Optional[IdGenerator] = None,
        clipboard: Optional[Clipboard] = None,
        responder: Optional[Responder] = None,
        history_seed: Optional[Iterable[HistoryGroup]] = None,
    ):
        self.logger = get_logger(__name__)
        self.config = config or get_config()
        self.chat_config = self.config.chat
        self.scheduler = scheduler or TaskScheduler()
        self.ids = id_generator or IdGenerator()
        self.clipboard = clipboard
        self.responder = responder or SimulatedResponder(self.chat_config)
        self.selector = ProviderSelector(self.config.providers)

        self.store = ConversationStore()
        self.attachments = AttachmentBuffer(self.ids, self.scheduler)
        self.history = HistoryIndex.from_groups(
            HISTORY_SEED if history_seed is None else history_seed,
            default_label=self.chat_config.default_group_label,
        )

        self.composer_text = ""
        self.copied_message_id: Optional[str] = None
        self.state = SubmitState.IDLE
        self._pending_reply: Optional[ScheduledTask] = None
        self._pending_conversation_id: Optional[str] = None
        self._copy_reset: Optional[ScheduledTask] = None
        self._chat_counter = len(self.history) + 1

        self._bootstrap()

    def _bootstrap(self):
        """Materialise only the primary conversation; the rest load lazily"""
        primary = next(iter(self.history), None)
        if primary is None:
            self.active_conversation_id = self.ids.next()
            self.active_conversation_title = self.chat_config.untitled_title
        else:
            self.active_conversation_id = primary.conversation_id
            self.active_conversation_title = primary.title
        self.store.ensure_seeded(self.active_conversation_id, self._intro_messages)
        self.logger.info(f"Session started on conversation {self.active_conversation_id}")

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def is_generating(self) -> bool:
        return self._pending_reply is not None

    @property
    def pending_conversation_id(self) -> Optional[str]:
        """Conversation the in-flight reply will land in"""
        return self._pending_conversation_id

    @property
    def messages(self):
        return self.store.get(self.active_conversation_id)

    @property
    def has_pending_input(self) -> bool:
        return bool(self.composer_text.strip()) or len(self.attachments) > 0

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            active_conversation_id=self.active_conversation_id,
            active_conversation_title=self.active_conversation_title,
            messages=self.messages,
            history_groups=self.history.groups,
            staged_attachments=self.attachments.snapshot(),
            composer_text=self.composer_text,
            is_generating=self.is_generating,
            pending_conversation_id=self.pending_conversation_id,
            copied_message_id=self.copied_message_id,
            provider_id=self.selector.provider.id,
            model_id=self.selector.model.id,
            state=self.state,
        )

    def pump(self) -> int:
        """Run scheduler tasks that are due (encodes, replies, copy resets)"""
        return self.scheduler.run_due()

    # ------------------------------------------------------------------
    # Composer
    # ------------------------------------------------------------------

    def set_composer_text(self, text: str):
        self.composer_text = text or ""

    def stage_upload(self, upload: ImageUpload) -> bool:
        """
        Stage an image for the next message

        Returns:
            False when the upload was rejected for not being an image
        """
        try:
            self.attachments.stage(upload)
        except UnsupportedMediaKindError as e:
            self.logger.warning(f"Dropped upload: {e}")
            return False
        return True

    def stage_uploads(self, uploads: Iterable[ImageUpload]) -> int:
        return sum(1 for upload in uploads if self.stage_upload(upload))

    def remove_attachment(self, attachment_id: str):
        self.attachments.remove(attachment_id)

    def clear_attachments(self):
        self.attachments.clear()

    # ------------------------------------------------------------------
    # Submit protocol
    # ------------------------------------------------------------------

    def submit(self, text: Optional[str] = None) -> Optional[Message]:
        """
        Send the composer contents to the active conversation

        Args:
            text: Composer text; the stored composer text is used when omitted

        Returns:
            The appended user message, or None when the submit was rejected
        """
        prompt = (self.composer_text if text is None else text).strip()

        if self.is_generating:
            self.logger.debug("Submit rejected, a reply is already pending")
            return None
        if not prompt and len(self.attachments) == 0:
            self.logger.debug("Submit rejected, nothing to send")
            return None

        self.state = SubmitState.SUBMITTING
        conversation_id = self.active_conversation_id
        conversation_title = self.active_conversation_title
        attachments = self.attachments.drain()
        content = self._user_content(prompt, attachments)

        user_message = Message(
            message_id=self.ids.next(),
            role=Role.USER,
            name=self.chat_config.user_name,
            avatar_fallback=self.chat_config.user_avatar,
            content=content,
            attachments=attachments,
        )
        self.store.append(conversation_id, user_message)
        self._refresh_history_preview(conversation_id, content, conversation_title)

        self.composer_text = ""
        self._clear_copy_feedback()

        self._pending_conversation_id = conversation_id
        self._pending_reply = self.scheduler.call_later(
            self.chat_config.reply_delay_ms,
            self._deliver_reply,
            conversation_id,
            self.selector.provider,
            self.selector.model,
            attachments,
        )
        self.state = SubmitState.AWAITING_REPLY

        log_user_interaction(
            self.logger,
            "submit",
            conversation_id=conversation_id,
            prompt_length=len(prompt),
            attachment_count=len(attachments),
        )
        return user_message

    def _user_content(self, prompt: str, attachments) -> str:
        if prompt:
            return prompt
        if attachments:
            return f"Shared {pluralize(len(attachments), 'attachment')}"
        return "Sent a message"

    def _deliver_reply(self, conversation_id: str, provider, model, attachments):
        try:
            reply = self.responder.reply(
                self.store.get(conversation_id),
                provider,
                model,
                attachments,
                self.ids.next(),
            )
            self.store.append(conversation_id, reply)
            log_conversation_event(
                self.logger,
                "reply_delivered",
                conversation_id,
                provider=provider.id,
                model=model.id,
            )
        finally:
            self._pending_reply = None
            self._pending_conversation_id = None
            self.state = SubmitState.IDLE

    # ------------------------------------------------------------------
    # Conversation lifecycle
    # ------------------------------------------------------------------

    def new_chat(self) -> str:
        """Open a fresh conversation at the top of the history"""
        conversation_id = self.ids.next()
        title = f"{self.chat_config.untitled_title} {self._chat_counter}"
        self._chat_counter += 1

        self.store.ensure_seeded(conversation_id, self._intro_messages)
        self.active_conversation_id = conversation_id
        self.active_conversation_title = title
        self._reset_composer()

        recent = self.chat_config.recent_timestamp
        preview = self.chat_config.new_chat_preview
        self.history = self.history.promote(
            conversation_id,
            lambda existing: HistoryConversationSummary(conversation_id, title, preview, recent),
        )

        log_conversation_event(self.logger, "created", conversation_id, title=title)
        return conversation_id

    def select_conversation(self, summary: HistoryConversationSummary):
        """Make a history entry active, materialising a placeholder on first open"""
        conversation_id = summary.conversation_id
        self.active_conversation_id = conversation_id
        self.active_conversation_title = summary.title
        self._reset_composer()

        created = self.store.ensure_seeded(
            conversation_id,
            lambda: [placeholder_template(self.chat_config, summary.title, summary.preview).build(self.ids.next())],
        )
        if created:
            self.logger.debug(f"Materialised placeholder for {conversation_id}")

        self.history = self.history.promote(
            conversation_id,
            lambda existing: existing if existing is not None else replace(summary),
        )

        log_conversation_event(self.logger, "selected", conversation_id, materialised=created)

    def select_conversation_by_id(self, conversation_id: str):
        """Select by identifier; stale references open an untitled placeholder"""
        summary = self.history.find(conversation_id)
        if summary is None:
            self.logger.warning(f"Unknown conversation reference {conversation_id}")
            summary = HistoryConversationSummary(
                conversation_id=conversation_id,
                title=self.history.find_title(conversation_id),
                preview="",
                timestamp=self.chat_config.recent_timestamp,
            )
        self.select_conversation(summary)

    def toggle_reaction(self, message_id: str, reaction: Reaction) -> Optional[Message]:
        return self.store.set_reaction(self.active_conversation_id, message_id, reaction)

    def copy_message(self, message: Message) -> bool:
        """
        Copy message text to the clipboard and flag it as just copied

        Returns:
            True when the clipboard accepted the text
        """
        if self.clipboard is None:
            self.logger.warning("No clipboard available")
            self._clear_copy_feedback()
            return False

        try:
            self.clipboard.write_text(message.content)
        except ClipboardError as e:
            self.logger.warning(f"Clipboard write failed: {e}")
            self._clear_copy_feedback()
            return False

        self._clear_copy_feedback()
        self.copied_message_id = message.message_id
        self._copy_reset = self.scheduler.call_later(
            self.chat_config.copy_feedback_ms,
            self._expire_copy_feedback,
            message.message_id,
        )
        log_user_interaction(self.logger, "copy", message_id=message.message_id)
        return True

    def _expire_copy_feedback(self, message_id: str):
        if self.copied_message_id == message_id:
            self.copied_message_id = None
        self._copy_reset = None

    # ------------------------------------------------------------------
    # Provider picker
    # ------------------------------------------------------------------

    def select_provider(self, provider_id: str):
        self.selector.select_provider(provider_id)

    def select_model(self, model_id: str):
        self.selector.select_model(model_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _intro_messages(self) -> List[Message]:
        return [template.build(self.ids.next()) for template in intro_templates(self.chat_config)]

    def _refresh_history_preview(self, conversation_id: str, preview: str, title: Optional[str] = None):
        limit = self.chat_config.preview_limit
        recent = self.chat_config.recent_timestamp
        untitled = self.chat_config.untitled_title

        def build(existing: Optional[HistoryConversationSummary]) -> HistoryConversationSummary:
            return HistoryConversationSummary(
                conversation_id=conversation_id,
                title=title or (existing.title if existing else untitled),
                preview=truncate_preview(preview, limit),
                timestamp=recent,
            )

        self.history = self.history.promote(conversation_id, build)

    def _reset_composer(self):
        """Clear composer text, staged attachments and copy feedback; a pending reply is left alone"""
        self.composer_text = ""
        self.attachments.clear()
        self._clear_copy_feedback()

    def _clear_copy_feedback(self):
        self.copied_message_id = None
        if self._copy_reset is not None:
            self._copy_reset.cancel()
            self._copy_reset = None
