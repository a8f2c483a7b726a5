"""
Chat interface service - renders session snapshots with Streamlit and turns
widget events into SessionController calls. It never touches session data
directly.
"""

import base64
import time
from typing import Any, Dict, Optional

import streamlit as st

from config.app_config import get_config
from services.chat_service.models import Attachment, ImageUpload, Message, Reaction, Role, SessionSnapshot
from services.chat_service.session_controller import SessionController
from services.ui_service.clipboard import BrowserClipboard, copy_button
from services.ui_service.session_binding import (
    get_session_controller,
    get_uploader_generation,
    mark_copy_event_processed,
    mark_upload_processed,
    reset_session,
    reset_uploader,
)
from utils.logging_config import get_logger


def attachment_bytes(attachment: Attachment) -> bytes:
    """Decode the data URI preview back into image bytes for st.image"""
    _, _, payload = attachment.preview.partition(",")
    return base64.b64decode(payload)


class ChatInterface:
    """
    Service for chat interface components and interactions.
    Handles the history sidebar, provider picker, message list and composer.
    """

    def __init__(self, controller: Optional[SessionController] = None):
        self.logger = get_logger(__name__)
        self.config = get_config()
        self.controller = controller or get_session_controller()

    def render(self):
        """Render one full pass of the page"""
        self.controller.pump()
        snapshot = self.controller.snapshot()

        self.render_sidebar(snapshot)
        self.render_header(snapshot)
        self.render_chat_messages(snapshot)
        self.render_composer(snapshot)
        self.wait_for_pending_work()

    def render_sidebar(self, snapshot: SessionSnapshot):
        """Render the history sidebar"""
        with st.sidebar:
            st.markdown(f"## 💬 {self.config.ui.sidebar_caption}")

            if st.button("➕ New chat", key="sidebar_new_chat", use_container_width=True, type="secondary"):
                self._start_new_chat()

            for group in snapshot.history_groups:
                if not group.conversations:
                    continue
                st.caption(group.label)
                for summary in group.conversations:
                    is_active = summary.conversation_id == snapshot.active_conversation_id
                    if st.button(
                        f"{summary.title} · {summary.timestamp}",
                        key=f"history_{summary.conversation_id}",
                        help=summary.preview,
                        use_container_width=True,
                        type="primary" if is_active else "secondary",
                    ):
                        if not is_active:
                            self.controller.select_conversation(summary)
                            reset_uploader()
                            st.rerun()

            if self.config.debug:
                st.divider()
                st.subheader("🔧 Debug Tools")
                st.caption(f"Pending tasks: {self.controller.scheduler.pending_count}")
                if st.button("Reset Session State", type="secondary"):
                    reset_session()
                    st.rerun()

    def render_header(self, snapshot: SessionSnapshot):
        """Render title, provider/model picker and the new chat shortcut"""
        selector = self.controller.selector
        title_col, provider_col, model_col = st.columns([3, 2, 2])

        with title_col:
            st.markdown(f"### {snapshot.active_conversation_title}")
            st.caption(self.config.ui.app_subtitle)

        with provider_col:
            providers = selector.providers
            provider_ids = [provider.id for provider in providers]
            labels = {provider.id: provider.label for provider in providers}
            chosen = st.selectbox(
                "Provider",
                provider_ids,
                index=provider_ids.index(snapshot.provider_id),
                format_func=lambda provider_id: labels[provider_id],
            )
            if chosen != snapshot.provider_id:
                self.controller.select_provider(chosen)
                st.rerun()

        with model_col:
            models = selector.provider.models
            model_ids = [model.id for model in models]
            model_labels = {model.id: model.label for model in models}
            chosen_model = st.selectbox(
                "Model",
                model_ids,
                index=model_ids.index(snapshot.model_id),
                format_func=lambda model_id: model_labels[model_id],
            )
            if chosen_model != snapshot.model_id:
                self.controller.select_model(chosen_model)
                st.rerun()

    def render_chat_messages(self, snapshot: SessionSnapshot):
        """Render chat messages of the active conversation"""
        for message in snapshot.messages:
            with st.chat_message(message.role.value, avatar=message.avatar_url):
                st.caption(message.name)
                if message.markdown:
                    st.markdown(message.content)
                else:
                    st.text(message.content)

                for attachment in message.attachments:
                    st.image(attachment_bytes(attachment), caption=f"{attachment.name} ({attachment.human_size})", width=240)

                if message.role is Role.ASSISTANT:
                    self._render_message_actions(message, snapshot)

        if snapshot.awaiting_reply_here:
            with st.chat_message(Role.ASSISTANT.value):
                st.markdown("_Thinking..._")

    def _render_message_actions(self, message: Message, snapshot: SessionSnapshot):
        copy_col, up_col, down_col, _ = st.columns([1, 1, 1, 6])
        copied = snapshot.copied_message_id == message.message_id

        with copy_col:
            outcome = copy_button(message.content, copied, key=f"copy_{message.message_id}")
            if outcome and mark_copy_event_processed(outcome.get("event_id", "")):
                self._handle_copy_report(message, outcome)
        with up_col:
            if st.button(
                "👍",
                key=f"upvote_{message.message_id}",
                type="primary" if message.reaction is Reaction.UPVOTE else "secondary",
            ):
                self.controller.toggle_reaction(message.message_id, Reaction.UPVOTE)
                st.rerun()
        with down_col:
            if st.button(
                "👎",
                key=f"downvote_{message.message_id}",
                type="primary" if message.reaction is Reaction.DOWNVOTE else "secondary",
            ):
                self.controller.toggle_reaction(message.message_id, Reaction.DOWNVOTE)
                st.rerun()

    def _handle_copy_report(self, message: Message, outcome: Dict[str, Any]):
        """Turn a browser copy report into copy feedback"""
        clipboard = self.controller.clipboard
        if isinstance(clipboard, BrowserClipboard):
            clipboard.record(message.content, outcome)

        if self.controller.copy_message(message):
            st.rerun()
        else:
            st.toast("⚠️ Could not copy to the clipboard")

    def render_composer(self, snapshot: SessionSnapshot):
        """Render staged attachments, the image uploader and the chat input"""
        ui = self.config.ui

        if snapshot.staged_attachments:
            columns = st.columns(len(snapshot.staged_attachments))
            for column, attachment in zip(columns, snapshot.staged_attachments):
                with column:
                    st.image(attachment_bytes(attachment), caption=attachment.name, width=96)
                    if st.button("✖", key=f"remove_{attachment.attachment_id}", help="Remove attachment"):
                        self.controller.remove_attachment(attachment.attachment_id)
                        st.rerun()

        uploads = st.file_uploader(
            "Attach images",
            type=ui.upload_types,
            accept_multiple_files=True,
            key=f"uploader_{get_uploader_generation()}",
            disabled=snapshot.is_generating,
        )
        staged_any = False
        for upload in uploads or []:
            if not mark_upload_processed(upload.file_id):
                continue
            staged_any |= self.controller.stage_upload(
                ImageUpload(name=upload.name, mime_type=upload.type or "", data=upload.getvalue())
            )
        if staged_any:
            st.rerun()

        if snapshot.staged_attachments and not snapshot.is_generating:
            if st.button("📤 Send attachments", key="send_attachments"):
                self._submit("")

        prompt = st.chat_input(ui.composer_placeholder, disabled=snapshot.is_generating)
        if prompt is not None:
            self._submit(prompt)

    def wait_for_pending_work(self):
        """Sleep until the next scheduled task is due, then rerun so it lands"""
        delay = self.controller.scheduler.next_delay()
        if delay is None:
            return
        time.sleep(delay)
        self.controller.pump()
        st.rerun()

    def _submit(self, text: str):
        message = self.controller.submit(text)
        if message is not None:
            reset_uploader()
        st.rerun()

    def _start_new_chat(self):
        self.controller.new_chat()
        reset_uploader()
        st.rerun()


def get_chat_interface() -> ChatInterface:
    """Chat interface bound to the current browser session"""
    return ChatInterface(get_session_controller())
