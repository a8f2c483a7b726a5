"""
Attachment buffer - images staged in the composer for the next outgoing message.
"""

import base64
from dataclasses import replace
from typing import Callable, List, Optional, Tuple

from services.chat_service.errors import UnsupportedMediaKindError
from services.chat_service.identifiers import IdGenerator
from services.chat_service.models import Attachment, ImageUpload
from services.chat_service.scheduler import ScheduledTask, TaskScheduler
from utils.logging_config import get_logger


def encode_preview(upload: ImageUpload, attachment_id: str, fallback_name: str) -> Attachment:
    """
    Encode an upload into a staged attachment with a data URI preview

    Args:
        upload: Image payload and metadata
        attachment_id: Identifier for the new attachment
        fallback_name: Name used when the upload has none (pasted images)

    Returns:
        Attachment ready to be shown in the composer
    """
    payload = base64.b64encode(upload.data).decode("ascii")
    return Attachment(
        attachment_id=attachment_id,
        name=upload.name or fallback_name,
        mime_type=upload.mime_type,
        size=upload.size,
        preview=f"data:{upload.mime_type};base64,{payload}",
    )


class AttachmentBuffer:
    """
    Holds staged images independently of any conversation until send time.
    Staging is asynchronous: an attachment becomes visible only once its
    preview has been encoded by the scheduler.
    """

    def __init__(self, id_generator: IdGenerator, scheduler: TaskScheduler):
        self.logger = get_logger(__name__)
        self.id_generator = id_generator
        self.scheduler = scheduler
        self._staged: List[Attachment] = []

    def stage(
        self,
        upload: ImageUpload,
        on_ready: Optional[Callable[[Attachment], None]] = None,
    ) -> ScheduledTask:
        """
        Queue an image for preview encoding

        Raises:
            UnsupportedMediaKindError: if the upload is not an image
        """
        if not upload.is_image:
            raise UnsupportedMediaKindError(upload.mime_type, upload.name)
        return self.scheduler.call_soon(self._complete_stage, upload, on_ready)

    def _complete_stage(self, upload: ImageUpload, on_ready: Optional[Callable[[Attachment], None]]):
        attachment = encode_preview(
            upload,
            self.id_generator.next(),
            f"pasted-image-{len(self._staged) + 1}.png",
        )
        self._staged.append(attachment)
        self.logger.debug(f"Staged attachment {attachment.attachment_id} ({attachment.name}, {attachment.human_size})")
        if on_ready is not None:
            on_ready(attachment)

    def remove(self, attachment_id: str) -> bool:
        """Drop a staged attachment; unknown identifiers are ignored"""
        remaining = [item for item in self._staged if item.attachment_id != attachment_id]
        removed = len(remaining) != len(self._staged)
        self._staged = remaining
        return removed

    def drain(self) -> Tuple[Attachment, ...]:
        """Hand over copies of every staged attachment and empty the buffer"""
        drained = tuple(replace(item) for item in self._staged)
        self._staged = []
        return drained

    def clear(self):
        """Discard staged attachments; encodes already queued still land afterwards"""
        self._staged = []

    def snapshot(self) -> Tuple[Attachment, ...]:
        return tuple(self._staged)

    def __len__(self) -> int:
        return len(self._staged)
