"""
Chat service errors. None of these are fatal to a session.
"""


class ChatSessionError(Exception):
    """Base class for chat session errors"""


class UnsupportedMediaKindError(ChatSessionError):
    """A non-image file was offered to the attachment buffer"""

    def __init__(self, mime_type: str, name: str = ""):
        self.mime_type = mime_type
        self.name = name
        super().__init__(f"Unsupported media kind '{mime_type or 'unknown'}' for {name or 'upload'}")


class ClipboardError(ChatSessionError):
    """The platform refused a clipboard write"""
