"""
Opaque identifiers for conversations, messages and attachments.
"""

import uuid


class IdGenerator:
    """Hands out random uuid4 tokens; only the issue count is kept"""

    def __init__(self):
        self.issued = 0

    def next(self) -> str:
        self.issued += 1
        return uuid.uuid4().hex

    def __len__(self) -> int:
        return self.issued
