"""
History index - recency-ordered navigation over conversation summaries.

The index is an immutable value. Every change goes through ``promote``, which
extracts a conversation from wherever it sits and reinserts it at the front of
the first group, so brand-new and existing conversations take the same path.
"""

from dataclasses import replace
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from services.chat_service.models import HistoryConversationSummary, HistoryGroup

UNTITLED_CHAT = "Untitled chat"
DEFAULT_GROUP_LABEL = "Today"

SummaryFactory = Callable[[Optional[HistoryConversationSummary]], HistoryConversationSummary]


def truncate_preview(text: str, limit: int = 80) -> str:
    """Cut ``text`` to ``limit`` characters, marking the cut with an ellipsis"""
    if len(text) <= limit:
        return text
    return f"{text[:limit]}…"


class HistoryIndex:
    """Ordered groups of conversation summaries"""

    def __init__(self, groups: Iterable[HistoryGroup] = (), default_label: str = DEFAULT_GROUP_LABEL):
        self._groups: Tuple[HistoryGroup, ...] = tuple(groups)
        self.default_label = default_label

    @classmethod
    def from_groups(cls, groups: Iterable[HistoryGroup], default_label: str = DEFAULT_GROUP_LABEL) -> 'HistoryIndex':
        """Build an index from seed data, copying every summary"""
        copied = [
            HistoryGroup(group.label, tuple(replace(summary) for summary in group.conversations))
            for group in groups
        ]
        return cls(copied, default_label=default_label)

    @property
    def groups(self) -> Tuple[HistoryGroup, ...]:
        return self._groups

    def promote(self, conversation_id: str, summary_factory: SummaryFactory) -> 'HistoryIndex':
        """
        Move (or insert) a conversation at the front of the first group

        Args:
            conversation_id: Conversation to promote
            summary_factory: Receives the current summary (None if absent) and
                returns the summary to insert

        Returns:
            New index; this one is left untouched
        """
        existing: Optional[HistoryConversationSummary] = None
        groups: List[HistoryGroup] = []

        for group in self._groups:
            kept = []
            for summary in group.conversations:
                if summary.conversation_id == conversation_id:
                    existing = existing or summary
                    continue
                kept.append(summary)
            groups.append(HistoryGroup(group.label, tuple(kept)))

        updated = summary_factory(existing)

        if not groups:
            groups.append(HistoryGroup(self.default_label))

        head = groups[0]
        rest = tuple(
            summary for summary in head.conversations
            if summary.conversation_id != updated.conversation_id
        )
        groups[0] = HistoryGroup(head.label, (updated,) + rest)

        return HistoryIndex(groups, default_label=self.default_label)

    def find(self, conversation_id: str) -> Optional[HistoryConversationSummary]:
        for summary in self:
            if summary.conversation_id == conversation_id:
                return summary
        return None

    def find_title(self, conversation_id: str) -> str:
        """Title of a conversation, or the untitled fallback for stale references"""
        summary = self.find(conversation_id)
        return summary.title if summary is not None else UNTITLED_CHAT

    def conversation_ids(self) -> List[str]:
        return [summary.conversation_id for summary in self]

    def __iter__(self) -> Iterator[HistoryConversationSummary]:
        for group in self._groups:
            yield from group.conversations

    def __len__(self) -> int:
        return sum(len(group.conversations) for group in self._groups)

    def __eq__(self, other) -> bool:
        if not isinstance(other, HistoryIndex):
            return NotImplemented
        return self._groups == other._groups

    def __repr__(self) -> str:
        labels = ", ".join(f"{group.label}={len(group.conversations)}" for group in self._groups)
        return f"HistoryIndex({labels})"
