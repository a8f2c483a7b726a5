"""
Tests for the history index and promotion
"""

import random

from services.chat_service.history_index import HistoryIndex, truncate_preview
from services.chat_service.models import HistoryConversationSummary, HistoryGroup
from services.chat_service.seed_content import HISTORY_SEED


def summary(conversation_id, title=None, preview="", timestamp="Just now"):
    return HistoryConversationSummary(conversation_id, title or conversation_id.title(), preview, timestamp)


def assert_unique(index: HistoryIndex):
    ids = index.conversation_ids()
    assert len(ids) == len(set(ids))


class TestPromote:
    """Test extract-then-reinsert promotion"""

    def setup_method(self):
        self.index = HistoryIndex.from_groups(HISTORY_SEED)

    def test_existing_conversation_moves_to_front(self):
        """Test promoting an entry from a later group"""
        promoted = self.index.promote("week-2", lambda existing: existing)

        first = promoted.groups[0]
        assert first.label == "Today"
        assert first.conversations[0].conversation_id == "week-2"
        assert [s.conversation_id for s in promoted.groups[1].conversations] == ["week-1"]
        assert len(promoted) == len(self.index)
        assert_unique(promoted)

    def test_factory_receives_existing_summary(self):
        """Test the factory sees the current summary and its result is kept"""
        seen = []

        def factory(existing):
            seen.append(existing)
            return HistoryConversationSummary(existing.conversation_id, "Renamed", "New preview", "Just now")

        promoted = self.index.promote("today-3", factory)

        assert seen[0].title == "Design critique notes"
        head = promoted.groups[0].conversations[0]
        assert (head.title, head.preview, head.timestamp) == ("Renamed", "New preview", "Just now")

    def test_new_conversation_inserted_at_front(self):
        """Test promotion of an unknown id inserts it"""
        received = []

        def factory(existing):
            received.append(existing)
            return summary("fresh")

        promoted = self.index.promote("fresh", factory)

        assert received == [None]
        assert promoted.groups[0].conversations[0].conversation_id == "fresh"
        assert len(promoted) == len(self.index) + 1

    def test_empty_index_gets_default_group(self):
        """Test promotion into an empty index creates the first group"""
        promoted = HistoryIndex().promote("abc", lambda existing: summary("abc"))

        assert len(promoted.groups) == 1
        assert promoted.groups[0].label == "Today"
        assert promoted.conversation_ids() == ["abc"]

    def test_promote_does_not_mutate_input(self):
        """Test promotion is pure"""
        before = self.index.groups
        self.index.promote("week-1", lambda existing: existing)

        assert self.index.groups == before
        assert self.index.groups[0].conversations[0].conversation_id == "today-1"

    def test_same_inputs_same_result(self):
        """Test promotion is deterministic"""
        first = self.index.promote("today-2", lambda existing: existing)
        second = self.index.promote("today-2", lambda existing: existing)

        assert first == second

    def test_emptied_group_keeps_its_label(self):
        """Test a group left empty by extraction stays in place"""
        index = HistoryIndex([
            HistoryGroup("Today", (summary("a"),)),
            HistoryGroup("Older", (summary("b"),)),
        ])

        promoted = index.promote("b", lambda existing: existing)

        assert [group.label for group in promoted.groups] == ["Today", "Older"]
        assert promoted.groups[1].conversations == ()
        assert promoted.conversation_ids() == ["b", "a"]

    def test_random_promotions_never_duplicate_or_lose(self):
        """Test each id sits in exactly one group after any promotion sequence"""
        rng = random.Random(7)
        index = self.index
        known = set(index.conversation_ids())
        candidates = sorted(known) + ["new-1", "new-2", "new-3"]

        for _ in range(200):
            target = rng.choice(candidates)
            index = index.promote(target, lambda existing, t=target: existing or summary(t))
            known.add(target)

            assert_unique(index)
            assert set(index.conversation_ids()) == known
            assert index.groups[0].conversations[0].conversation_id == target


class TestLookup:
    """Test title lookup and helpers"""

    def test_find_title(self):
        """Test title of a known conversation"""
        index = HistoryIndex.from_groups(HISTORY_SEED)
        assert index.find_title("week-1") == "Support triage ideas"

    def test_find_title_unknown_falls_back(self):
        """Test stale references get the untitled fallback"""
        index = HistoryIndex.from_groups(HISTORY_SEED)
        assert index.find_title("gone") == "Untitled chat"
        assert index.find("gone") is None

    def test_truncate_preview(self):
        """Test preview truncation at the limit"""
        assert truncate_preview("short") == "short"
        assert truncate_preview("x" * 80) == "x" * 80
        assert truncate_preview("x" * 81) == "x" * 80 + "…"
        assert truncate_preview("abcdef", limit=3) == "abc…"
