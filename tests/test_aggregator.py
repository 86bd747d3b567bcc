"""Tests for thread aggregation."""

import logging

from prconsensus.models import ReviewThread
from prconsensus.scoring.aggregator import PROPOSER_MARKER, aggregate, truncate
from prconsensus.scoring.emoji import APPROVAL


class TestTruncate:
    """Test display text truncation."""

    def test_over_limit(self):
        text = "x" * 301
        result = truncate(text, 300)
        assert result == "x" * 300 + "..."

    def test_at_limit_unchanged(self):
        text = "x" * 300
        assert truncate(text, 300) == text

    def test_short_text(self):
        assert truncate("nit", 300) == "nit"

    def test_custom_marker(self):
        assert truncate("abcdef", 3, marker="…") == "abc…"


class TestAggregate:
    """Test draft construction and participant discovery."""

    def test_empty_input(self):
        result = aggregate([])
        assert result.drafts == []
        assert result.participants == []

    def test_preserves_thread_order(self, make_thread):
        threads = [make_thread(body=f"comment {i}") for i in range(5)]
        result = aggregate(threads)
        assert [d.body for d in result.drafts] == [f"comment {i}" for i in range(5)]

    def test_participants_in_discovery_order(self, make_thread):
        threads = [
            make_thread(author="alice", reactions=[("THUMBS_UP", "carol"), ("EYES", "bob")]),
            make_thread(author="bob", reactions=[("THUMBS_UP", "alice"), ("HEART", "dave")]),
        ]
        result = aggregate(threads)
        assert result.participants == ["alice", "carol", "bob", "dave"]

    def test_reactor_only_participant(self, make_thread):
        result = aggregate([make_thread(author="alice", reactions=[("EYES", "lurker")])])
        assert "lurker" in result.participants

    def test_only_first_comment_taken(self, make_thread):
        thread = make_thread(author="alice", replies=["bob", "carol"])
        result = aggregate([thread])
        assert len(result.drafts) == 1
        assert result.drafts[0].comment_id == thread.comments[0].comment_id
        # Reply authors and reply reactors are not participants
        assert result.participants == ["alice"]

    def test_thread_without_comments_skipped(self, make_thread):
        empty = ReviewThread(thread_id="T-empty", is_resolved=True, comments=[])
        result = aggregate([empty, make_thread()])
        assert len(result.drafts) == 1

    def test_proposer_marker(self, make_thread):
        result = aggregate([make_thread(author="alice")])
        draft = result.drafts[0]
        assert draft.proposer == "alice"
        assert draft.glyphs == {"alice": PROPOSER_MARKER}

    def test_reactions_normalized_in_order(self, make_thread):
        result = aggregate([make_thread(reactions=[("THUMBS_UP", "bob"), ("ROCKET", "carol")])])
        reactions = result.drafts[0].reactions
        assert [(r.reactor, r.raw_kind) for r in reactions] == [("bob", "THUMBS_UP"), ("carol", "ROCKET")]
        assert reactions[0].glyph == APPROVAL

    def test_resolution_flag_copied(self, make_thread):
        result = aggregate([make_thread(resolved=True), make_thread(resolved=False)])
        assert [d.is_resolved for d in result.drafts] == [True, False]

    def test_body_truncated(self, make_thread):
        result = aggregate([make_thread(body="y" * 20)], body_char_limit=10)
        assert result.drafts[0].body == "y" * 10 + "..."

    def test_unknown_kind_logged_not_fatal(self, make_thread, caplog):
        thread = make_thread(reactions=[("MIND_BLOWN", "bob")])
        with caplog.at_level(logging.WARNING, logger="prconsensus.scoring.aggregator"):
            result = aggregate([thread])

        assert result.drafts[0].reactions[0].glyph == "MIND_BLOWN"
        assert "MIND_BLOWN" in caplog.text
        assert "bob" in caplog.text
        assert thread.comments[0].url in caplog.text

    def test_no_state_shared_between_calls(self, make_thread):
        threads = [make_thread(author="alice", reactions=[("THUMBS_UP", "bob")])]
        first = aggregate(threads)
        second = aggregate(threads)
        assert first == second
        assert second.participants == ["alice", "bob"]
