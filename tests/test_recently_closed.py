"""Tests for the recently-closed history."""

from tabpalette.services.recently_closed import ClosedTabRecord, RecentlyClosedHistory


def record(path):
    return ClosedTabRecord.for_path(path)


class TestClosedTabRecord:
    def test_for_path_derives_title_and_extension(self) -> None:
        rec = ClosedTabRecord.for_path("Projects/alpha.md")
        assert rec.title == "alpha"
        assert rec.extension == "md"

    def test_explicit_title(self) -> None:
        assert ClosedTabRecord.for_path("board.canvas", "Board").title == "Board"


class TestRecentlyClosedHistory:
    """Tests for the bounded ring buffer."""

    def test_push_puts_newest_first(self) -> None:
        history = RecentlyClosedHistory()
        history.push(record("a.md"))
        history.push(record("b.md"))
        assert history.paths == ["b.md", "a.md"]

    def test_push_moves_duplicates_to_front(self) -> None:
        history = RecentlyClosedHistory()
        for path in ("a.md", "b.md", "a.md"):
            history.push(record(path))
        assert history.paths == ["a.md", "b.md"]

    def test_six_pushes_keep_five(self) -> None:
        history = RecentlyClosedHistory()
        for i in range(1, 7):
            history.push(record(f"n{i}.md"))

        assert len(history) == 5
        assert history.paths == ["n6.md", "n5.md", "n4.md", "n3.md", "n2.md"]

    def test_constructor_keeps_given_order(self) -> None:
        history = RecentlyClosedHistory([record("a.md"), record("b.md")])
        assert history.paths == ["a.md", "b.md"]

    def test_prune_drops_open_paths(self) -> None:
        history = RecentlyClosedHistory([record("a.md"), record("b.md")])
        assert history.prune(["b.md", "c.md"]) is True
        assert history.paths == ["a.md"]
        assert history.prune(["c.md"]) is False

    def test_remove_and_contains(self) -> None:
        history = RecentlyClosedHistory([record("a.md")])
        assert "a.md" in history
        assert history.remove("a.md") is True
        assert history.remove("a.md") is False
        assert "a.md" not in history

    def test_clear(self) -> None:
        history = RecentlyClosedHistory([record("a.md")])
        history.clear()
        assert len(history) == 0

    def test_round_trip_through_dicts(self) -> None:
        history = RecentlyClosedHistory([record("x/a.md"), ClosedTabRecord.for_path("b.canvas", "Board")])
        restored = RecentlyClosedHistory.from_list(history.to_list())
        assert restored.records == history.records

    def test_from_list_skips_malformed_entries(self) -> None:
        raw = [
            {"path": "a.md"},
            {"title": "no path"},
            "garbage",
            {"path": ""},
            {"path": "b.md", "title": "Bee", "extension": "md"},
        ]
        history = RecentlyClosedHistory.from_list(raw)

        assert history.paths == ["a.md", "b.md"]
        assert history.records[0].title == "a"
        assert history.records[1].title == "Bee"

    def test_from_list_applies_limit(self) -> None:
        raw = [{"path": f"n{i}.md"} for i in range(8)]
        assert len(RecentlyClosedHistory.from_list(raw)) == 5
