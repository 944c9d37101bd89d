"""Tests for the PathFilter class."""

from ssync.sync.context import Side, SyncContext
from ssync.sync.filter import PathFilter


def _make_filter(from_table: dict, to_table: dict = None) -> PathFilter:
    """Create a PathFilter for the given side tables."""
    from_data = {"path": "/src", **from_table}
    to_data = {"path": "/dest", **(to_table or {})}
    return PathFilter(SyncContext.from_dict({"from": from_data, "to": to_data}))


class TestPathFilter:
    """Tests for include/exclude evaluation."""

    def test_no_patterns_admits_everything(self):
        """Without patterns every path is admitted."""
        path_filter = _make_filter({})

        assert path_filter.admit("/src/a.txt", Side.SOURCE)
        assert path_filter.admit("/dest/b.log", Side.DESTINATION)

    def test_include_admits_only_matches(self):
        """A non-empty include list admits only matching paths."""
        path_filter = _make_filter({"include": [r"\.txt$"]})

        assert path_filter.admit("/src/a.txt", Side.SOURCE)
        assert not path_filter.admit("/src/b.log", Side.SOURCE)

    def test_include_any_pattern_matches(self):
        """One matching include pattern is enough."""
        path_filter = _make_filter({"include": [r"\.txt$", r"\.md$"]})

        assert path_filter.admit("/src/readme.md", Side.SOURCE)

    def test_include_overrides_exclude(self):
        """The exclude list is not consulted when include is non-empty."""
        path_filter = _make_filter({"include": [r"\.txt$"], "exclude": [r"secret"]})

        assert path_filter.admit("/src/secret.txt", Side.SOURCE)
        assert not path_filter.admit("/src/public.log", Side.SOURCE)

    def test_exclude_only(self):
        """With only an exclude list, matching paths are rejected."""
        path_filter = _make_filter({"exclude": ["^/tmp/skip"]})

        assert not path_filter.admit("/tmp/skip/x", Side.SOURCE)
        assert path_filter.admit("/tmp/keep/x", Side.SOURCE)

    def test_patterns_are_not_anchored(self):
        """Patterns match anywhere in the path."""
        path_filter = _make_filter({"exclude": ["cache"]})

        assert not path_filter.admit("/src/project/cache/data.bin", Side.SOURCE)

    def test_sides_are_independent(self):
        """Each side uses only its own patterns."""
        path_filter = _make_filter({"exclude": [r"\.log$"]}, {"include": [r"\.log$"]})

        assert not path_filter.admit("/x/a.log", Side.SOURCE)
        assert path_filter.admit("/x/a.txt", Side.SOURCE)
        assert path_filter.admit("/x/a.log", Side.DESTINATION)
        assert not path_filter.admit("/x/a.txt", Side.DESTINATION)
