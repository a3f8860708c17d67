"""Tests for the view state machine."""

import pytest

from proctop.state import SortKey, ViewMode, ViewState, transition


def test_initial_state():
    """Test the dashboard starts unsorted, ungrouped, in the normal view."""
    state = ViewState()
    assert state.mode is ViewMode.NORMAL
    assert state.sort_key is SortKey.NONE
    assert state.group_enabled is False
    assert state.is_running


class TestSortKey:
    """Tests for SortKey enum."""

    def test_sort_key_values(self):
        """Test SortKey enum has expected values."""
        assert SortKey.NONE.value == "none"
        assert SortKey.CPU.value == "cpu"
        assert SortKey.RAM.value == "ram"

    def test_sort_key_members(self):
        """Test SortKey enum has all expected members."""
        assert len(list(SortKey)) == 3


class TestTransition:
    """Tests for transition."""

    @pytest.mark.parametrize(
        ("key", "sort_key"),
        [("v", SortKey.NONE), ("r", SortKey.RAM), ("c", SortKey.CPU)],
    )
    def test_sort_keys(self, key, sort_key):
        """Test v/r/c select the sort key and return to the normal view."""
        start = ViewState(mode=ViewMode.HELP, sort_key=SortKey.CPU, group_enabled=True)
        state = transition(start, key)

        assert state.mode is ViewMode.NORMAL
        assert state.sort_key is sort_key
        assert state.group_enabled is True

    def test_help(self):
        """Test h enters the help view without touching sort or grouping."""
        start = ViewState(sort_key=SortKey.RAM, group_enabled=True)
        state = transition(start, "h")

        assert state.mode is ViewMode.HELP
        assert state.sort_key is SortKey.RAM
        assert state.group_enabled is True

    def test_group_toggle_twice_restores(self):
        """Test pressing g twice returns grouping to its original value."""
        start = ViewState(sort_key=SortKey.CPU)
        once = transition(start, "g")
        twice = transition(once, "g")

        assert once.group_enabled is True
        assert once.sort_key is SortKey.CPU
        assert twice == start

    def test_group_toggle_in_help_stays_in_help(self):
        """Test g does not leave the help view."""
        state = transition(ViewState(mode=ViewMode.HELP), "g")

        assert state.mode is ViewMode.HELP
        assert state.group_enabled is True

    def test_help_round_trip_preserves_settings(self):
        """Test entering and leaving help keeps sort key and grouping."""
        start = ViewState(sort_key=SortKey.RAM, group_enabled=True)
        state = transition(transition(start, "h"), "r")

        assert state == start

    def test_quit(self):
        """Test q reaches the terminal quit state."""
        state = transition(ViewState(), "q")

        assert state.mode is ViewMode.QUIT
        assert not state.is_running

    def test_quit_is_terminal(self):
        """Test no key leaves the quit state."""
        state = transition(ViewState(), "q")
        for key in "hvrcg":
            assert transition(state, key) == state

    @pytest.mark.parametrize("key", [None, "x", "H", "Q", "", "escape", "1"])
    def test_other_keys_and_timeout_ignored(self, key):
        """Test unknown keys and timeouts leave the state unchanged."""
        start = ViewState(sort_key=SortKey.CPU, group_enabled=True)
        assert transition(start, key) == start
