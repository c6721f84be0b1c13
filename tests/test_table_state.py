"""Tests for TableState (search, pagination, selection and row editor)."""

import pytest

from adminui.data.table_state import TableState
from adminui.data.user_store import UserStore
from adminui.models.user_record import UserRecord
from adminui.utils.filters import LiteralFilter


def make_records(count):
    return [UserRecord(i, f"User {i}", f"user{i}@example.com", "member") for i in range(1, count + 1)]


@pytest.fixture
def alice_bob():
    """State over a two-record store (Alice, Bob)."""
    store = UserStore()
    store.load(
        [
            UserRecord(1, "Alice", "a@x.com", "admin"),
            UserRecord(2, "Bob", "b@x.com", "member"),
        ]
    )
    return TableState(store, page_size=10)


@pytest.fixture
def big_state():
    """State over 25 records."""
    store = UserStore()
    store.load(make_records(25))
    return TableState(store, page_size=10)


class TestSearch:
    """Tests for set_query() and the active set."""

    def test_page_one_shows_both_in_order(self, alice_bob):
        assert [r.id for r in alice_bob.visible_records()] == [1, 2]

    def test_query_bob(self, alice_bob):
        alice_bob.set_query("bob")

        assert [r.id for r in alice_bob.active_records()] == [2]
        assert alice_bob.total_pages() == 1

    def test_query_resets_page(self, big_state):
        big_state.go_to_page(3)

        big_state.set_query("user")

        assert big_state.page_index == 1

    def test_clearing_query_restores_full_set(self, big_state):
        big_state.set_query("user 2")
        big_state.go_to_page(1)

        big_state.set_query("")

        assert big_state.active_records() == big_state.store.records
        assert big_state.page_index == 1

    def test_active_set_follows_store_changes(self, alice_bob):
        """The filtered view is derived, never a stale copy."""
        alice_bob.set_query("b")
        assert [r.id for r in alice_bob.active_records()] == [2]

        alice_bob.start_edit(1)
        alice_bob.set_buffer_field("name", "Barbara")
        alice_bob.save_edit()

        assert [r.id for r in alice_bob.active_records()] == [1, 2]

    def test_invalid_pattern_does_not_raise(self, alice_bob):
        alice_bob.set_query("[")
        assert alice_bob.visible_records() == []

    def test_custom_filter(self):
        store = UserStore()
        store.load([UserRecord(1, "a.b", "x", "y"), UserRecord(2, "axb", "x", "y")])
        state = TableState(store, search_filter=LiteralFilter())

        state.set_query("a.b")

        assert [r.id for r in state.active_records()] == [1]


class TestPagination:
    """Tests for go_to_page() and page clamping."""

    def test_go_to_valid_page(self, big_state):
        assert big_state.go_to_page(3) is True
        assert [r.id for r in big_state.visible_records()] == [21, 22, 23, 24, 25]

    @pytest.mark.parametrize("page", [0, 4, -1])
    def test_out_of_range_request_ignored(self, big_state, page):
        big_state.go_to_page(2)

        assert big_state.go_to_page(page) is False
        assert big_state.page_index == 2

    def test_delete_clamps_page(self, big_state):
        """25 records on page 3; deleting 15 leaves one page."""
        big_state.go_to_page(3)
        for record_id in range(11, 26):
            big_state.toggle_one(record_id, True)

        big_state.delete_selected()

        assert len(big_state.store) == 10
        assert big_state.page_index == 1
        assert [r.id for r in big_state.visible_records()] == list(range(1, 11))

    def test_single_delete_clamps_page(self):
        store = UserStore()
        store.load(make_records(11))
        state = TableState(store, page_size=10)
        state.go_to_page(2)

        state.delete(11)

        assert state.page_index == 1

    def test_empty_store_is_page_one_of_one(self):
        state = TableState(UserStore())
        assert state.page_index == 1
        assert state.total_pages() == 1
        assert state.visible_records() == []

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            TableState(UserStore(), page_size=0)


class TestSelection:
    """Tests for toggle_all() and toggle_one()."""

    def test_toggle_all_is_global(self, big_state):
        big_state.go_to_page(2)

        big_state.toggle_all(True)

        assert big_state.selected_ids == set(big_state.store.ids)
        assert big_state.can_delete_selected is True

    def test_toggle_all_ignores_search(self, big_state):
        big_state.set_query("user 1")

        big_state.toggle_all(True)

        assert len(big_state.selected_ids) == 25

    def test_toggle_all_false_clears(self, big_state):
        big_state.toggle_all(True)
        big_state.toggle_all(False)

        assert big_state.selected_ids == set()
        assert big_state.can_delete_selected is False

    def test_toggle_one(self, alice_bob):
        alice_bob.toggle_one(2, True)
        assert alice_bob.selected_ids == {2}

        alice_bob.toggle_one(2, False)
        assert alice_bob.selected_ids == set()

    def test_delete_selected_purges(self, alice_bob):
        alice_bob.toggle_one(1, True)

        assert alice_bob.delete_selected() == {1}

        assert alice_bob.store.ids == [2]
        assert alice_bob.selected_ids == set()

    def test_delete_selected_without_selection(self, alice_bob):
        assert alice_bob.delete_selected() == set()
        assert len(alice_bob.store) == 2


class TestRowEditor:
    """Tests for the Idle/Editing state machine."""

    def test_start_edit_fills_buffer(self, alice_bob):
        assert alice_bob.start_edit(1) is True

        assert alice_bob.edit_target == 1
        assert alice_bob.is_editing is True
        assert alice_bob.edit_buffer.values() == ("Alice", "a@x.com", "admin")

    def test_start_edit_unknown_id(self, alice_bob):
        assert alice_bob.start_edit(99) is False
        assert alice_bob.edit_target is None

    def test_save_commits_buffer(self, alice_bob):
        alice_bob.toggle_one(1, True)
        alice_bob.start_edit(1)
        alice_bob.set_buffer_field("name", "Alicia")
        alice_bob.set_buffer_field("role", "owner")

        assert alice_bob.save_edit() is True

        record = alice_bob.store.get(1)
        assert record == UserRecord(1, "Alicia", "a@x.com", "owner", selected=True)
        assert alice_bob.edit_target is None

    def test_save_without_changes_leaves_store_alone(self, alice_bob):
        store_calls = []
        alice_bob.store.add_observer(lambda store, ids: store_calls.append(ids))
        original = alice_bob.store.get(1)

        alice_bob.start_edit(1)
        alice_bob.set_buffer_field("name", "Alice")

        assert alice_bob.save_edit() is True
        assert store_calls == []
        assert alice_bob.store.get(1) is original
        assert alice_bob.edit_target is None

    def test_buffer_not_visible_in_store_before_save(self, alice_bob):
        alice_bob.start_edit(1)
        alice_bob.set_buffer_field("name", "Alicia")

        assert alice_bob.store.get(1).name == "Alice"

    def test_new_edit_discards_previous(self, alice_bob):
        alice_bob.start_edit(1)
        alice_bob.set_buffer_field("name", "Alicia")

        alice_bob.start_edit(2)
        alice_bob.save_edit()

        assert alice_bob.store.get(1).name == "Alice"
        assert alice_bob.store.get(2).name == "Bob"

    def test_selection_discards_edit(self, alice_bob):
        """Editing(1) with name "Alicia"; ticking record 2 closes the editor."""
        alice_bob.start_edit(1)
        alice_bob.set_buffer_field("name", "Alicia")

        alice_bob.toggle_one(2, True)

        assert alice_bob.edit_target is None
        assert alice_bob.edit_buffer is None
        assert alice_bob.store.get(1).name == "Alice"

    def test_select_all_discards_edit(self, alice_bob):
        alice_bob.start_edit(2)
        alice_bob.toggle_all(False)
        assert alice_bob.edit_target is None

    def test_save_when_idle(self, alice_bob):
        assert alice_bob.save_edit() is False

    def test_set_buffer_field_when_idle_is_noop(self, alice_bob):
        alice_bob.set_buffer_field("name", "Ghost")
        assert alice_bob.edit_buffer is None

    def test_set_buffer_field_rejects_id(self, alice_bob):
        alice_bob.start_edit(1)
        with pytest.raises(ValueError):
            alice_bob.set_buffer_field("id", "5")

    def test_deleting_edit_target_closes_editor(self, alice_bob):
        alice_bob.start_edit(1)

        alice_bob.delete(1)

        assert alice_bob.edit_target is None
        assert alice_bob.save_edit() is False

    def test_deleting_other_row_keeps_editor(self, alice_bob):
        alice_bob.start_edit(1)
        alice_bob.delete(2)
        assert alice_bob.edit_target == 1

    def test_delete_unknown_id(self, alice_bob):
        assert alice_bob.delete(99) is False
        assert len(alice_bob.store) == 2


class TestListeners:
    """Tests for change notification."""

    def test_listener_called_once_per_action(self, alice_bob):
        calls = []
        alice_bob.add_listener(lambda: calls.append(alice_bob.page_index))

        alice_bob.toggle_all(True)
        alice_bob.delete_selected()

        assert len(calls) == 2

    def test_rejected_page_does_not_notify(self, alice_bob):
        calls = []
        alice_bob.add_listener(lambda: calls.append(True))

        alice_bob.go_to_page(5)

        assert calls == []

    def test_store_load_notifies_and_clamps(self, big_state):
        calls = []
        big_state.add_listener(lambda: calls.append(big_state.page_index))
        big_state.go_to_page(3)
        big_state.start_edit(25)

        big_state.store.load(make_records(5))

        assert calls[-1] == 1
        assert big_state.edit_target is None

    def test_remove_listener(self, alice_bob):
        calls = []

        def listener():
            calls.append(True)

        alice_bob.add_listener(listener)
        alice_bob.remove_listener(listener)
        alice_bob.toggle_all(True)

        assert calls == []
