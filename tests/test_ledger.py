"""Tests for spendbook.ledger.ExpenseStore."""

import dataclasses
import math
from datetime import date, datetime
from pathlib import Path

import pytest

from spendbook.domain.models import ALL_CATEGORIES, ExpenseId
from spendbook.ledger import ExpenseStore
from spendbook.store.persistence import load_expenses


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "spendbook.db"


@pytest.fixture
def store(db_path: Path) -> ExpenseStore:
    return ExpenseStore.open(db_path)


@pytest.fixture
def two_expenses(store: ExpenseStore) -> ExpenseStore:
    store.add(12.50, "Food", date(2024, 1, 1), "lunch")
    store.add(30.00, "Transport", date(2024, 1, 2), "taxi")
    return store


class TestOpen:
    """Tests for ExpenseStore.open."""

    def test_empty_when_nothing_saved(self, store: ExpenseStore) -> None:
        """Should start empty with the 'All' filter."""
        assert store.expenses == []
        assert store.selected_category == ALL_CATEGORIES

    def test_filter_is_not_persisted(self, two_expenses: ExpenseStore, db_path: Path) -> None:
        """Should reset the filter to 'All' on every open."""
        two_expenses.select_category("Food")

        reopened = ExpenseStore.open(db_path)

        assert reopened.selected_category == ALL_CATEGORIES
        assert reopened.expenses == two_expenses.expenses


class TestAdd:
    """Tests for ExpenseStore.add."""

    def test_appends_with_unique_ids(self, store: ExpenseStore) -> None:
        """Should grow by one per add and never reuse an id."""
        for i in range(25):
            store.add(float(i), "Food", date(2024, 1, 1), "")

        assert len(store.expenses) == 25
        assert len({e.id for e in store.expenses}) == 25
        assert [e.amount for e in store.expenses] == [float(i) for i in range(25)]

    def test_saves_immediately(self, store: ExpenseStore, db_path: Path) -> None:
        """Should persist before returning."""
        expense = store.add(5.0, "Bills", date(2024, 2, 1), "power")

        assert load_expenses(db_path) == [expense]

    def test_accepts_any_category(self, store: ExpenseStore) -> None:
        """Should not restrict categories to the built-in list."""
        expense = store.add(1.0, "Pets", date(2024, 1, 1))

        assert expense.category == "Pets"

    def test_datetime_is_stored_as_calendar_date(self, store: ExpenseStore, db_path: Path) -> None:
        """Should keep the day of a datetime and drop its time, surviving a reload."""
        store.add(1.0, "Food", date(2024, 1, 1), "breakfast")
        store.add(2.0, "Food", datetime(2024, 1, 2, 9, 30), "brunch")

        reloaded = ExpenseStore.open(db_path)

        assert [e.note for e in reloaded.expenses] == ["breakfast", "brunch"]
        assert [e.date for e in reloaded.expenses] == [date(2024, 1, 1), date(2024, 1, 2)]
        assert type(reloaded.expenses[1].date) is date


class TestUpdate:
    """Tests for ExpenseStore.update."""

    def test_replaces_matching_record_in_place(self, two_expenses: ExpenseStore, db_path: Path) -> None:
        """Should change only the matching record and keep its position."""
        first, second = two_expenses.expenses
        edited = dataclasses.replace(first, amount=15.0, note="big lunch")

        assert two_expenses.update(edited) is True

        assert two_expenses.expenses == [edited, second]
        assert load_expenses(db_path) == [edited, second]

    def test_unknown_id_is_noop(self, two_expenses: ExpenseStore, db_path: Path) -> None:
        """Should leave the collection unchanged for an unknown id."""
        before = list(two_expenses.expenses)
        stranger = dataclasses.replace(before[0], id=ExpenseId("does-not-exist"))

        assert two_expenses.update(stranger) is False

        assert two_expenses.expenses == before
        assert load_expenses(db_path) == before

    def test_datetime_edit_survives_reload(self, two_expenses: ExpenseStore, db_path: Path) -> None:
        """Should store an edited datetime as its calendar date."""
        first = two_expenses.expenses[0]

        two_expenses.update(dataclasses.replace(first, date=datetime(2024, 3, 4, 23, 59)))

        assert load_expenses(db_path)[0].date == date(2024, 3, 4)
        assert len(load_expenses(db_path)) == 2


class TestDelete:
    """Tests for ExpenseStore.delete."""

    def test_delete_first_of_two(self, two_expenses: ExpenseStore, db_path: Path) -> None:
        """Should leave exactly the second record."""
        second = two_expenses.expenses[1]

        removed = two_expenses.delete([0])

        assert len(removed) == 1
        assert two_expenses.expenses == [second]
        assert load_expenses(db_path) == [second]

    def test_positions_refer_to_filtered_view(self, store: ExpenseStore) -> None:
        """Should delete the record shown at the position under an active filter."""
        store.add(1.0, "Food", date(2024, 1, 1), "a")
        store.add(2.0, "Transport", date(2024, 1, 1), "b")
        store.add(3.0, "Food", date(2024, 1, 1), "c")
        store.select_category("Food")

        removed = store.delete([1])

        assert [e.note for e in removed] == ["c"]
        assert [e.note for e in store.expenses] == ["a", "b"]

    def test_multiple_positions(self, store: ExpenseStore) -> None:
        """Should remove every addressed record."""
        for note in "abcd":
            store.add(1.0, "Food", date(2024, 1, 1), note)

        store.delete({0, 2})

        assert [e.note for e in store.expenses] == ["b", "d"]

    def test_out_of_range_removes_nothing(self, two_expenses: ExpenseStore) -> None:
        """Should raise IndexError and keep every record."""
        before = list(two_expenses.expenses)

        with pytest.raises(IndexError):
            two_expenses.delete([0, 2])

        assert two_expenses.expenses == before


class TestQueries:
    """Tests for filtered views and aggregates."""

    def test_totals_under_filters(self, two_expenses: ExpenseStore) -> None:
        """Should total the filtered view."""
        assert two_expenses.total_expenses() == pytest.approx(42.50)

        two_expenses.select_category("Food")
        assert two_expenses.total_expenses() == pytest.approx(12.50)

    def test_expenses_by_category(self, two_expenses: ExpenseStore) -> None:
        """Should group totals per category."""
        assert two_expenses.expenses_by_category() == pytest.approx({"Food": 12.50, "Transport": 30.00})

    def test_expenses_by_category_follows_filter(self, two_expenses: ExpenseStore) -> None:
        """Should only group what the filter shows."""
        two_expenses.select_category("Transport")

        assert two_expenses.expenses_by_category() == pytest.approx({"Transport": 30.00})

    def test_empty_filter_result_totals_zero(self, two_expenses: ExpenseStore) -> None:
        """Should return zero when nothing matches."""
        two_expenses.select_category("Shopping")

        assert two_expenses.filtered_expenses() == []
        assert two_expenses.total_expenses() == 0.0

    def test_sorted_category_totals(self, store: ExpenseStore) -> None:
        """Should order totals by category name."""
        store.add(1.0, "Transport", date(2024, 1, 1))
        store.add(2.0, "Bills", date(2024, 1, 1))
        store.add(3.0, "Food", date(2024, 1, 1))

        assert [cat for cat, _ in store.sorted_category_totals()] == ["Bills", "Food", "Transport"]

    def test_get_uses_filtered_view(self, two_expenses: ExpenseStore) -> None:
        """Should address positions in the filtered view."""
        two_expenses.select_category("Transport")

        assert two_expenses.get(0).note == "taxi"
        with pytest.raises(IndexError):
            two_expenses.get(1)


class TestSaveFailure:
    """Tests for mutations whose save cannot be encoded."""

    def test_in_memory_state_survives_failed_save(self, two_expenses: ExpenseStore, db_path: Path) -> None:
        """Should keep the new record in memory while storage keeps the old state."""
        persisted = list(two_expenses.expenses)

        two_expenses.add(math.inf, "Food", date(2024, 1, 3), "bad")

        assert len(two_expenses.expenses) == 3
        assert load_expenses(db_path) == persisted
