import pytest

from golf_admin.errors import ControllerBusy, CsvParseError, MutationError, ValidationSkip
from golf_admin.golfers import CLEAR_PROMPT, DELETE_PROMPT, Golfer, GolferRoster
from golf_admin.notifications import always_confirm, never_confirm


@pytest.fixture
def roster(store):
    roster = GolferRoster(store)
    roster.load()
    store.calls.clear()
    return roster


def test_load_orders_by_id(roster):
    assert roster.golfers == [Golfer(1, "Alice", 100), Golfer(2, "Bob", 200)]


def test_add_golfer_strips_name_and_reloads(roster, store):
    roster.add_golfer("  Cara ", "300")
    insert = store.writes()[0]
    assert insert.rows == [{"name": "Cara", "salary": 300}]
    assert roster.golfers[-1] == Golfer(3, "Cara", 300)


@pytest.mark.parametrize("name, salary", [("", "100"), ("   ", "100"), ("Cara", ""), ("Cara", "  ")])
def test_add_golfer_requires_name_and_salary(roster, store, name, salary):
    with pytest.raises(ValidationSkip):
        roster.add_golfer(name, salary)
    assert store.calls == []


def test_delete_golfer_after_confirmation(roster, store):
    prompts = []

    def confirm(message):
        prompts.append(message)
        return True

    assert roster.delete_golfer(1, confirm) is True
    assert prompts == [DELETE_PROMPT]
    assert store.writes()[0].filters == [("id", "eq", 1)]
    assert [golfer.id for golfer in roster.golfers] == [2]


def test_declined_delete_changes_nothing(roster, store):
    before = roster.golfers
    assert roster.delete_golfer(1, never_confirm) is False
    assert store.calls == []
    assert roster.golfers is before
    assert len(store.tables["golfers"]) == 2


def test_clear_all_deletes_every_positive_id(roster, store):
    prompts = []
    roster.clear_all(lambda message: prompts.append(message) or True)
    assert prompts == [CLEAR_PROMPT]
    assert store.writes()[0].filters == [("id", "gt", 0)]
    assert roster.golfers == []


def test_clear_all_failure_reports_store_message(roster, store):
    store.fail("delete", "permission denied")
    before = roster.golfers
    with pytest.raises(MutationError):
        roster.clear_all(always_confirm)
    assert roster.golfers is before
    assert roster.notifier.messages() == ["Clear all failed: permission denied"]


def test_import_csv_is_one_bulk_insert(roster, store):
    count = roster.import_csv("name,salary\nCara,300\nDan,400\n")
    assert count == 2
    writes = store.writes()
    assert len(writes) == 1
    assert writes[0].rows == [{"name": "Cara", "salary": 300}, {"name": "Dan", "salary": 400}]
    assert [golfer.name for golfer in roster.golfers] == ["Alice", "Bob", "Cara", "Dan"]


def test_import_csv_failure_inserts_nothing_and_skips_reload(roster, store):
    store.fail("insert", "value too long")
    before = roster.golfers
    with pytest.raises(MutationError):
        roster.import_csv("Cara,300\nDan,400")
    assert [query.action for query in store.calls] == ["insert"]
    assert roster.golfers is before
    assert roster.notifier.messages() == ["CSV upload failed: value too long"]


def test_import_without_file_is_skipped(roster, store):
    with pytest.raises(ValidationSkip):
        roster.import_csv(None)
    assert store.calls == []
    assert roster.notifier.messages() == ["Choose a CSV file first"]


def test_import_of_empty_file_is_skipped(roster, store):
    with pytest.raises(ValidationSkip):
        roster.import_csv("name,salary\n\n")
    assert store.calls == []


def test_strict_import_rejects_before_any_write(roster, store):
    with pytest.raises(CsvParseError):
        roster.import_csv("Cara,abc", strict=True)
    assert store.calls == []
    assert roster.notifier.messages()[0].startswith("CSV upload failed: Malformed CSV rows")


def test_import_while_busy_is_rejected(roster, store):
    roster.mirror.busy = True
    with pytest.raises(ControllerBusy):
        roster.import_csv("Cara,300")
    assert store.calls == []


def test_as_dict_turns_non_finite_salary_into_null():
    from decimal import Decimal

    assert Golfer(1, "A", Decimal("NaN")).as_dict()["salary"] is None
    assert Golfer(1, "A", float("nan")).as_dict()["salary"] is None
    assert Golfer(1, "A", Decimal("100")).as_dict()["salary"] == 100
    assert Golfer(1, "A", Decimal("10.5")).as_dict()["salary"] == 10.5
