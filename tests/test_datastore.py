import requests

from sdr import datastore
from sdr.datastore import (
    APPOINTMENT_FIELDS,
    DataConnector,
    InMemoryTable,
    Repository,
    TableHandle,
    _compact,
    _safe_all,
    _safe_create,
    _safe_update,
)
from sdr.models import Appointment, AppointmentStatus, CampaignType, ProspectRecord

from conftest import NOW


def _handle(table):
    return TableHandle(table, True, None, "Prospects")


class FlakyTable(InMemoryTable):
    def __init__(self, failures, exc):
        super().__init__("Flaky")
        self.failures = failures
        self.exc = exc
        self.calls = 0

    def create(self, fields):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc
        return super().create(fields)

    def all(self, **kwargs):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc
        return super().all(**kwargs)


def test_in_memory_formula_filters_on_field_value():
    table = InMemoryTable("Prospects")
    table.create({"Prospect ID": "p1", "Stage": 0})
    table.create({"Prospect ID": "p2", "Stage": 3})

    assert [r["fields"]["Prospect ID"] for r in table.all(formula="{Prospect ID}='p2'")] == ["p2"]
    assert [r["fields"]["Prospect ID"] for r in table.all(formula="{Stage}='0'")] == ["p1"]
    assert table.all(formula="not a formula") == []
    assert len(table.all(max_records=1)) == 1


def test_compact_keeps_zero_and_false():
    assert _compact({"a": 0, "b": False, "c": None, "d": "", "e": [], "f": "x"}) == {"a": 0, "b": False, "f": "x"}


def test_safe_create_skips_empty_payload():
    table = InMemoryTable("Prospects")
    assert _safe_create(_handle(table), {"a": None, "b": ""}) is None
    assert table.all() == []


def test_safe_create_logs_and_returns_none_on_error():
    handle = _handle(FlakyTable(failures=5, exc=ValueError("422 INVALID_VALUE")))
    assert _safe_create(handle, {"Prospect ID": "p1"}) is None
    assert handle.last_error["action"] == "create"
    assert "INVALID_VALUE" in handle.last_error["error"]


def test_safe_create_retries_connection_errors(monkeypatch):
    sleeps = []
    monkeypatch.setattr("time.sleep", sleeps.append)
    table = FlakyTable(failures=2, exc=requests.exceptions.ConnectionError("reset"))

    created = _safe_create(_handle(table), {"Prospect ID": "p1"})

    assert created["fields"] == {"Prospect ID": "p1"}
    assert table.calls == 3
    assert len(sleeps) == 2


def test_safe_all_retries_then_gives_up(monkeypatch):
    monkeypatch.setattr("time.sleep", lambda _s: None)

    recovering = FlakyTable(failures=1, exc=requests.exceptions.ConnectionError("reset"))
    recovering._records["rec_x"] = {"id": "rec_x", "fields": {}}
    assert len(_safe_all(_handle(recovering))) == 1

    dead = FlakyTable(failures=10, exc=requests.exceptions.ConnectionError("reset"))
    assert _safe_all(_handle(dead)) == []
    assert dead.calls == 3


def test_safe_update_requires_record_id():
    table = InMemoryTable("Prospects")
    assert _safe_update(_handle(table), "", {"a": 1}) is None


def test_connector_forced_in_memory(monkeypatch):
    monkeypatch.setenv("AIRTABLE_API_KEY", "key")
    monkeypatch.setenv("SDR_BASE_ID", "appBase")
    handle = DataConnector().prospects()
    assert handle.in_memory is True
    assert isinstance(handle.table, InMemoryTable)


def test_connector_uses_pyairtable_when_configured(monkeypatch):
    built = []

    class FakeApi:
        def __init__(self, api_key):
            self.api_key = api_key

        def table(self, base_id, table_name):
            built.append((self.api_key, base_id, table_name))
            return InMemoryTable(table_name)

    monkeypatch.delenv("SDR_FORCE_IN_MEMORY", raising=False)
    monkeypatch.setenv("AIRTABLE_API_KEY", "key")
    monkeypatch.setenv("SDR_BASE_ID", "appBase")
    monkeypatch.setattr(datastore, "Api", FakeApi)

    connector = DataConnector()
    first = connector.appointments()
    second = connector.appointments()

    assert first is second
    assert first.in_memory is False
    assert built == [("key", "appBase", "Appointments")]


def test_connector_without_credentials_stays_in_memory(monkeypatch):
    monkeypatch.delenv("SDR_FORCE_IN_MEMORY", raising=False)
    assert DataConnector().history().in_memory is True


def test_upsert_appointment_updates_existing_row():
    repo = Repository(DataConnector())
    appointment = Appointment(id="apt_1", prospect_id="p1", starts_at=NOW)
    repo.upsert_appointment(appointment)
    appointment.status = AppointmentStatus.NO_SHOW
    repo.upsert_appointment(appointment)

    rows = repo.connector.appointments().table.all()
    assert len(rows) == 1
    fields = rows[0]["fields"]
    assert fields[APPOINTMENT_FIELDS["STATUS"]] == "no-show"
    assert fields[APPOINTMENT_FIELDS["STARTS_AT"]] == "2026-10-19T15:00:00Z"
    assert fields[APPOINTMENT_FIELDS["TIME"]] == "10:00 AM"


def test_formula_lookup_handles_quotes_in_ids(make_prospect):
    connector = DataConnector()
    record = ProspectRecord(data=make_prospect("o'brien-1"), current_campaign=CampaignType.HOLDING)
    Repository(connector).upsert_prospect(record)

    # a fresh repository has no cached row id and must find the row by formula
    record.stage = 2
    Repository(connector).upsert_prospect(record)

    rows = connector.prospects().table.all()
    assert len(rows) == 1
    assert rows[0]["fields"]["Prospect ID"] == "o'brien-1"
    assert rows[0]["fields"]["Stage"] == 2
    assert connector.prospects().table.all(formula="{Prospect ID}='o\\'brien-1'") == rows


def test_reset_clears_tables_and_indexes():
    repo = Repository(DataConnector())
    repo.upsert_appointment(Appointment(id="apt_1", prospect_id="p1", starts_at=NOW))
    repo.reset()
    assert repo.connector.appointments().table.all() == []
