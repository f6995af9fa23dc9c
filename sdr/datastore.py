"""Airtable mirror for prospect state with deterministic in-memory fallback."""

from __future__ import annotations

import itertools
import os
import re
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import requests
from pyairtable import Api

from sdr.models import Appointment, CommunicationRecord, HistoryEntry, ProspectRecord
from sdr.runtime import get_logger, iso_format, iso_now, retry

logger = get_logger(__name__)

TABLES = {
    "prospects": "Prospects",
    "appointments": "Appointments",
    "history": "Campaign History",
    "communications": "Communications",
}

PROSPECT_FIELDS: Dict[str, str] = {
    "PROSPECT_ID": "Prospect ID",
    "FIRST_NAME": "First Name",
    "LAST_NAME": "Last Name",
    "EMAIL": "Email",
    "PHONE": "Phone",
    "SOURCE": "Source",
    "CAMPAIGN": "Current Campaign",
    "STAGE": "Stage",
    "TAGS": "Tags",
    "APPOINTMENT_ID": "Appointment ID",
    "UPDATED_AT": "Last Updated",
}

APPOINTMENT_FIELDS: Dict[str, str] = {
    "APPOINTMENT_ID": "Appointment ID",
    "PROSPECT_ID": "Prospect ID",
    "STARTS_AT": "Starts At",
    "DATE": "Date",
    "TIME": "Time",
    "STATUS": "Status",
    "SERVICE": "Service",
}

HISTORY_FIELDS: Dict[str, str] = {
    "PROSPECT_ID": "Prospect ID",
    "CAMPAIGN": "Campaign Left",
    "TIMESTAMP": "Left At",
}

COMMUNICATION_FIELDS: Dict[str, str] = {
    "COMMUNICATION_ID": "Communication ID",
    "PROSPECT_ID": "Prospect ID",
    "PROSPECT_NAME": "Prospect Name",
    "PHONE": "Phone",
    "EMAIL": "Email",
    "CHANNEL": "Type",
    "DIRECTION": "Direction",
    "CONTENT": "Content",
    "TIMESTAMP": "Timestamp",
    "STATUS": "Status",
    "CAMPAIGN": "Campaign",
    "FROM_SDR_AGENT": "From SDR Agent",
}


def _truthy(name: str) -> bool:
    return os.getenv(name, "").lower() in {"1", "true", "yes"}


def _first_non_empty(*names: str) -> Optional[str]:
    for name in names:
        v = os.getenv(name)
        if v:
            return v
    return None


class InMemoryTable:
    """Minimal Airtable drop-in replacement used for local runs and tests."""

    def __init__(self, name: str):
        self.name = name
        self._records: Dict[str, Dict[str, Any]] = {}
        self._sequence = itertools.count(1)

    def create(self, fields: Dict[str, Any]):
        record_id = f"rec_{next(self._sequence)}"
        record = {"id": record_id, "fields": dict(fields)}
        self._records[record_id] = record
        return record

    def update(self, record_id: str, fields: Dict[str, Any]):
        if record_id not in self._records:
            raise KeyError(f"Unknown record id {record_id} in {self.name}")
        self._records[record_id]["fields"].update(fields)
        return self._records[record_id]

    def get(self, record_id: str):
        return self._records.get(record_id)

    def all(self, **kwargs):
        records = list(self._records.values())
        formula = kwargs.get("formula")
        max_records = kwargs.get("max_records")
        if formula:
            records = [rec for rec in records if _formula_match(rec, formula)]
        if max_records is not None:
            records = records[: int(max_records)]
        return records


def _escape_quotes(s: str) -> str:
    return str(s).replace("'", "\\'")


def _formula_match(record: Dict[str, Any], formula: str) -> bool:
    pattern = re.compile(r"\{([^}]+)\}\s*=\s*'((?:[^'\\]|\\.)*)'")
    matches = [(name, value.replace("\\'", "'")) for name, value in pattern.findall(formula)]
    if not matches:
        return False
    fields = record.get("fields", {})
    for field_name, expected in matches:
        if str(fields.get(field_name)) != expected:
            return False
    return True


@dataclass
class TableHandle:
    table: Any
    in_memory: bool
    base_id: Optional[str]
    table_name: str
    last_error: Optional[Dict[str, Any]] = None


# ============================================================
# CONNECTOR
# ============================================================


class DataConnector:
    """Lazy pyairtable connector with in-memory fallback."""

    def __init__(self) -> None:
        self._tables: Dict[Tuple[str, str], TableHandle] = {}

    def _table(self, base: Optional[str], table_name: str) -> TableHandle:
        key = (base or "memory", table_name)
        if key in self._tables:
            return self._tables[key]

        if _truthy("SDR_FORCE_IN_MEMORY"):
            handle = TableHandle(InMemoryTable(table_name), True, base, table_name)
            self._tables[key] = handle
            return handle

        api_key = _first_non_empty("AIRTABLE_API_KEY", "AIRTABLE_SDR_KEY")
        if base and api_key:
            try:
                table = Api(api_key).table(base, table_name)
                handle = TableHandle(table, False, base, table_name)
                self._tables[key] = handle
                return handle
            except Exception:
                logger.warning("Falling back to in-memory table for %s", table_name, exc_info=True)

        handle = TableHandle(InMemoryTable(table_name), True, base, table_name)
        self._tables[key] = handle
        return handle

    def table_handle(self, table_name: str) -> TableHandle:
        return self._table(_first_non_empty("SDR_BASE_ID", "AIRTABLE_SDR_BASE_ID"), table_name)

    def prospects(self) -> TableHandle:
        return self.table_handle(TABLES["prospects"])

    def appointments(self) -> TableHandle:
        return self.table_handle(TABLES["appointments"])

    def history(self) -> TableHandle:
        return self.table_handle(TABLES["history"])

    def communications(self) -> TableHandle:
        return self.table_handle(TABLES["communications"])

    def reset(self) -> None:
        self._tables.clear()


# ============================================================
# SAFE WRAPPERS
# ============================================================


def _compact(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in (payload or {}).items() if v not in (None, "", [], {}, ())}


def _log_airtable_exception(handle: TableHandle, exc: Exception, action: str) -> None:
    response = getattr(exc, "response", None)
    payload: Dict[str, Any] = {"action": action, "error": str(exc), "timestamp": iso_now()}
    if response is not None:
        payload.update({"status": getattr(response, "status_code", "unknown"), "body": getattr(response, "text", "")})
        logger.error("Airtable %s failed [%s] status=%s body=%s", action, handle.table_name, payload["status"], payload["body"])
    else:
        logger.error("Airtable %s failed [%s]: %s", action, handle.table_name, exc)
    handle.last_error = payload


def _safe_all(handle: TableHandle, **kwargs) -> List[Dict[str, Any]]:
    if "max_records" not in kwargs:
        kwargs["max_records"] = 100
    for attempt in range(3):
        try:
            return list(handle.table.all(**kwargs))
        except (requests.exceptions.ConnectionError, ConnectionResetError) as exc:
            logger.warning("Airtable connection reset [%s] retry %s: %s", handle.table_name, attempt + 1, exc)
            time.sleep((2**attempt) * 0.5)
            continue
        except Exception as exc:
            _log_airtable_exception(handle, exc, "all")
            break
    return []


def _safe_create(handle: TableHandle, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    body = _compact(fields)
    if not body:
        return None
    try:
        return retry(
            lambda: handle.table.create(body),
            retries=2,
            base_delay=0.6,
            exceptions=(requests.exceptions.ConnectionError,),
            logger=logger,
        )
    except Exception as exc:
        _log_airtable_exception(handle, exc, "create")
        return None


def _safe_update(handle: TableHandle, record_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if not record_id:
        return None
    body = _compact(fields)
    if not body:
        return None
    try:
        return retry(
            lambda: handle.table.update(record_id, body),
            retries=2,
            base_delay=0.6,
            exceptions=(requests.exceptions.ConnectionError,),
            logger=logger,
        )
    except Exception as exc:
        _log_airtable_exception(handle, exc, "update")
        return None


# ============================================================
# REPOSITORY
# ============================================================


class Repository:
    """Row-level mirror of the in-process store. Failures are logged, never raised."""

    def __init__(self, connector: Optional[DataConnector] = None):
        self.connector = connector or DataConnector()
        self._prospect_index: Dict[str, str] = {}
        self._appointment_index: Dict[str, str] = {}

    # -----------------------------
    # lookups
    # -----------------------------
    def _find_record_id(self, handle: TableHandle, field: str, value: str, index: Dict[str, str]) -> Optional[str]:
        if value in index:
            return index[value]
        records = _safe_all(handle, formula=f"{{{field}}}='{_escape_quotes(value)}'", max_records=1)
        if records:
            index[value] = records[0]["id"]
            return records[0]["id"]
        return None

    def _upsert(self, handle: TableHandle, field: str, key: str, fields: Dict[str, Any], index: Dict[str, str]):
        rid = self._find_record_id(handle, field, key, index)
        if rid:
            return _safe_update(handle, rid, fields)
        created = _safe_create(handle, fields)
        if created and created.get("id"):
            index[key] = created["id"]
        return created

    # -----------------------------
    # writes
    # -----------------------------
    def upsert_prospect(self, record: ProspectRecord) -> Optional[Dict[str, Any]]:
        p = record.data
        fields = {
            PROSPECT_FIELDS["PROSPECT_ID"]: p.id,
            PROSPECT_FIELDS["FIRST_NAME"]: p.first_name,
            PROSPECT_FIELDS["LAST_NAME"]: p.last_name,
            PROSPECT_FIELDS["EMAIL"]: p.email,
            PROSPECT_FIELDS["PHONE"]: p.phone,
            PROSPECT_FIELDS["SOURCE"]: p.source,
            PROSPECT_FIELDS["CAMPAIGN"]: record.current_campaign.value,
            PROSPECT_FIELDS["STAGE"]: record.stage,
            PROSPECT_FIELDS["TAGS"]: sorted(record.tags),
            PROSPECT_FIELDS["APPOINTMENT_ID"]: p.appointment_id,
            PROSPECT_FIELDS["UPDATED_AT"]: iso_now(),
        }
        return self._upsert(
            self.connector.prospects(), PROSPECT_FIELDS["PROSPECT_ID"], p.id, fields, self._prospect_index
        )

    def upsert_appointment(self, appointment: Appointment) -> Optional[Dict[str, Any]]:
        fields = {
            APPOINTMENT_FIELDS["APPOINTMENT_ID"]: appointment.id,
            APPOINTMENT_FIELDS["PROSPECT_ID"]: appointment.prospect_id,
            APPOINTMENT_FIELDS["STARTS_AT"]: iso_format(appointment.starts_at),
            APPOINTMENT_FIELDS["DATE"]: appointment.date,
            APPOINTMENT_FIELDS["TIME"]: appointment.time,
            APPOINTMENT_FIELDS["STATUS"]: appointment.status.value,
            APPOINTMENT_FIELDS["SERVICE"]: appointment.service,
        }
        return self._upsert(
            self.connector.appointments(),
            APPOINTMENT_FIELDS["APPOINTMENT_ID"],
            appointment.id,
            fields,
            self._appointment_index,
        )

    def append_history(self, prospect_id: str, entry: HistoryEntry) -> Optional[Dict[str, Any]]:
        return _safe_create(
            self.connector.history(),
            {
                HISTORY_FIELDS["PROSPECT_ID"]: prospect_id,
                HISTORY_FIELDS["CAMPAIGN"]: entry.campaign.value,
                HISTORY_FIELDS["TIMESTAMP"]: iso_format(entry.timestamp),
            },
        )

    def log_communication(self, comm: CommunicationRecord) -> Optional[Dict[str, Any]]:
        return _safe_create(
            self.connector.communications(),
            {
                COMMUNICATION_FIELDS["COMMUNICATION_ID"]: comm.id,
                COMMUNICATION_FIELDS["PROSPECT_ID"]: comm.prospect_id,
                COMMUNICATION_FIELDS["PROSPECT_NAME"]: comm.prospect_name,
                COMMUNICATION_FIELDS["PHONE"]: comm.phone,
                COMMUNICATION_FIELDS["EMAIL"]: comm.email,
                COMMUNICATION_FIELDS["CHANNEL"]: comm.channel,
                COMMUNICATION_FIELDS["DIRECTION"]: comm.direction,
                COMMUNICATION_FIELDS["CONTENT"]: comm.content,
                COMMUNICATION_FIELDS["TIMESTAMP"]: iso_format(comm.timestamp),
                COMMUNICATION_FIELDS["STATUS"]: comm.status,
                COMMUNICATION_FIELDS["CAMPAIGN"]: comm.campaign.value if comm.campaign else None,
                COMMUNICATION_FIELDS["FROM_SDR_AGENT"]: True,
            },
        )

    def reset(self) -> None:
        self.connector.reset()
        self._prospect_index.clear()
        self._appointment_index.clear()
        logger.info("🧹 Datastore state and caches cleared.")
