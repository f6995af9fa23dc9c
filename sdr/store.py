"""In-process prospect store. Insertion ordered; optionally mirrored to Airtable."""

from __future__ import annotations

import threading
from typing import Dict, Iterator, List, Optional

from sdr.datastore import Repository
from sdr.models import (
    Appointment,
    AppointmentStatus,
    CampaignType,
    CommunicationRecord,
    HistoryEntry,
    ProspectRecord,
)
from sdr.runtime import get_logger, last_10_digits

logger = get_logger(__name__)


class ProspectStore:
    def __init__(self, repository: Optional[Repository] = None):
        self.repository = repository
        self._records: Dict[str, ProspectRecord] = {}
        self._appointments: Dict[str, Appointment] = {}
        self._phone_index: Dict[str, str] = {}
        self._communications: List[CommunicationRecord] = []
        self._lock = threading.RLock()

    # -----------------------------
    # prospects
    # -----------------------------
    def put(self, record: ProspectRecord) -> ProspectRecord:
        """Insert or replace. A replaced id keeps its original position."""
        record.data._resolver = self.get_appointment
        with self._lock:
            self._records[record.prospect_id] = record
            key = last_10_digits(record.data.phone)
            if key:
                self._phone_index[key] = record.prospect_id
        self.save(record)
        return record

    def save(self, record: ProspectRecord) -> None:
        if self.repository is not None:
            self.repository.upsert_prospect(record)

    def get(self, prospect_id: str) -> Optional[ProspectRecord]:
        return self._records.get(prospect_id)

    def find_by_phone(self, phone: Optional[str]) -> Optional[ProspectRecord]:
        key = last_10_digits(phone)
        if not key:
            return None
        prospect_id = self._phone_index.get(key)
        return self._records.get(prospect_id) if prospect_id else None

    def records(self) -> List[ProspectRecord]:
        with self._lock:
            return list(self._records.values())

    def in_campaign(self, campaign: CampaignType) -> List[ProspectRecord]:
        return [r for r in self.records() if r.current_campaign is campaign]

    def append_history(self, record: ProspectRecord, entry: HistoryEntry) -> None:
        record.history.append(entry)
        if self.repository is not None:
            self.repository.append_history(record.prospect_id, entry)

    def __contains__(self, prospect_id: object) -> bool:
        return prospect_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ProspectRecord]:
        return iter(self.records())

    # -----------------------------
    # appointments
    # -----------------------------
    def put_appointment(self, appointment: Appointment) -> Appointment:
        with self._lock:
            self._appointments[appointment.id] = appointment
        self.save_appointment(appointment)
        return appointment

    def save_appointment(self, appointment: Appointment) -> None:
        if self.repository is not None:
            self.repository.upsert_appointment(appointment)

    def get_appointment(self, appointment_id: str) -> Optional[Appointment]:
        return self._appointments.get(appointment_id)

    def appointments(self, status: Optional[AppointmentStatus] = None) -> List[Appointment]:
        with self._lock:
            items = list(self._appointments.values())
        if status is None:
            return items
        return [a for a in items if a.status is status]

    # -----------------------------
    # communications log
    # -----------------------------
    def log_communication(self, comm: CommunicationRecord) -> None:
        with self._lock:
            self._communications.append(comm)
        logger.info("📝 %s %s to %s [%s]", comm.direction, comm.channel, comm.prospect_id, comm.status)
        if self.repository is not None:
            self.repository.log_communication(comm)

    def communications(self, prospect_id: Optional[str] = None) -> List[CommunicationRecord]:
        with self._lock:
            items = list(self._communications)
        if prospect_id is None:
            return items
        return [c for c in items if c.prospect_id == prospect_id]
