"""
Campaign orchestrator.

Owns the per-prospect state machine: which campaign a prospect is in, how
far through its automation events they are, what happens when they reply,
and when they are booked. All public operations report failure through
their return value (False / None) and never raise.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Union

from sdr import sweepers
from sdr.campaigns import build_campaigns
from sdr.config import OfficeConfig
from sdr.dispatcher import Dispatcher, LoggingDispatcher, destination_for
from sdr.locks import ProspectLocks, SweepGuard
from sdr.models import (
    DEFAULT_REPLY,
    Appointment,
    AppointmentStatus,
    AutomationEvent,
    CampaignDefinition,
    CampaignType,
    CommunicationRecord,
    HistoryEntry,
    Prospect,
    ProspectRecord,
    Reminder,
    ResponseAction,
    ResponseResult,
)
from sdr.personalizer import personalize
from sdr.runtime import get_logger
from sdr.store import ProspectStore

logger = get_logger(__name__)

TAG_APPOINTMENT_SCHEDULED = "appointment_scheduled"
TAG_APPOINTMENT_CANCELLED = "appointment_cancelled"
TAG_INVALID_CONTACT = "invalid_contact"

# kind, lead time before the appointment, message template
REMINDER_SCHEDULE = (
    (
        "24-hour",
        timedelta(hours=24),
        "Hi {{FirstName}}, this is a reminder about your appointment tomorrow at {{AppointmentTime}} to discuss "
        "Enhanced Dental PPO Coverage options. Please let us know if you need to reschedule.",
    ),
    (
        "2-hour",
        timedelta(hours=2),
        "Hi {{FirstName}}, your appointment to discuss Enhanced Dental PPO Coverage is coming up in 2 hours at "
        "{{AppointmentTime}}. We're looking forward to speaking with you!",
    ),
    (
        "15-minute",
        timedelta(minutes=15),
        "Hi {{FirstName}}, your appointment to discuss Enhanced Dental PPO Coverage is in 15 minutes. We'll be "
        "calling you shortly at this number.",
    ),
)

CampaignRef = Union[CampaignType, str]


def appointment_hour(message: str) -> int:
    """Hour (24h) of the slot a reply asks for. Literal, case-sensitive match on the raw text."""
    if "2pm" in message or "2 pm" in message:
        return 14
    if "4pm" in message or "4 pm" in message:
        return 16
    return 15


class CampaignManager:
    def __init__(
        self,
        config: Optional[OfficeConfig] = None,
        *,
        store: Optional[ProspectStore] = None,
        dispatcher: Optional[Dispatcher] = None,
        campaigns: Optional[Dict[CampaignType, CampaignDefinition]] = None,
        clock: Optional[Callable[[], datetime]] = None,
        locks: Optional[ProspectLocks] = None,
        sweep_guard: Optional[SweepGuard] = None,
    ):
        self.config = config or OfficeConfig.from_settings()
        self.store = store if store is not None else ProspectStore()
        self.dispatcher = dispatcher or LoggingDispatcher()
        self.campaigns = campaigns if campaigns is not None else build_campaigns()
        self._clock = clock or self.config.now
        self.locks = locks or ProspectLocks()
        self.sweep_guard = sweep_guard or SweepGuard()

    def now(self) -> datetime:
        return self._clock()

    # ------------------------------------------------------------------
    # Read helpers
    # ------------------------------------------------------------------
    def get_record(self, prospect_id: str) -> Optional[ProspectRecord]:
        return self.store.get(prospect_id)

    def campaign_for(self, prospect_id: str) -> Optional[CampaignDefinition]:
        record = self.store.get(prospect_id)
        return self.campaigns.get(record.current_campaign) if record else None

    def personalize_message(self, template: str, prospect: Prospect) -> str:
        return personalize(
            template,
            prospect,
            self.config.office_name,
            now=self.now(),
            assignee=self.config.assignee,
        )

    # ------------------------------------------------------------------
    # Enrollment and outbound sequencing
    # ------------------------------------------------------------------
    def add_prospect(self, prospect: Prospect, start_campaign: CampaignRef = CampaignType.LIST_VALIDATION) -> bool:
        campaign = CampaignType.coerce(start_campaign)
        if campaign is None or campaign not in self.campaigns:
            logger.warning("Unknown start campaign %r for prospect %s", start_campaign, prospect.id)
            return False

        with self.locks.hold(prospect.id):
            self.store.put(ProspectRecord(data=prospect, current_campaign=campaign))
            logger.info("➕ Prospect %s enrolled in %s", prospect.id, campaign.value)
            self.send_next_event(prospect.id)
        return True

    def send_next_event(self, prospect_id: str) -> bool:
        with self.locks.hold(prospect_id):
            record = self.store.get(prospect_id)
            if record is None:
                logger.warning("send_next_event: unknown prospect %s", prospect_id)
                return False
            campaign = self.campaigns.get(record.current_campaign)
            if campaign is None or not campaign.automation_events:
                return False

            events = campaign.automation_events
            if record.stage >= len(events):
                if campaign.next_campaign is None:
                    return False
                self.move_to_next_campaign(prospect_id, campaign.next_campaign)
                return True

            self._dispatch(record, events[record.stage])
            record.stage += 1
            self.store.save(record)
            return True

    def _dispatch(self, record: ProspectRecord, event: AutomationEvent) -> None:
        prospect = record.data
        content = self.personalize_message(event.message, prospect)
        subject = self.personalize_message(event.subject, prospect) if event.subject else None
        destination = destination_for(event.type, prospect)

        status = "sent"
        try:
            result = self.dispatcher.send(event.type, destination, content, subject)
            if not result.get("ok", False):
                status = "failed"
        except Exception:
            logger.exception("Dispatch of %r to prospect %s failed", event.name, prospect.id)
            status = "failed"

        self.store.log_communication(
            CommunicationRecord(
                id=f"comm_{uuid.uuid4().hex[:12]}",
                prospect_id=prospect.id,
                prospect_name=prospect.full_name,
                phone=prospect.phone,
                email=prospect.email,
                channel=event.type.channel,
                direction="outbound",
                content=content,
                timestamp=self.now(),
                status=status,
                campaign=record.current_campaign,
            )
        )

    # ------------------------------------------------------------------
    # Inbound replies
    # ------------------------------------------------------------------
    def process_response(self, prospect_id: str, message: str) -> Optional[ResponseResult]:
        with self.locks.hold(prospect_id):
            record = self.store.get(prospect_id)
            if record is None:
                logger.warning("process_response: unknown prospect %s", prospect_id)
                return None
            campaign = self.campaigns.get(record.current_campaign)
            if campaign is None:
                return None

            handler = campaign.match(message or "")
            if handler is None:
                logger.info("No handler matched for %s in %s", prospect_id, campaign.key.value)
                return ResponseResult(ResponseAction.DEFAULT_REPLY, DEFAULT_REPLY)

            logger.info("Prospect %s reply matched %s in %s", prospect_id, handler.action.value, campaign.key.value)
            if handler.action is ResponseAction.MOVE_CAMPAIGN:
                self.move_to_next_campaign(prospect_id, handler.target_campaign)
            elif handler.action is ResponseAction.BOOK_APPOINTMENT:
                self.book_appointment(prospect_id, message or "")
            elif handler.action is ResponseAction.MARK_INVALID:
                record.tags.add(TAG_INVALID_CONTACT)
                self.store.save(record)

            reply = self.personalize_message(handler.reply, record.data)
            return ResponseResult(handler.action, reply, handler.target_campaign)

    def move_to_next_campaign(self, prospect_id: str, target_campaign: CampaignRef) -> bool:
        target = CampaignType.coerce(target_campaign)
        with self.locks.hold(prospect_id):
            record = self.store.get(prospect_id)
            if record is None or target is None or target not in self.campaigns:
                logger.warning("Cannot move prospect %s to %r", prospect_id, target_campaign)
                return False

            left = record.current_campaign
            self.store.append_history(record, HistoryEntry(campaign=left, timestamp=self.now()))
            record.current_campaign = target
            record.stage = 0
            self.store.save(record)
            logger.info("🔀 Prospect %s moved %s -> %s", prospect_id, left.value, target.value)

            self.send_next_event(prospect_id)
            return True

    # ------------------------------------------------------------------
    # Appointments
    # ------------------------------------------------------------------
    def book_appointment(self, prospect_id: str, message: str) -> Optional[Appointment]:
        with self.locks.hold(prospect_id):
            record = self.store.get(prospect_id)
            if record is None:
                logger.warning("book_appointment: unknown prospect %s", prospect_id)
                return None

            previous = record.appointment
            if previous is not None and previous.status is AppointmentStatus.SCHEDULED:
                previous.status = AppointmentStatus.CANCELLED
                self.store.save_appointment(previous)

            tomorrow = self.now() + timedelta(days=1)
            starts_at = tomorrow.replace(hour=appointment_hour(message or ""), minute=0, second=0, microsecond=0)
            appointment = self.store.put_appointment(
                Appointment(id=f"apt_{uuid.uuid4().hex[:12]}", prospect_id=prospect_id, starts_at=starts_at)
            )
            record.data.appointment_id = appointment.id
            record.tags.add(TAG_APPOINTMENT_SCHEDULED)
            record.tags.discard(TAG_APPOINTMENT_CANCELLED)
            self.store.save(record)
            logger.info("📅 Booked %s for %s on %s at %s", appointment.id, prospect_id, appointment.date, appointment.time)

            self.send_appointment_reminders(prospect_id, appointment)
            return appointment

    def cancel_appointment(self, prospect_id: str) -> Optional[Appointment]:
        with self.locks.hold(prospect_id):
            record = self.store.get(prospect_id)
            appointment = record.appointment if record else None
            if appointment is None or appointment.status is not AppointmentStatus.SCHEDULED:
                return None
            appointment.status = AppointmentStatus.CANCELLED
            self.store.save_appointment(appointment)
            record.tags.discard(TAG_APPOINTMENT_SCHEDULED)
            record.tags.add(TAG_APPOINTMENT_CANCELLED)
            self.store.save(record)
            logger.info("Cancelled %s for %s", appointment.id, prospect_id)
            return appointment

    def send_appointment_reminders(self, prospect_id: str, appointment: Appointment) -> List[Reminder]:
        """Record reminder intents. Delivery belongs to whatever scheduler consumes them."""
        record = self.store.get(prospect_id)
        if record is None:
            return []
        reminders = [
            Reminder(
                kind=kind,
                due_at=appointment.starts_at - lead,
                message=self.personalize_message(template, record.data),
            )
            for kind, lead, template in REMINDER_SCHEDULE
        ]
        appointment.reminders = reminders
        for reminder in reminders:
            logger.info(
                "[Reminder] %s reminder scheduled for %s - %s at %s",
                reminder.kind,
                prospect_id,
                appointment.date,
                appointment.time,
            )
        return reminders

    # ------------------------------------------------------------------
    # Batch maintenance
    # ------------------------------------------------------------------
    def activate_power_hour(self, count: Optional[int] = None) -> int:
        return sweepers.activate_power_hour(self, self.config.power_hour_batch if count is None else count)

    def check_no_shows(self) -> int:
        return sweepers.check_no_shows(self)
