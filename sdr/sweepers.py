"""Batch maintenance passes: no-show detection and Power Hour activation."""

from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import TYPE_CHECKING

from sdr.models import Appointment, AppointmentStatus, CampaignType
from sdr.runtime import get_logger

if TYPE_CHECKING:
    from sdr.campaign_manager import CampaignManager

logger = get_logger(__name__)

POWER_HOUR_LOCK = "power_hour"
NO_SHOW_LOCK = "no_show_sweep"


def is_overdue(appointment: Appointment, now: datetime) -> bool:
    """Scheduled, and its calendar day began more than a day before ``now``."""
    if appointment.status is not AppointmentStatus.SCHEDULED:
        return False
    starts_at = appointment.starts_at
    day_start = datetime.combine(starts_at.date(), time.min, tzinfo=starts_at.tzinfo)
    return day_start < now - timedelta(days=1)


def activate_power_hour(manager: "CampaignManager", count: int = 25) -> int:
    """Move up to ``count`` holding prospects, oldest first, into Power Hour."""
    with manager.sweep_guard.acquire(POWER_HOUR_LOCK) as acquired:
        if not acquired:
            logger.info("⏭️ Power Hour already running, skipping")
            return 0

        batch = manager.store.in_campaign(CampaignType.HOLDING)[: max(count, 0)]
        moved = 0
        for record in batch:
            with manager.locks.hold(record.prospect_id):
                # may have replied and left holding since the snapshot
                if record.current_campaign is not CampaignType.HOLDING:
                    continue
                if manager.move_to_next_campaign(record.prospect_id, CampaignType.POWER_HOUR):
                    moved += 1

        logger.info("⚡ Power Hour activated for %s prospect(s)", moved)
        return moved


def check_no_shows(manager: "CampaignManager") -> int:
    """Flag overdue scheduled appointments as no-shows and start the No Show campaign."""
    with manager.sweep_guard.acquire(NO_SHOW_LOCK) as acquired:
        if not acquired:
            logger.info("⏭️ No-show sweep already running, skipping")
            return 0

        now = manager.now()
        flagged = 0
        for appointment in manager.store.appointments(AppointmentStatus.SCHEDULED):
            with manager.locks.hold(appointment.prospect_id):
                if not is_overdue(appointment, now):
                    continue
                appointment.status = AppointmentStatus.NO_SHOW
                manager.store.save_appointment(appointment)
                flagged += 1
                logger.info("🚫 Appointment %s for %s marked no-show", appointment.id, appointment.prospect_id)
                manager.move_to_next_campaign(appointment.prospect_id, CampaignType.NO_SHOW)

        logger.info("No-show sweep flagged %s appointment(s)", flagged)
        return flagged
