"""Dental SDR campaign engine."""

from sdr.campaign_manager import CampaignManager
from sdr.models import (
    DEFAULT_REPLY,
    Appointment,
    AppointmentStatus,
    CampaignType,
    EventType,
    Prospect,
    ProspectRecord,
    ResponseAction,
    ResponseResult,
)

__all__ = [
    "DEFAULT_REPLY",
    "Appointment",
    "AppointmentStatus",
    "CampaignManager",
    "CampaignType",
    "EventType",
    "Prospect",
    "ProspectRecord",
    "ResponseAction",
    "ResponseResult",
]
