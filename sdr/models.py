"""Core SDR data model: campaigns, prospects, appointments and replies."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Set, Tuple

DEFAULT_REPLY = (
    "Thanks for your response! Would you like to hear more about our "
    "Enhanced Dental PPO Coverage options or schedule a quick call?"
)
APPOINTMENT_SERVICE = "Enhanced Dental PPO Coverage Consultation"


class CampaignType(str, Enum):
    LEAD_GENERATION = "leadGeneration"
    NO_RESPONSE = "noResponse"
    NO_SHOW = "noShow"
    RE_ENGAGEMENT = "reEngagement"
    LIST_VALIDATION = "listValidation"
    COLD_OFFER = "coldOffer"
    POWER_HOUR = "powerHour"
    HOLDING = "holding"

    @classmethod
    def coerce(cls, value) -> Optional["CampaignType"]:
        """Member for a member or wire string, None for anything else."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class EventType(str, Enum):
    SMS = "sms"
    EMAIL = "email"
    AI_VOICE_CALL = "ai_voice_call"
    VOICEMAIL_DROP = "voicemail_drop"

    @property
    def channel(self) -> str:
        """Communications-log channel for this event type."""
        if self in (EventType.AI_VOICE_CALL, EventType.VOICEMAIL_DROP):
            return "call"
        return self.value


class ResponseAction(str, Enum):
    OFFER_TIMES = "offer_times"
    BOOK_APPOINTMENT = "book_appointment"
    MOVE_CAMPAIGN = "move_campaign"
    MARK_INVALID = "mark_invalid"
    DEFAULT_REPLY = "default_reply"


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    NO_SHOW = "no-show"
    CANCELLED = "cancelled"


# -----------------------------
# Display helpers
# -----------------------------
def format_date(value: datetime) -> str:
    """'Tuesday, October 20'"""
    return f"{value:%A}, {value:%B} {value.day}"


def format_time(value: datetime) -> str:
    """'2:00 PM'"""
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


# -----------------------------
# Appointments
# -----------------------------
@dataclass
class Reminder:
    kind: str
    due_at: datetime
    message: str


@dataclass
class Appointment:
    id: str
    prospect_id: str
    starts_at: datetime
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    service: str = APPOINTMENT_SERVICE
    reminders: List[Reminder] = field(default_factory=list)

    @property
    def date(self) -> str:
        return format_date(self.starts_at)

    @property
    def time(self) -> str:
        return format_time(self.starts_at)


# -----------------------------
# Prospects
# -----------------------------
@dataclass
class Prospect:
    id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    source: Optional[str] = None
    appointment_id: Optional[str] = None
    _resolver: Optional[Callable[[str], Optional[Appointment]]] = field(
        default=None, repr=False, compare=False
    )

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)

    @property
    def appointment(self) -> Optional[Appointment]:
        if not self.appointment_id or self._resolver is None:
            return None
        return self._resolver(self.appointment_id)


@dataclass
class HistoryEntry:
    campaign: CampaignType
    timestamp: datetime


@dataclass
class ProspectRecord:
    data: Prospect
    current_campaign: CampaignType
    stage: int = 0
    history: List[HistoryEntry] = field(default_factory=list)
    tags: Set[str] = field(default_factory=set)

    @property
    def prospect_id(self) -> str:
        return self.data.id

    @property
    def appointment(self) -> Optional[Appointment]:
        return self.data.appointment


@dataclass
class CommunicationRecord:
    id: str
    prospect_id: str
    prospect_name: str
    phone: str
    email: str
    channel: str
    direction: str
    content: str
    timestamp: datetime
    status: str
    campaign: Optional[CampaignType] = None


# -----------------------------
# Campaign definitions
# -----------------------------
@dataclass(frozen=True)
class AutomationEvent:
    type: EventType
    name: str
    timing: str
    message: str
    subject: Optional[str] = None


@dataclass(frozen=True)
class ResponseHandler:
    keywords: Tuple[str, ...]
    action: ResponseAction
    reply: str
    target_campaign: Optional[CampaignType] = None

    def __post_init__(self) -> None:
        if self.action is ResponseAction.MOVE_CAMPAIGN and self.target_campaign is None:
            raise ValueError("move_campaign handler needs a target_campaign")

    def matches(self, message: str) -> bool:
        lowered = (message or "").lower()
        return any(k.lower() in lowered for k in self.keywords)


@dataclass(frozen=True)
class CampaignDefinition:
    key: CampaignType
    name: str
    automation_events: Tuple[AutomationEvent, ...]
    response_handlers: Tuple[ResponseHandler, ...]
    next_campaign: Optional[CampaignType] = None

    def match(self, message: str) -> Optional[ResponseHandler]:
        """First handler (declaration order) with a keyword in the message."""
        for handler in self.response_handlers:
            if handler.matches(message):
                return handler
        return None


@dataclass
class ResponseResult:
    action: ResponseAction
    reply: str
    target_campaign: Optional[CampaignType] = None

    def as_dict(self) -> dict:
        return {
            "action": self.action.value,
            "reply": self.reply,
            "target_campaign": self.target_campaign.value if self.target_campaign else None,
        }
