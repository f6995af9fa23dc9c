"""
Template placeholder substitution for outbound copy and replies.

Placeholders use ``{{Name}}`` syntax and are replaced globally and
case-sensitively. Unknown placeholders are left untouched. Assignee
placeholders never go out literally: without a configured rep they read
"the team", and the account number is dropped.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, Optional

from sdr.config import DEFAULT_OFFICE_NAME, Assignee
from sdr.models import Prospect

# stands in for the rep when no assignee is configured
ASSIGNEE_FALLBACK = "the team"


def time_options(now: datetime) -> str:
    """The {{wooai}} slot offer: tomorrow's weekday with the three call times."""
    tomorrow = now + timedelta(days=1)
    return f"{tomorrow:%A} at 2pm, 3pm, or 4pm"


def _substitutions(
    prospect: Prospect,
    office_name: Optional[str],
    now: datetime,
    assignee: Optional[Assignee],
) -> Dict[str, str]:
    subs = {
        "{{FirstName}}": prospect.first_name or "there",
        "{{LastName}}": prospect.last_name or "",
        "{{OfficeName}}": office_name or DEFAULT_OFFICE_NAME,
        "{{wooai}}": time_options(now),
    }

    appointment = prospect.appointment
    if appointment is not None:
        subs["{{AppointmentDate}}"] = appointment.date or "tomorrow"
        subs["{{AppointmentTime}}"] = appointment.time or "the scheduled time"

    assignee = assignee or Assignee()
    subs["{{AssigneeFirstName}}"] = assignee.first_name or ASSIGNEE_FALLBACK
    subs["{{AssigneeFullName}}"] = assignee.full_name or ASSIGNEE_FALLBACK
    subs["{{AccountPhoneNumber}}"] = assignee.phone_number or ""
    return subs


def personalize(
    template: str,
    prospect: Prospect,
    office_name: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
    assignee: Optional[Assignee] = None,
) -> str:
    if not template:
        return ""
    now = now or datetime.now().astimezone()
    result = template
    for placeholder, value in _substitutions(prospect, office_name, now, assignee).items():
        result = result.replace(placeholder, value)
    return result
