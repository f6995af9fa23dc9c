"""Handler copy shared across campaigns."""

from __future__ import annotations

from typing import Tuple

from sdr.models import CampaignType, ResponseAction, ResponseHandler

INTEREST_KEYWORDS = ("yes", "interested", "tell me more", "information")
BOOKED_KEYWORDS = ("2pm", "3pm", "4pm", "tomorrow", "time works")
DECLINE_KEYWORDS = ("no", "not interested", "stop", "unsubscribe")

OFFER_TIMES_REPLY = (
    "Great! Would tomorrow at 2pm, 3pm, or 4pm work for a quick call to discuss our "
    "Enhanced Dental PPO Coverage options?"
)
BOOKED_REPLY = (
    "Perfect! You're all set for a call on {{AppointmentDate}} at {{AppointmentTime}}. I'll give you a call "
    "then to discuss your Enhanced Dental PPO Coverage options. If anything comes up before then, feel free "
    "to reach out!"
)
DECLINE_REPLY = (
    "I understand. If you change your mind about improving your dental coverage, feel free to reach out anytime!"
)


def standard_handlers(
    offer_keywords: Tuple[str, ...] = INTEREST_KEYWORDS,
    offer_reply: str = OFFER_TIMES_REPLY,
) -> Tuple[ResponseHandler, ...]:
    """offer times -> book -> decline to holding, in that order."""
    return (
        ResponseHandler(keywords=offer_keywords, action=ResponseAction.OFFER_TIMES, reply=offer_reply),
        ResponseHandler(keywords=BOOKED_KEYWORDS, action=ResponseAction.BOOK_APPOINTMENT, reply=BOOKED_REPLY),
        ResponseHandler(
            keywords=DECLINE_KEYWORDS,
            action=ResponseAction.MOVE_CAMPAIGN,
            target_campaign=CampaignType.HOLDING,
            reply=DECLINE_REPLY,
        ),
    )
