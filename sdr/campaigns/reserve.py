"""Power Hour pulls parked prospects back in; Holding is where they park."""

from __future__ import annotations

from sdr.campaigns.common import DECLINE_KEYWORDS, DECLINE_REPLY
from sdr.models import (
    AutomationEvent,
    CampaignDefinition,
    CampaignType,
    EventType,
    ResponseAction,
    ResponseHandler,
)

POWER_HOUR = CampaignDefinition(
    key=CampaignType.POWER_HOUR,
    name="Power Hour",
    next_campaign=CampaignType.HOLDING,
    automation_events=(
        AutomationEvent(
            EventType.AI_VOICE_CALL,
            "Urgent Voice Call",
            "immediate",
            "Hello {{FirstName}}, this is {{AssigneeFirstName}} with {{OfficeName}}. I'm calling with an urgent "
            "opportunity - this month we're offering a special promotion for our Enhanced Dental PPO Coverage with "
            "significant savings on all dental procedures. We have only 5 spots remaining in your area, and since "
            "you expressed interest previously, I wanted to give you priority access before they're filled. Do you "
            "have a moment to discuss how this coverage could benefit you? If now isn't a good time, I have "
            "openings today at 2pm, 3pm, or 4pm - would any of those times work for a quick call?",
        ),
        AutomationEvent(
            EventType.SMS,
            "Limited Time Offer",
            "5_min_after_call",
            "Hey {{FirstName}}, I just tried giving you a call. I'm reaching out because we have a limited-time "
            "Enhanced Dental PPO Coverage offer available. Only 5 spots left in your area! Would {{wooai}} work "
            "for a quick call to secure your coverage before it's gone?",
        ),
    ),
    response_handlers=(
        ResponseHandler(
            keywords=("yes", "interested", "tell me more", "spots", "offer", "limited"),
            action=ResponseAction.OFFER_TIMES,
            reply="Great! Would today at 2pm, 3pm, or 4pm work for a quick call? We need to act fast as these "
            "spots are filling quickly!",
        ),
        ResponseHandler(
            keywords=("2pm", "3pm", "4pm", "today", "time works"),
            action=ResponseAction.BOOK_APPOINTMENT,
            reply="Perfect! You're all set for a call today at {{AppointmentTime}}. I'll give you a call then to "
            "secure your Enhanced Dental PPO Coverage. If anything comes up before then, feel free to reach out!",
        ),
        ResponseHandler(
            keywords=DECLINE_KEYWORDS,
            action=ResponseAction.MOVE_CAMPAIGN,
            target_campaign=CampaignType.HOLDING,
            reply=DECLINE_REPLY,
        ),
    ),
)


# no automated outreach; a warm reply sends them back to re-engagement
HOLDING = CampaignDefinition(
    key=CampaignType.HOLDING,
    name="Holding",
    next_campaign=None,
    automation_events=(),
    response_handlers=(
        ResponseHandler(
            keywords=("yes", "interested", "tell me more"),
            action=ResponseAction.MOVE_CAMPAIGN,
            target_campaign=CampaignType.RE_ENGAGEMENT,
            reply="Great to hear from you! I'd be happy to tell you more about our Enhanced Dental PPO Coverage "
            "options. Would tomorrow at 2pm, 3pm, or 4pm work for a quick call?",
        ),
    ),
)
