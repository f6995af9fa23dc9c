"""Follow-up campaigns for prospects who went quiet or missed a call."""

from __future__ import annotations

from sdr.campaigns.common import standard_handlers
from sdr.models import AutomationEvent, CampaignDefinition, CampaignType, EventType

SMS = EventType.SMS
EMAIL = EventType.EMAIL
CALL = EventType.AI_VOICE_CALL
VOICEMAIL = EventType.VOICEMAIL_DROP


NO_RESPONSE = CampaignDefinition(
    key=CampaignType.NO_RESPONSE,
    name="No Response",
    next_campaign=CampaignType.RE_ENGAGEMENT,
    automation_events=(
        # day 1
        AutomationEvent(
            SMS,
            "Checking Back In",
            "09:00 AM",
            "Hey {{FirstName}}, I wanted to check back in with you regarding Enhanced Dental PPO Coverage. I'd "
            "love to help! Would {{wooai}} work to discuss?",
        ),
        AutomationEvent(
            CALL,
            "Voice Call 1",
            "09:00 AM",
            "Hi {{FirstName}}, this is {{AssigneeFirstName}} with {{OfficeName}}. I'm calling to follow up on our "
            "Enhanced Dental PPO Coverage. Many of our members are saving up to 60% on their dental procedures "
            "with our plan. I wanted to see if you have any questions I could answer. Would now be a good time to "
            "chat for a few minutes? If not, would tomorrow at 2pm, 3pm, or 4pm work better for a quick call?",
        ),
        # day 2
        AutomationEvent(
            SMS,
            "What time works well",
            "10:00 AM",
            "Hey {{FirstName}}, just checking back in. Does {{wooai}} work well for us to discuss Enhanced Dental "
            "PPO Coverage?",
        ),
        AutomationEvent(
            EMAIL,
            "Still Interested",
            "07:00 PM",
            "Hey {{FirstName}}, just wanted to follow up with you regarding Enhanced Dental PPO Coverage. Did you "
            "know dental PPO coverage hasn't increased since 2016? I'd be happy to explain how our enhanced "
            "coverage can save you money while providing better care. Does tomorrow at 2pm, 3pm, or 4pm work for "
            "a call?",
            subject="{{FirstName}}, checking back in",
        ),
        # day 3
        AutomationEvent(
            SMS,
            "Are you still looking",
            "12:30 PM",
            "Hey {{FirstName}}. I hope your day is going well. Are you still looking for Enhanced Dental PPO "
            "Coverage? Always happy to hear from you. 😊",
        ),
        AutomationEvent(
            EMAIL,
            "Does Tomorrow Work",
            "08:30 PM",
            "Hey {{FirstName}}, You made a smart decision reaching out to us. Will {{wooai}} work to talk about "
            "Enhanced Dental PPO Coverage? Please let me know.",
            subject="{{FirstName}}, does tomorrow work?",
        ),
        # day 4
        AutomationEvent(
            SMS,
            "Free to talk",
            "06:30 PM",
            "Hey {{FirstName}}, haven't heard back. Are you free to talk {{wooai}}?",
        ),
    ),
    response_handlers=standard_handlers(),
)


NO_SHOW = CampaignDefinition(
    key=CampaignType.NO_SHOW,
    name="No Show",
    next_campaign=CampaignType.RE_ENGAGEMENT,
    automation_events=(
        # day 1
        AutomationEvent(
            CALL,
            "Voice Call 1",
            "08:55 AM",
            "Hi {{FirstName}}, this is {{AssigneeFirstName}} with {{OfficeName}}. I'm calling about our scheduled "
            "appointment that we missed yesterday regarding your Enhanced Dental PPO Coverage. I wanted to check "
            "if everything's okay and see if we could reschedule. My schedule is still open tomorrow at 2pm, 3pm, "
            "or 4pm - would any of those times work for you? I'm looking forward to sharing how our enhanced "
            "coverage can save you money.",
        ),
        AutomationEvent(
            SMS,
            "Missed You",
            "09:00 AM",
            "Hey {{FirstName}}, {{AssigneeFirstName}} here. Just following up on your missed appointment for "
            "Enhanced Dental PPO Coverage call. Does {{wooai}} work to give you a quick call?",
        ),
        # day 2
        AutomationEvent(
            EMAIL,
            "Should We Reschedule",
            "10:00 AM",
            "Hey {{FirstName}}, {{AssigneeFirstName}} here. Just following up on your missed call for Enhanced "
            "Dental PPO Coverage. Does {{wooai}} work for us to reschedule? I still have some availability this "
            "week.",
            subject="{{FirstName}}, should we reschedule?",
        ),
        AutomationEvent(
            SMS,
            "What Day?",
            "12:00 PM",
            "Hey {{FirstName}}, sorry we missed you! Would tomorrow at 2pm, 3pm, or 4pm work for you to "
            "reschedule your Enhanced Dental PPO Coverage call?",
        ),
        # day 3
        AutomationEvent(
            VOICEMAIL,
            "VM 2",
            "09:00 AM",
            "Hey {{FirstName}}, it's {{AssigneeFirstName}} with {{OfficeName}}. I'm just following up one more "
            "time about your Enhanced Dental PPO Coverage appointment that you missed. We're still holding your "
            "spot, but I wanted to let you know that our schedule is filling up quickly. If you'd like to "
            "reschedule, please give me a call back at {{AccountPhoneNumber}}.",
        ),
        AutomationEvent(
            SMS,
            "Holding Back",
            "05:00 PM",
            "Hey {{FirstName}}, is there anything holding you back? Can we reschedule for {{wooai}}?",
        ),
        # day 4
        AutomationEvent(
            EMAIL,
            "Keep It Open?",
            "08:00 PM",
            "Hey {{FirstName}}, Appointments are filling up and I wanted to reach out to you one last time. Is "
            "there anything holding you back from using our Enhanced Dental PPO Coverage? I have openings "
            "tomorrow at 2pm, 3pm, or 4pm. Does any of those times work for you?",
            subject="{{FirstName}}, should I keep your spot?",
        ),
    ),
    response_handlers=standard_handlers(
        offer_keywords=("yes", "reschedule", "book", "appointment"),
        offer_reply="Great! Would tomorrow at 2pm, 3pm, or 4pm work for your rescheduled appointment?",
    ),
)


RE_ENGAGEMENT = CampaignDefinition(
    key=CampaignType.RE_ENGAGEMENT,
    name="Re-Engagement",
    next_campaign=CampaignType.HOLDING,
    automation_events=(
        # day 1
        AutomationEvent(
            EMAIL,
            "Free to talk",
            "Send after opt in",
            "Are you free to talk {{wooai}}?",
            subject="Free to talk",
        ),
        # day 2
        AutomationEvent(
            CALL,
            "Voice Call 1",
            "08:55 AM",
            "Hi {{FirstName}}, this is {{AssigneeFirstName}} with {{OfficeName}}. I'm reaching out because I "
            "noticed you've shown interest in our Enhanced Dental PPO Coverage in the past. We've recently updated "
            "our plans to offer even better savings - up to 60% on major dental procedures. Do you have a couple "
            "of minutes to discuss how this could benefit you? If now isn't a good time, would tomorrow at 2pm, "
            "3pm, or 4pm work better for a quick call?",
        ),
        AutomationEvent(
            SMS,
            "Are You Interested",
            "09:00 AM",
            "Hey {{FirstName}}, I just tried giving you a call to see if you are interested in our no-cost "
            "Enhanced PPO Dental Coverage. I'd love to help! Would {{wooai}} be a good time for us to connect?",
        ),
        # day 3
        AutomationEvent(
            EMAIL,
            "Quick Question",
            "10:00 AM",
            "Hey {{FirstName}}, Did you know that achieving the smile of your dreams could be more affordable "
            "than you think? Our Enhanced Dental PPO Coverage is here to help with significant savings on all your "
            "dental care needs. Would tomorrow at 2pm, 3pm, or 4pm work for a quick call to discuss the benefits?",
            subject="{{FirstName}}, quick question",
        ),
        AutomationEvent(
            SMS,
            "Still Interested",
            "10:05 AM",
            "Hey {{FirstName}}, I just sent you an email. If you are interested in Enhanced PPO Dental Coverage, "
            "I would love to help! Does {{wooai}} work for a quick call?",
        ),
        AutomationEvent(
            SMS,
            "Schedule A Call",
            "09:05 AM",
            "Hey {{FirstName}}, sorry about that. I think I might have dialed your number by mistake. But I'm "
            "trying to see if we can set up a call {{wooai}} to go over your options?",
        ),
        # day 4
        AutomationEvent(
            CALL,
            "Voice Call 2",
            "09:00 AM",
            "Hi {{FirstName}}, it's {{AssigneeFirstName}} from {{OfficeName}} calling again about our Enhanced "
            "Dental PPO Coverage. I wanted to let you know that we're extending our special offer for just a few "
            "more days. This is a limited-time opportunity to secure better dental coverage at significantly "
            "reduced rates. I have a few spots available tomorrow at 2pm, 3pm, or 4pm - would any of those times "
            "work for a quick call to discuss how this could benefit you?",
        ),
        # day 5
        AutomationEvent(
            EMAIL,
            "Did You Know",
            "02:00 PM",
            "Hey {{FirstName}}, Did you know that achieving the smile of your dreams could be more affordable "
            "than you think? Our Enhanced Dental PPO Coverage is here to help with benefits like:\n\n• 100% "
            "coverage on preventive care\n• Up to 80% coverage on basic procedures\n• Up to 50% coverage on major "
            "procedures\n\nWould tomorrow at 2pm, 3pm, or 4pm work for a quick call to discuss these benefits?",
            subject="{{FirstName}}, Did you know",
        ),
        # day 6
        AutomationEvent(
            SMS,
            "Free This Evening?",
            "12:00 PM",
            "Hey {{FirstName}}, I hope all is well. Are you free to talk {{wooai}}?",
        ),
        AutomationEvent(
            EMAIL,
            "No Luck",
            "08:00 PM",
            "Hey {{FirstName}}, I have been trying to get a hold of you for a while but have had no luck. If you "
            "are no longer interested in our services, please let me know. I love helping people improve their "
            "dental health and would still be happy to discuss how our Enhanced Dental PPO Coverage can benefit "
            "you. If you're interested, let's set up a call. I have availability tomorrow at 2pm, 3pm, or 4pm. "
            "Does any of those times work for you?",
            subject="{{FirstName}}",
        ),
    ),
    response_handlers=standard_handlers(),
)
