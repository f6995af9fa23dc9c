"""
Intake campaigns: first contact with a prospect.

List Validation confirms a cold-list contact is who we think it is,
Lead Generation works form fills toward a call, Cold Offer pitches
validated cold contacts.
"""

from __future__ import annotations

from sdr.models import (
    AutomationEvent,
    CampaignDefinition,
    CampaignType,
    EventType,
    ResponseAction,
    ResponseHandler,
)
from sdr.campaigns.common import BOOKED_KEYWORDS, DECLINE_KEYWORDS, standard_handlers

SMS = EventType.SMS
EMAIL = EventType.EMAIL
CALL = EventType.AI_VOICE_CALL


LIST_VALIDATION = CampaignDefinition(
    key=CampaignType.LIST_VALIDATION,
    name="List Validation",
    next_campaign=CampaignType.COLD_OFFER,
    automation_events=(
        # day contact opts in
        AutomationEvent(
            SMS,
            "Confirm their name SMS",
            "Send after opt in",
            "Hey is this {{FirstName}}? Are you there? Is this {{FirstName}}'s number?",
        ),
        # day 1
        AutomationEvent(
            EMAIL,
            "Is this your email?",
            "06:00 AM",
            "Hey {{FirstName}}, I hope this email finds you well. I'm currently working with dental patients "
            "to help them with a cosmetic dental grant. Why consider a cosmetic dental grant? It can provide "
            "significant savings on procedures like veneers, crowns, and implants. Is this your current email address?",
            subject="{{FirstName}}, quick question",
        ),
        # day 2
        AutomationEvent(
            EMAIL,
            "Did You Get This",
            "10:00 AM",
            "Hey {{FirstName}}, I hope this email finds you well. I'm currently working with patients on helping "
            "them with cosmetic dental grants. Why consider cosmetic dental treatment? It can significantly improve "
            "your confidence and overall appearance. Did you receive my previous message?",
            subject="{{FirstName}}, Did you get this?",
        ),
        AutomationEvent(
            CALL,
            "Verification Call",
            "12:00 PM",
            "Hello, I'm calling for {{FirstName}}. This is {{AssigneeFirstName}} with {{OfficeName}}. We're reaching "
            "out to eligible individuals in your area about our cosmetic dental grant program. I just need to verify "
            "that I'm speaking with {{FirstName}}. Is this {{FirstName}}? [If yes] Great! I'll send you some "
            "information about our dental grant program shortly that could help you save significantly on cosmetic "
            "dental procedures. [If no] I apologize for the confusion. Thank you for your time.",
        ),
        # day 3
        AutomationEvent(
            EMAIL,
            "Are You Still",
            "08:00 AM",
            "Hey {{FirstName}}, I hope this email finds you well. I'm currently working with dental patients on "
            "helping them with cosmetic dental grants. Why consider cosmetic dental treatments? Because a beautiful "
            "smile can open doors both personally and professionally.",
            subject="{{FirstName}}?",
        ),
        AutomationEvent(
            SMS,
            "Compliance Text Message",
            "05:00 PM",
            "Hey, this is {{AssigneeFullName}} with {{OfficeName}}. Is this {{FirstName}}? If this is not, please "
            "respond back with NO.",
        ),
    ),
    response_handlers=(
        ResponseHandler(
            keywords=("yes", "yeah", "correct", "speaking", "this is", "right"),
            action=ResponseAction.MOVE_CAMPAIGN,
            target_campaign=CampaignType.COLD_OFFER,
            reply="Great! Thanks for confirming. I'll send you some information about our dental services shortly.",
        ),
        ResponseHandler(
            keywords=("no", "wrong", "not", "who", "not me"),
            action=ResponseAction.MARK_INVALID,
            reply="I apologize for the confusion. I'll update our records. Have a great day!",
        ),
    ),
)


LEAD_GENERATION = CampaignDefinition(
    key=CampaignType.LEAD_GENERATION,
    name="Lead Generation",
    next_campaign=CampaignType.NO_RESPONSE,
    automation_events=(
        # day contact opts in
        AutomationEvent(
            SMS,
            "Thank You",
            "send_after_opt_in",
            "Hey {{FirstName}}, this is {{AssigneeFirstName}} with {{OfficeName}}. I thought following up by text "
            "might be easier for you. Thanks for filling out our form for Enhanced Dental PPO Coverage! 😊",
        ),
        AutomationEvent(
            EMAIL,
            "Covering My Bases",
            "send_5_min_after_opt_in",
            "Hey {{FirstName}}, this is {{AssigneeFullName}} with {{OfficeName}}. I wanted to cover all my "
            "communication bases with you today. I hope you don't mind.\n\nThanks for your interest in our Enhanced "
            "Dental PPO Coverage. Would tomorrow at 2pm, 3pm, or 4pm work for a quick call to discuss how this could "
            "benefit you?",
            subject="{{FirstName}}, Thanks for your inquiry",
        ),
        # day 1
        AutomationEvent(
            CALL,
            "Voice Call 1",
            "09:00 AM",
            "Hi {{FirstName}}, this is {{AssigneeFirstName}} with {{OfficeName}}. I'm calling about your recent "
            "inquiry regarding our Enhanced Dental PPO Coverage. I'd love to tell you about the exclusive benefits "
            "and savings available to you. Is now a good time to talk for a few minutes about how we can help "
            "improve your dental coverage? If not, would tomorrow at 2pm, 3pm, or 4pm work better for a quick call?",
        ),
        AutomationEvent(
            SMS,
            "Checking In",
            "09:30 AM",
            "Hey {{FirstName}}. I just tried giving you a call. I wanted to check back in with you regarding "
            "Enhanced Dental PPO Coverage. I'd love to help! Would {{wooai}} be a good time for us to connect?",
        ),
        # day 2
        AutomationEvent(
            EMAIL,
            "Checking Back In",
            "10:00 AM",
            "Hey {{FirstName}}, Just wanted to follow up with you regarding Enhanced Dental PPO Coverage. Our plan "
            "can unlock exclusive dental benefits including:\n\n• 100% coverage for preventive care\n• Lower "
            "out-of-pocket costs\n• No waiting periods\n\nWould tomorrow at 2pm, 3pm, or 4pm work for a quick call "
            "to discuss?",
            subject="{{FirstName}}, Checking In",
        ),
        AutomationEvent(
            SMS,
            "What Time Works Well",
            "12:00 PM",
            "Hey {{FirstName}}, are you looking to get Enhanced Dental PPO Coverage? Schedule an appointment with "
            "us to discuss how Enhanced Dental PPO Coverage can unlock exclusive benefits. Does {{wooai}} work for "
            "a quick call?",
        ),
        # day 3
        AutomationEvent(
            SMS,
            "Still Looking",
            "05:00 PM",
            "Hey {{FirstName}}. I hope your day is going well! Are you still looking for Enhanced Dental PPO "
            "Coverage? I am always happy to hear from you. 😊",
        ),
        AutomationEvent(
            EMAIL,
            "Does Tomorrow Work",
            "08:00 PM",
            "Hey {{FirstName}}, Are you looking to get Enhanced Dental PPO Coverage? Schedule an appointment with "
            "us to discuss how Enhanced Dental PPO Coverage can save you money while providing better dental care. "
            "Does tomorrow at 2pm, 3pm, or 4pm work for a quick call?",
            subject="{{FirstName}}, does tomorrow work?",
        ),
        # day 4
        AutomationEvent(
            CALL,
            "Voice Call 2",
            "04:00 PM",
            "Hi {{FirstName}}, it's {{AssigneeFirstName}} again with {{OfficeName}}. I'm following up about the "
            "Enhanced Dental PPO Coverage we discussed. I wanted to let you know that spots are filling up quickly, "
            "and I wanted to make sure you have the opportunity to enroll before they're gone. Would you be "
            "interested in discussing this further? I have openings tomorrow at 2pm, 3pm, or 4pm - would any of "
            "those times work for a quick call?",
        ),
        # day 5
        AutomationEvent(
            EMAIL,
            "Last Chance",
            "06:30 PM",
            "Hey {{FirstName}}, I hate to be a pest, but I wanted to follow up one last time. Are you free to talk "
            "{{wooai}}? {{AssigneeFullName}} {{AccountPhoneNumber}}",
            subject="{{FirstName}}, last chance",
        ),
        AutomationEvent(
            SMS,
            "One Last Time",
            "10:00 AM",
            "Hey {{FirstName}}, please forgive me for being persistent, but I wanted to follow up one last time. "
            "Are you free to talk {{wooai}}?",
        ),
    ),
    response_handlers=standard_handlers(),
)


COLD_OFFER = CampaignDefinition(
    key=CampaignType.COLD_OFFER,
    name="Cold Offer",
    next_campaign=CampaignType.NO_RESPONSE,
    automation_events=(
        AutomationEvent(
            SMS,
            "Initial Offer",
            "09:00 AM",
            "Hey {{FirstName}}, {{AssigneeFirstName}} here from {{OfficeName}}. I came across your information and "
            "was impressed with your profile. Right now we're helping patients get access to exclusive dental care "
            "through our Enhanced PPO program. Would you be interested in saving up to 60% on your dental "
            "procedures? We currently have 5-10 spots available in your area.",
        ),
        AutomationEvent(
            CALL,
            "Initial Cold Call",
            "11:00 AM",
            "Hello {{FirstName}}, this is {{AssigneeFirstName}} with {{OfficeName}}. I'm calling because we're "
            "currently helping patients in your area save up to 60% on dental procedures through our Enhanced PPO "
            "program. We have a limited number of spots available and I thought you might be interested. Do you "
            "have a moment to discuss how this could benefit you? If now isn't a good time, would tomorrow at 2pm, "
            "3pm, or 4pm work better for a quick call?",
        ),
        AutomationEvent(
            EMAIL,
            "Offer Details",
            "10:00 AM",
            "Hey {{FirstName}}, {{AssigneeFirstName}} here from {{OfficeName}}. I came across your information and "
            "thought you might be interested in our Enhanced Dental PPO program. \n\nOur patients are saving an "
            "average of 60% on dental procedures with our exclusive network of providers. Right now, we have a "
            "limited number of spots available in your area.\n\nWould tomorrow at 2pm, 3pm, or 4pm work for a quick "
            "call to discuss how this program could benefit you and your family?",
            subject="Exclusive Dental Savings Opportunity",
        ),
    ),
    response_handlers=(
        ResponseHandler(
            keywords=("yes", "interested", "tell me more", "information", "savings", "spots", "available"),
            action=ResponseAction.OFFER_TIMES,
            reply="Great! Would tomorrow at 2pm, 3pm, or 4pm work for a quick call to discuss our Enhanced Dental "
            "PPO program and how it can save you money?",
        ),
        ResponseHandler(
            keywords=BOOKED_KEYWORDS,
            action=ResponseAction.BOOK_APPOINTMENT,
            reply="Perfect! You're all set for a call on {{AppointmentDate}} at {{AppointmentTime}}. I'll give you "
            "a call then to discuss our Enhanced Dental PPO program. If anything comes up before then, feel free "
            "to reach out!",
        ),
        ResponseHandler(
            keywords=DECLINE_KEYWORDS,
            action=ResponseAction.MOVE_CAMPAIGN,
            target_campaign=CampaignType.HOLDING,
            reply="I understand. If you change your mind about saving on your dental care, feel free to reach out "
            "anytime!",
        ),
    ),
)
