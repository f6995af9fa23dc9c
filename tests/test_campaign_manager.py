from datetime import timedelta

import pytest

from sdr.campaign_manager import CampaignManager, appointment_hour
from sdr.config import Assignee, OfficeConfig
from sdr.dispatcher import Dispatcher
from sdr.models import (
    DEFAULT_REPLY,
    AppointmentStatus,
    CampaignType,
    EventType,
    ResponseAction,
)

CT = CampaignType


# -----------------------------
# enrollment
# -----------------------------
def test_add_prospect_fires_first_event(manager, outbox, make_prospect):
    assert manager.add_prospect(make_prospect(), CT.LIST_VALIDATION)

    record = manager.get_record("p1")
    assert record.current_campaign is CT.LIST_VALIDATION
    assert record.stage == 1
    assert record.history == []
    assert record.tags == set()
    assert len(outbox.outbox) == 1
    sent = outbox.outbox[0]
    assert sent["channel"] is EventType.SMS
    assert sent["destination"] == "+15551234567"
    assert sent["content"] == "Hey is this Jane? Are you there? Is this Jane's number?"


def test_add_prospect_defaults_to_list_validation(manager, make_prospect):
    manager.add_prospect(make_prospect())
    assert manager.get_record("p1").current_campaign is CT.LIST_VALIDATION


def test_add_prospect_accepts_wire_name(manager, make_prospect):
    assert manager.add_prospect(make_prospect(), "leadGeneration")
    assert manager.get_record("p1").current_campaign is CT.LEAD_GENERATION


def test_add_prospect_rejects_unknown_campaign(manager, outbox, make_prospect):
    assert manager.add_prospect(make_prospect(), "winBack") is False
    assert manager.get_record("p1") is None
    assert outbox.outbox == []


def test_add_prospect_into_holding_sends_nothing(manager, outbox, make_prospect):
    assert manager.add_prospect(make_prospect(), CT.HOLDING)
    assert manager.get_record("p1").stage == 0
    assert outbox.outbox == []


def test_re_adding_replaces_record(manager, make_prospect):
    manager.add_prospect(make_prospect("a"), CT.LEAD_GENERATION)
    manager.add_prospect(make_prospect("b"), CT.LEAD_GENERATION)
    manager.add_prospect(make_prospect("a", first_name="Ann"), CT.HOLDING)

    assert [r.prospect_id for r in manager.store.records()] == ["a", "b"]
    assert manager.get_record("a").current_campaign is CT.HOLDING
    assert manager.get_record("a").data.first_name == "Ann"


# -----------------------------
# outbound sequencing
# -----------------------------
def test_send_next_event_unknown_prospect(manager):
    assert manager.send_next_event("ghost") is False


def test_stage_advances_one_per_send(manager, make_prospect):
    manager.add_prospect(make_prospect(), CT.LEAD_GENERATION)
    stages = [manager.get_record("p1").stage]
    for _ in range(5):
        assert manager.send_next_event("p1")
        stages.append(manager.get_record("p1").stage)
    assert stages == [1, 2, 3, 4, 5, 6]


def test_exhausted_campaign_moves_to_next(manager, outbox, make_prospect):
    manager.add_prospect(make_prospect(), CT.COLD_OFFER)
    manager.send_next_event("p1")
    manager.send_next_event("p1")
    assert manager.get_record("p1").stage == 3

    assert manager.send_next_event("p1") is True
    record = manager.get_record("p1")
    assert record.current_campaign is CT.NO_RESPONSE
    assert record.stage == 1
    assert [h.campaign for h in record.history] == [CT.COLD_OFFER]
    assert len(outbox.outbox) == 4


def test_exhausted_terminal_campaign_returns_false(manager, make_prospect):
    manager.add_prospect(make_prospect(), CT.HOLDING)
    assert manager.send_next_event("p1") is False
    assert manager.get_record("p1").current_campaign is CT.HOLDING


def test_email_event_goes_to_email_with_subject(manager, outbox, make_prospect):
    manager.add_prospect(make_prospect(), CT.LIST_VALIDATION)
    manager.send_next_event("p1")

    email = outbox.outbox[1]
    assert email["channel"] is EventType.EMAIL
    assert email["destination"] == "p1@example.com"
    assert email["subject"] == "Jane, quick question"


def test_assignee_copy_rendered_from_config(clock, outbox, make_prospect):
    config = OfficeConfig(office_name="Gentle Dental Care", assignee=Assignee(first_name="Maria"))
    manager = CampaignManager(config, dispatcher=outbox, clock=clock)
    manager.add_prospect(make_prospect(), CT.COLD_OFFER)
    assert outbox.outbox[0]["content"].startswith("Hey Jane, Maria here from Gentle Dental Care.")


def test_outbound_communications_are_logged(manager, make_prospect):
    manager.add_prospect(make_prospect(), CT.NO_SHOW)
    comms = manager.store.communications("p1")
    assert len(comms) == 1
    assert comms[0].channel == "call"
    assert comms[0].direction == "outbound"
    assert comms[0].status == "sent"
    assert comms[0].campaign is CT.NO_SHOW


class ExplodingDispatcher(Dispatcher):
    def deliver(self, channel, destination, content, subject):
        raise RuntimeError("carrier down")


def test_dispatch_failure_still_advances_stage(clock, make_prospect):
    manager = CampaignManager(OfficeConfig(), dispatcher=ExplodingDispatcher(), clock=clock)
    assert manager.add_prospect(make_prospect(), CT.LEAD_GENERATION)
    assert manager.send_next_event("p1") is True
    assert manager.get_record("p1").stage == 2
    assert [c.status for c in manager.store.communications("p1")] == ["failed", "failed"]


# -----------------------------
# replies
# -----------------------------
def test_process_response_unknown_prospect(manager):
    assert manager.process_response("ghost", "yes") is None


def test_validation_yes_moves_to_cold_offer(manager, outbox, make_prospect):
    manager.add_prospect(make_prospect(), CT.LIST_VALIDATION)

    result = manager.process_response("p1", "Yes, this is Jane")

    assert result.action is ResponseAction.MOVE_CAMPAIGN
    assert result.target_campaign is CT.COLD_OFFER
    assert result.reply.startswith("Great! Thanks for confirming.")
    record = manager.get_record("p1")
    assert record.current_campaign is CT.COLD_OFFER
    assert record.stage == 1
    assert [h.campaign for h in record.history] == [CT.LIST_VALIDATION]
    assert outbox.outbox[-1]["content"].startswith("Hey Jane,")


def test_booking_from_lead_generation(manager, clock, make_prospect):
    manager.add_prospect(make_prospect(), CT.LEAD_GENERATION)

    result = manager.process_response("p1", "Tomorrow at 2pm works")

    assert result.action is ResponseAction.BOOK_APPOINTMENT
    record = manager.get_record("p1")
    appointment = record.appointment
    assert appointment.status is AppointmentStatus.SCHEDULED
    assert appointment.time == "2:00 PM"
    assert appointment.date == "Tuesday, October 20"
    assert appointment.starts_at.date() == (clock() + timedelta(days=1)).date()
    assert appointment.service == "Enhanced Dental PPO Coverage Consultation"
    assert "appointment_scheduled" in record.tags
    assert "Tuesday, October 20 at 2:00 PM" in result.reply
    assert record.current_campaign is CT.LEAD_GENERATION



def test_cold_offer_interest_offers_times_in_place(manager, make_prospect):
    manager.add_prospect(make_prospect(), CT.COLD_OFFER)

    result = manager.process_response("p1", "Yes I'm interested")

    assert result.action is ResponseAction.OFFER_TIMES
    assert result.target_campaign is None
    assert result.reply.startswith("Great! Would tomorrow at 2pm, 3pm, or 4pm")
    record = manager.get_record("p1")
    assert record.current_campaign is CT.COLD_OFFER
    assert record.stage == 1
    assert record.history == []


def test_cold_offer_booking(manager, make_prospect):
    manager.add_prospect(make_prospect(), CT.COLD_OFFER)

    result = manager.process_response("p1", "2pm works great")

    assert result.action is ResponseAction.BOOK_APPOINTMENT
    record = manager.get_record("p1")
    assert record.appointment.time == "2:00 PM"
    assert record.appointment.date == "Tuesday, October 20"
    assert "appointment_scheduled" in record.tags
    assert record.current_campaign is CT.COLD_OFFER
    assert "Tuesday, October 20 at 2:00 PM" in result.reply
    assert "Enhanced Dental PPO program" in result.reply

def test_default_reply_changes_nothing(manager, make_prospect):
    manager.add_prospect(make_prospect(), CT.LEAD_GENERATION)
    before = manager.get_record("p1").stage

    result = manager.process_response("p1", "maybe later")

    assert result.action is ResponseAction.DEFAULT_REPLY
    assert result.reply == DEFAULT_REPLY
    assert result.target_campaign is None
    record = manager.get_record("p1")
    assert record.stage == before
    assert record.current_campaign is CT.LEAD_GENERATION
    assert record.history == []


def test_handler_order_beats_specificity(manager, make_prospect):
    manager.add_prospect(make_prospect(), CT.LEAD_GENERATION)
    result = manager.process_response("p1", "yes, tomorrow at 2pm")
    assert result.action is ResponseAction.OFFER_TIMES
    assert manager.get_record("p1").appointment is None


def test_mark_invalid_tags_without_moving(manager, make_prospect):
    manager.add_prospect(make_prospect(), CT.LIST_VALIDATION)
    result = manager.process_response("p1", "wrong number")
    assert result.action is ResponseAction.MARK_INVALID
    record = manager.get_record("p1")
    assert record.current_campaign is CT.LIST_VALIDATION
    assert "invalid_contact" in record.tags


def test_decline_parks_in_holding(manager, make_prospect):
    manager.add_prospect(make_prospect(), CT.NO_RESPONSE)
    result = manager.process_response("p1", "Please STOP texting")
    assert result.target_campaign is CT.HOLDING
    record = manager.get_record("p1")
    assert record.current_campaign is CT.HOLDING
    assert record.stage == 0


# -----------------------------
# transitions
# -----------------------------
def test_move_rejects_unknown_target(manager, make_prospect):
    manager.add_prospect(make_prospect(), CT.LEAD_GENERATION)
    assert manager.move_to_next_campaign("p1", "nowhere") is False
    assert manager.get_record("p1").history == []


def test_move_unknown_prospect(manager):
    assert manager.move_to_next_campaign("ghost", CT.HOLDING) is False


def test_history_records_each_campaign_left(manager, clock, make_prospect):
    manager.add_prospect(make_prospect(), CT.LEAD_GENERATION)
    manager.move_to_next_campaign("p1", CT.NO_RESPONSE)
    manager.move_to_next_campaign("p1", CT.NO_RESPONSE)
    clock.advance(hours=1)
    manager.move_to_next_campaign("p1", "reEngagement")

    record = manager.get_record("p1")
    assert [h.campaign for h in record.history] == [CT.LEAD_GENERATION, CT.NO_RESPONSE, CT.NO_RESPONSE]
    assert record.history[1].timestamp < record.history[2].timestamp
    assert record.current_campaign is CT.RE_ENGAGEMENT
    assert record.stage == 1


# -----------------------------
# appointments
# -----------------------------
@pytest.mark.parametrize(
    "message,hour",
    [
        ("2pm please", 14),
        ("how about 2 pm", 14),
        ("4pm", 16),
        ("4 pm tomorrow", 16),
        ("tomorrow works", 15),
        ("3pm", 15),
        ("Tomorrow 2PM", 15),
    ],
)
def test_appointment_hour(message, hour):
    assert appointment_hour(message) == hour


def test_book_unknown_prospect(manager):
    assert manager.book_appointment("ghost", "2pm") is None


def test_booking_records_three_reminders(manager, make_prospect):
    manager.add_prospect(make_prospect(), CT.LEAD_GENERATION)
    appointment = manager.book_appointment("p1", "4pm")

    kinds = [r.kind for r in appointment.reminders]
    assert kinds == ["24-hour", "2-hour", "15-minute"]
    due = {r.kind: appointment.starts_at - r.due_at for r in appointment.reminders}
    assert due == {
        "24-hour": timedelta(hours=24),
        "2-hour": timedelta(hours=2),
        "15-minute": timedelta(minutes=15),
    }
    assert "4:00 PM" in appointment.reminders[0].message
    assert appointment.reminders[0].message.startswith("Hi Jane,")


def test_rebooking_cancels_previous(manager, make_prospect):
    manager.add_prospect(make_prospect(), CT.LEAD_GENERATION)
    first = manager.book_appointment("p1", "2pm")
    second = manager.book_appointment("p1", "4pm")

    assert first.status is AppointmentStatus.CANCELLED
    assert manager.get_record("p1").appointment is second
    assert second.status is AppointmentStatus.SCHEDULED


def test_cancel_appointment(manager, make_prospect):
    manager.add_prospect(make_prospect(), CT.LEAD_GENERATION)
    assert manager.cancel_appointment("p1") is None

    manager.book_appointment("p1", "3pm")
    cancelled = manager.cancel_appointment("p1")

    assert cancelled.status is AppointmentStatus.CANCELLED
    tags = manager.get_record("p1").tags
    assert "appointment_scheduled" not in tags
    assert "appointment_cancelled" in tags
    assert manager.cancel_appointment("p1") is None


def test_power_hour_booking_reply_uses_time(manager, make_prospect):
    manager.add_prospect(make_prospect(), CT.POWER_HOUR)
    result = manager.process_response("p1", "today at 4pm")
    assert result.action is ResponseAction.BOOK_APPOINTMENT
    assert "call today at 4:00 PM" in result.reply
