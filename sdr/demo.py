"""
Walk a few prospects through the campaign engine and print what happens.

    python -m sdr.demo journey
    python -m sdr.demo no-shows
    python -m sdr.demo power-hour
"""

from __future__ import annotations

import argparse
from datetime import timedelta
from typing import Optional

from sdr.campaign_manager import CampaignManager
from sdr.config import OfficeConfig
from sdr.dispatcher import OutboxDispatcher
from sdr.models import CampaignType, Prospect


def _manager(office_name: str = "Gentle Dental Care") -> CampaignManager:
    return CampaignManager(OfficeConfig(office_name=office_name), dispatcher=OutboxDispatcher())


def simulate_response(manager: CampaignManager, prospect_id: str, message: str) -> None:
    print(f'\n[PROSPECT] Responding: "{message}"')
    result = manager.process_response(prospect_id, message)
    if result is None:
        print("[SYSTEM] Error: No response generated")
        return
    print(f'[SDR] {result.action.value}: "{result.reply}"')
    if result.target_campaign:
        print(f"[SYSTEM] Moving to campaign: {result.target_campaign.value}")


def run_demonstration(manager: Optional[CampaignManager] = None) -> CampaignManager:
    print("\n========= DENTAL PRACTICE CAMPAIGN AUTOMATION DEMO =========\n")
    manager = manager or _manager()
    print(f'Campaign manager initialized for "{manager.config.office_name}"\n')

    prospect = Prospect(
        id="prospect_123",
        first_name="John",
        last_name="Smith",
        email="john.smith@example.com",
        phone="+15551234567",
        source="cold_list",
    )
    print(f"Adding prospect: {prospect.full_name} ({prospect.email})")
    manager.add_prospect(prospect, CampaignType.LIST_VALIDATION)
    print(f"Initial campaign: {manager.get_record(prospect.id).current_campaign.value}")

    simulate_response(manager, prospect.id, "Yes, this is John")
    simulate_response(manager, prospect.id, "Yes, I'm interested in learning more about the dental coverage")
    simulate_response(manager, prospect.id, "Tomorrow at 3pm works for me")

    record = manager.get_record(prospect.id)
    print("\n========= PROSPECT JOURNEY SUMMARY =========\n")
    print(f"Office: {manager.config.office_name}")
    print(f"Current campaign: {record.current_campaign.value}")
    print(f"Campaign stage: {record.stage}")
    print(f"Journey history: {' -> '.join(h.campaign.value for h in record.history)}")
    appointment = record.appointment
    print(f"Has appointment: {'Yes' if appointment else 'No'}")
    if appointment:
        print(f"Appointment: {appointment.date} at {appointment.time}")
        print(f"Service: {appointment.service}")
        print(f"Status: {appointment.status.value}")
    print(f"Tags: {', '.join(sorted(record.tags))}")
    return manager


def simulate_no_shows(manager: Optional[CampaignManager] = None) -> int:
    print("\n========= NO-SHOW PROCESSING DEMO =========\n")
    manager = manager or _manager()
    prospect = Prospect(
        id="prospect_456",
        first_name="Jane",
        last_name="Doe",
        email="jane.doe@example.com",
        phone="+15559876543",
        source="web_form",
    )
    manager.add_prospect(prospect, CampaignType.LEAD_GENERATION)
    result = manager.process_response(prospect.id, "3pm tomorrow works great")
    print(f"Booking response: {result.reply if result else None}")

    appointment = manager.get_record(prospect.id).appointment
    if appointment is None:
        return 0
    # back-date the booking so the sweep sees it as missed
    appointment.starts_at = manager.now().replace(hour=15, minute=0, second=0, microsecond=0) - timedelta(days=1)
    print(f"Appointment set to yesterday ({appointment.date}) to simulate no-show")

    count = manager.check_no_shows()
    print(f"Processed {count} no-shows")
    print(f"Prospect moved to campaign: {manager.get_record(prospect.id).current_campaign.value}")
    return count


def simulate_power_hour(manager: Optional[CampaignManager] = None, count: int = 5) -> int:
    print("\n========= POWER HOUR DEMO =========\n")
    manager = manager or _manager()
    for i in range(1, 11):
        manager.add_prospect(
            Prospect(
                id=f"holding_{i}",
                first_name=f"Patient{i}",
                last_name="Test",
                email=f"patient{i}@example.com",
                phone=f"+1555000{i:04d}",
            ),
            CampaignType.HOLDING,
        )
    print(f"Added 10 prospects to holding; activating Power Hour for {count}")
    moved = manager.activate_power_hour(count)
    print(f"Moved {moved} prospects to Power Hour")
    for record in manager.store.in_campaign(CampaignType.POWER_HOUR):
        print(f"  {record.prospect_id}: stage {record.stage}")
    return moved


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(description="SDR campaign engine demo")
    parser.add_argument("scenario", nargs="?", default="journey", choices=["journey", "no-shows", "power-hour"])
    parser.add_argument("--office", default="Gentle Dental Care")
    parser.add_argument("--count", type=int, default=5, help="Power Hour batch size")
    args = parser.parse_args(argv)

    manager = _manager(args.office)
    if args.scenario == "journey":
        run_demonstration(manager)
    elif args.scenario == "no-shows":
        simulate_no_shows(manager)
    else:
        simulate_power_hour(manager, args.count)


if __name__ == "__main__":
    main()
