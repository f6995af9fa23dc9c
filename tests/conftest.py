import os
import sys
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

# Ensure project root is in sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from sdr.campaign_manager import CampaignManager
from sdr.config import OfficeConfig, settings
from sdr.dispatcher import OutboxDispatcher
from sdr.models import Prospect

CHICAGO = ZoneInfo("America/Chicago")
# a Monday
NOW = datetime(2026, 10, 19, 10, 0, tzinfo=CHICAGO)


class FrozenClock:
    def __init__(self, now=NOW):
        self.current = now

    def __call__(self):
        return self.current

    def advance(self, **kwargs):
        self.current = self.current + timedelta(**kwargs)
        return self.current


@pytest.fixture(autouse=True)
def _reset_env():
    for key in [
        "AIRTABLE_API_KEY",
        "AIRTABLE_SDR_KEY",
        "SDR_BASE_ID",
        "AIRTABLE_SDR_BASE_ID",
        "DEEPSEEK_API_KEY",
        "OPENAI_API_KEY",
        "REDIS_URL",
        "AI_ENABLED",
        "OFFICE_NAME",
        "ASSIGNEE_FIRST_NAME",
        "ASSIGNEE_LAST_NAME",
        "ACCOUNT_PHONE_NUMBER",
    ]:
        os.environ.pop(key, None)
    os.environ["SDR_FORCE_IN_MEMORY"] = "1"
    settings.cache_clear()
    yield
    settings.cache_clear()


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def outbox():
    return OutboxDispatcher()


@pytest.fixture
def manager(clock, outbox):
    return CampaignManager(OfficeConfig(), dispatcher=outbox, clock=clock)


@pytest.fixture
def make_prospect():
    def _make(prospect_id="p1", first_name="Jane", last_name="Doe", **kwargs):
        return Prospect(
            id=prospect_id,
            first_name=first_name,
            last_name=last_name,
            email=kwargs.pop("email", f"{prospect_id}@example.com"),
            phone=kwargs.pop("phone", "+15551234567"),
            **kwargs,
        )

    return _make
