import pytest

from sdr import runtime
from sdr.runtime import iso_format, last_10_digits, mask_env_value, retry

from conftest import NOW


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, "<missing>"),
        ("", "<missing>"),
        ("abc", "***"),
        ("abcdefg", "ab...fg"),
        ("keyABCDEFGH1234", "keyA...1234"),
    ],
)
def test_mask_env_value(value, expected):
    assert mask_env_value(value) == expected


def test_last_10_digits():
    assert last_10_digits("+1 (555) 123-4567") == "5551234567"
    assert last_10_digits("555-1234") is None
    assert last_10_digits(None) is None


def test_iso_format_converts_to_utc():
    assert iso_format(NOW) == "2026-10-19T15:00:00Z"


def test_retry_reraises_after_budget(monkeypatch):
    sleeps = []
    monkeypatch.setattr(runtime.time, "sleep", sleeps.append)
    calls = []

    def flaky():
        calls.append(1)
        raise ConnectionError("reset")

    with pytest.raises(ConnectionError):
        retry(flaky, retries=2, base_delay=0.5, exceptions=(ConnectionError,))
    assert len(calls) == 3
    assert sleeps == [0.5, 1.0]


def test_retry_does_not_catch_other_errors():
    def broken():
        raise ValueError("bad")

    with pytest.raises(ValueError):
        retry(broken, exceptions=(ConnectionError,))


def test_build_agent_logs_masked_credentials(monkeypatch, caplog):
    from sdr.main import build_agent

    monkeypatch.setenv("AIRTABLE_API_KEY", "keyABCDEFGH1234")
    monkeypatch.setenv("SDR_BASE_ID", "appBase")
    monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-secretvalue99")
    caplog.set_level("INFO", logger="sdr.main")

    agent = build_agent()

    assert agent.manager.store.repository is None
    assert "keyA...1234" in caplog.text
    assert "sk-s...ue99" in caplog.text
    assert "keyABCDEFGH1234" not in caplog.text
    assert "sk-secretvalue99" not in caplog.text
