from types import SimpleNamespace

import pytest

from sdr.ai.responder import AIResponder, HISTORY_LIMIT, _clean_reply, build_system_prompt, determine_action
from sdr.models import DEFAULT_REPLY, CampaignType, ProspectRecord, ResponseAction


class FakeCompletions:
    def __init__(self, replies=None, exc=None):
        self.replies = list(replies or [])
        self.exc = exc
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.exc is not None:
            raise self.exc
        content = self.replies.pop(0) if self.replies else "Happy to help! Does 2pm tomorrow work?"
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


@pytest.fixture
def record(make_prospect):
    return ProspectRecord(data=make_prospect(source="Facebook"), current_campaign=CampaignType.LEAD_GENERATION, stage=2)


@pytest.mark.parametrize(
    "reply,expected",
    [
        ("Would 3pm tomorrow work?", (ResponseAction.OFFER_TIMES, None)),
        ("Let's book a time to chat", (ResponseAction.OFFER_TIMES, None)),
        ("Sorry to hear that. Take care!", (ResponseAction.MOVE_CAMPAIGN, CampaignType.HOLDING)),
        ("I understand you're not interested.", (ResponseAction.MOVE_CAMPAIGN, CampaignType.HOLDING)),
        ("Great question! Our plan covers cleanings.", (ResponseAction.DEFAULT_REPLY, None)),
    ],
)
def test_determine_action(reply, expected):
    assert determine_action(reply) == expected


def test_scheduling_wins_over_decline_words():
    assert determine_action("Sorry! Can we schedule for 4pm?") == (ResponseAction.OFFER_TIMES, None)


def test_system_prompt_carries_prospect_and_campaign(record):
    prompt = build_system_prompt(record, "Lakeside Dental")
    assert 'dental office named "Lakeside Dental"' in prompt
    assert "Name: Jane Doe" in prompt
    assert "Source: Facebook" in prompt
    assert "Current campaign: leadGeneration, Stage: 2" in prompt
    assert "Appointment:" not in prompt


def test_clean_reply_strips_links_and_newlines():
    assert _clean_reply("Hi!\n\nSee https://example.com/x  now") == "Hi! See now"


def test_generate_response_uses_model_settings(record):
    completions = FakeCompletions(["Sounds good, does 2pm work?"])
    responder = AIResponder(client=_client(completions), model="deepseek-chat", temperature=0.2, max_tokens=90)

    result = responder.generate_response("p1", "what does it cover?", record, "Lakeside Dental")

    assert result.reply == "Sounds good, does 2pm work?"
    assert result.action is ResponseAction.OFFER_TIMES
    call = completions.calls[0]
    assert call["model"] == "deepseek-chat"
    assert call["temperature"] == 0.2
    assert call["max_tokens"] == 90
    assert call["messages"][0]["role"] == "system"
    assert call["messages"][-1] == {"role": "user", "content": "what does it cover?"}


def test_history_is_capped(record):
    responder = AIResponder(client=_client(FakeCompletions()))
    for i in range(8):
        responder.generate_response("p1", f"message {i}", record)

    history = responder.history("p1")
    assert len(history) == HISTORY_LIMIT
    assert history[-1]["role"] == "assistant"
    assert history[-2] == {"role": "user", "content": "message 7"}
    assert responder.history("other") == []


def test_history_is_per_prospect(record):
    responder = AIResponder(client=_client(FakeCompletions()))
    responder.generate_response("p1", "hello", record)
    responder.generate_response("p2", "hi", record)
    assert [m["content"] for m in responder.history("p2")][0] == "hi"
    assert len(responder.history("p1")) == 2


def test_client_failure_falls_back(record):
    responder = AIResponder(client=_client(FakeCompletions(exc=RuntimeError("timeout"))))
    result = responder.generate_response("p1", "hello", record)
    assert result.action is ResponseAction.DEFAULT_REPLY
    assert result.reply == DEFAULT_REPLY


def test_empty_reply_falls_back(record):
    responder = AIResponder(client=_client(FakeCompletions(["   "])))
    assert responder.generate_response("p1", "hello", record).reply == DEFAULT_REPLY


def test_without_api_key_falls_back(record):
    responder = AIResponder()
    assert responder.available is False
    result = responder.generate_response("p1", "hello", record)
    assert result.reply == DEFAULT_REPLY
    assert responder.history("p1") == [{"role": "user", "content": "hello"}]


def test_openai_client_built_from_settings(monkeypatch):
    built = {}

    class FakeOpenAI:
        def __init__(self, **kwargs):
            built.update(kwargs)

    monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-test")
    monkeypatch.setattr("sdr.ai.responder.OpenAI", FakeOpenAI)

    responder = AIResponder()

    assert responder.available is True
    assert built["api_key"] == "sk-test"
    assert built["base_url"] == "https://api.deepseek.com"
