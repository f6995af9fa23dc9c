# sdr/ai/responder.py
from __future__ import annotations

import re
from collections import defaultdict, deque
from typing import Any, Deque, Dict, List, Optional, Tuple

from openai import OpenAI

from sdr.config import DEFAULT_OFFICE_NAME, Settings, settings
from sdr.models import DEFAULT_REPLY, CampaignType, ProspectRecord, ResponseAction, ResponseResult
from sdr.runtime import get_logger

logger = get_logger(__name__)

HISTORY_LIMIT = 10

SCHEDULING_WORDS = ("schedule", "appointment", "book", "2pm", "3pm", "4pm")
DECLINE_WORDS = ("not interested", "sorry", "apologize")


# ───────────────────────────────────────────────────────────
# Helpers
# ───────────────────────────────────────────────────────────
def determine_action(reply: str) -> Tuple[ResponseAction, Optional[CampaignType]]:
    """Infer what the model's reply is doing from its wording."""
    lowered = (reply or "").lower()
    if any(w in lowered for w in SCHEDULING_WORDS):
        return ResponseAction.OFFER_TIMES, None
    if any(w in lowered for w in DECLINE_WORDS):
        return ResponseAction.MOVE_CAMPAIGN, CampaignType.HOLDING
    return ResponseAction.DEFAULT_REPLY, None


def format_prospect_context(record: ProspectRecord) -> str:
    p = record.data
    lines = [
        f"Name: {p.first_name} {p.last_name}".rstrip(),
        f"Email: {p.email}",
        f"Phone: {p.phone}",
        f"Source: {p.source or 'Unknown'}",
        f"Campaign History: {' -> '.join(h.campaign.value for h in record.history)}",
    ]
    appointment = record.appointment
    if appointment is not None:
        lines.append(f"Appointment: {appointment.date} at {appointment.time}")
        lines.append(f"Service: {appointment.service}")
        lines.append(f"Status: {appointment.status.value}")
    return "\n".join(lines)


def build_system_prompt(record: ProspectRecord, office_name: Optional[str] = None) -> str:
    return (
        f'You are an AI assistant for a dental office named "{office_name or DEFAULT_OFFICE_NAME}".\n'
        "Your role is to respond to potential patients (prospects) in a friendly, helpful manner.\n"
        "You should focus on converting prospects into scheduled appointments.\n\n"
        f"PROSPECT INFORMATION:\n{format_prospect_context(record)}\n\n"
        f"CAMPAIGN INFORMATION:\nCurrent campaign: {record.current_campaign.value}, Stage: {record.stage}\n\n"
        "GUIDELINES:\n"
        "- Keep responses brief and conversational (2-3 sentences max)\n"
        "- Focus on scheduling an appointment when possible\n"
        '- Avoid discussing pricing details beyond mentioning "cost savings"\n'
        "- Never mislead the prospect or make false promises\n"
        "- Use emojis sparingly for a friendly tone\n"
        "- End with a question when appropriate to continue the conversation\n"
        "- If the prospect shows interest, suggest specific appointment times"
    )


def _clean_reply(text: str) -> str:
    """SMS-safe: no links, single-line whitespace."""
    text = re.sub(r"https?://\S+|www\.\S+", "", text or "")
    return re.sub(r"\s+", " ", text).strip()


# ───────────────────────────────────────────────────────────
# Responder
# ───────────────────────────────────────────────────────────
class AIResponder:
    """Free-form replies from an OpenAI-compatible chat model (DeepSeek by default).

    Keeps a short rolling conversation per prospect. Never raises: any client
    or response problem yields ``DEFAULT_REPLY`` with ``default_reply``.
    """

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
        client: Any = None,
        config: Optional[Settings] = None,
    ):
        s = config or settings()
        self.model = model or s.AI_MODEL
        self.temperature = s.AI_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or s.AI_MAX_TOKENS
        self._history: Dict[str, Deque[Dict[str, str]]] = defaultdict(lambda: deque(maxlen=HISTORY_LIMIT))
        self._client = client
        key = api_key or s.AI_API_KEY
        if self._client is None and key:
            self._client = OpenAI(api_key=key, base_url=base_url or s.AI_BASE_URL, timeout=timeout or s.AI_TIMEOUT)

    @property
    def available(self) -> bool:
        return self._client is not None

    def history(self, prospect_id: str) -> List[Dict[str, str]]:
        return list(self._history.get(prospect_id, ()))

    def generate_response(
        self,
        prospect_id: str,
        message: str,
        record: ProspectRecord,
        office_name: Optional[str] = None,
    ) -> ResponseResult:
        self._history[prospect_id].append({"role": "user", "content": message})
        if self._client is None:
            logger.warning("AI client not configured; using fallback reply for %s", prospect_id)
            return ResponseResult(ResponseAction.DEFAULT_REPLY, DEFAULT_REPLY)

        messages = [{"role": "system", "content": build_system_prompt(record, office_name)}]
        messages.extend(self._history[prospect_id])
        try:
            resp = self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
            reply = _clean_reply(resp.choices[0].message.content or "")
        except Exception:
            logger.exception("AI response failed for %s", prospect_id)
            return ResponseResult(ResponseAction.DEFAULT_REPLY, DEFAULT_REPLY)

        if not reply:
            logger.warning("AI returned an empty reply for %s", prospect_id)
            return ResponseResult(ResponseAction.DEFAULT_REPLY, DEFAULT_REPLY)

        self._history[prospect_id].append({"role": "assistant", "content": reply})
        action, target = determine_action(reply)
        return ResponseResult(action, reply, target)
