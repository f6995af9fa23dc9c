"""HTTP surface: prospect intake, inbound SMS, Retell voice events, maintenance sweeps."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from sdr.agent import SdrAgent
from sdr.models import CampaignType, Prospect, ProspectRecord
from sdr.runtime import get_logger, iso_format

logger = get_logger(__name__)

router = APIRouter()


class ProspectIn(BaseModel):
    id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    source: Optional[str] = None
    campaign: Optional[str] = None


def _agent(request: Request) -> SdrAgent:
    return request.app.state.agent


def serialize_record(record: ProspectRecord) -> Dict[str, Any]:
    p = record.data
    appointment = record.appointment
    return {
        "id": p.id,
        "first_name": p.first_name,
        "last_name": p.last_name,
        "email": p.email,
        "phone": p.phone,
        "source": p.source,
        "campaign": record.current_campaign.value,
        "stage": record.stage,
        "tags": sorted(record.tags),
        "history": [{"campaign": h.campaign.value, "timestamp": iso_format(h.timestamp)} for h in record.history],
        "appointment": None
        if appointment is None
        else {
            "id": appointment.id,
            "date": appointment.date,
            "time": appointment.time,
            "starts_at": appointment.starts_at.isoformat(),
            "status": appointment.status.value,
            "service": appointment.service,
        },
    }


# === BODY PARSING ===
async def _parse_body(request: Request) -> Dict[str, Any]:
    """Parse request body supporting both JSON and form data."""
    content_type = request.headers.get("content-type", "").lower()
    try:
        if "application/x-www-form-urlencoded" in content_type or "multipart/form-data" in content_type:
            form = await request.form()
            return {k: (v if isinstance(v, str) else str(v)) for k, v in dict(form).items()}
        body = await request.json()
        return dict(body) if isinstance(body, dict) else {}
    except Exception as exc:
        logger.warning("⚠️ Failed to parse request body: %s", exc)
        raise HTTPException(status_code=422, detail="Invalid payload")


# === PROSPECTS ===
@router.post("/prospects")
def create_prospect(payload: ProspectIn, request: Request):
    agent = _agent(request)
    campaign = payload.campaign or agent.manager.config.default_campaign
    if CampaignType.coerce(campaign) is None:
        raise HTTPException(status_code=400, detail=f"Unknown campaign {campaign!r}")

    prospect = Prospect(
        id=payload.id,
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        phone=payload.phone,
        source=payload.source,
    )
    if not agent.add_prospect(prospect, campaign):
        raise HTTPException(status_code=400, detail=f"Unknown campaign {campaign!r}")
    return {"ok": True, "prospect": serialize_record(agent.manager.get_record(prospect.id))}


@router.get("/prospects/{prospect_id}")
def get_prospect(prospect_id: str, request: Request):
    record = _agent(request).manager.get_record(prospect_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Prospect not found")
    return serialize_record(record)


# === INBOUND SMS ===
@router.post("/inbound")
async def inbound_handler(request: Request):
    """Inbound reply. Accepts {prospect_id, message} or carrier-style From/Body."""
    agent = _agent(request)
    data = await _parse_body(request)

    message = data.get("message") or data.get("Body") or data.get("body")
    if not isinstance(message, str) or not message.strip():
        raise HTTPException(status_code=422, detail="Missing message body")

    prospect_id = data.get("prospect_id")
    if prospect_id is not None and not isinstance(prospect_id, str):
        raise HTTPException(status_code=422, detail="prospect_id must be a string")
    if not prospect_id:
        record = agent.manager.store.find_by_phone(data.get("From") or data.get("from") or data.get("phone"))
        prospect_id = record.prospect_id if record else None
    if not prospect_id or agent.manager.get_record(prospect_id) is None:
        raise HTTPException(status_code=404, detail="Prospect not found")

    result = await run_in_threadpool(agent.respond, prospect_id, message)
    record = agent.manager.get_record(prospect_id)
    return {
        "ok": True,
        "prospect_id": prospect_id,
        "campaign": record.current_campaign.value,
        "stage": record.stage,
        **result.as_dict(),
    }


# === RETELL VOICE EVENTS ===
@router.post("/retell/webhook")
async def retell_webhook(request: Request):
    """Voice agent events. Always acknowledged; caller transcripts go through the agent."""
    agent = _agent(request)
    try:
        data = await _parse_body(request)
    except HTTPException:
        return {"success": False, "error": "Invalid payload"}

    event = data.get("event")
    call = data.get("call") if isinstance(data.get("call"), dict) else {}
    call_id = data.get("call_id") or call.get("call_id")

    try:
        if event == "user_response":
            metadata = data.get("metadata") or call.get("metadata") or {}
            transcript = data.get("transcript") or call.get("transcript")
            prospect_id = metadata.get("prospect_id") if isinstance(metadata, dict) else None
            if not isinstance(prospect_id, str):
                prospect_id = None
            if not isinstance(transcript, str):
                transcript = None
            if not prospect_id:
                record = agent.manager.store.find_by_phone(call.get("to_number") or data.get("to_number"))
                prospect_id = record.prospect_id if record else None
            if not (prospect_id and transcript):
                logger.warning("Retell user_response %s without prospect or transcript", call_id)
                return {"success": True}
            result = await run_in_threadpool(agent.respond, prospect_id, transcript, False, "call")
            if result is None:
                return {"success": True}
            return {"success": True, "response": result.reply}

        if event in ("call_started", "call_ended", "agent_response"):
            logger.info("Retell %s for call %s", event, call_id)
        elif event == "error":
            logger.error("Retell error for call %s: %s", call_id, data.get("error"))
        else:
            logger.warning("Unhandled Retell event %r", event)
        return {"success": True}
    except Exception as exc:
        logger.exception("Retell webhook failed for call %s", call_id)
        return {"success": False, "error": str(exc)}


# === MAINTENANCE ===
@router.post("/maintenance/no-shows")
def run_no_shows(request: Request):
    return {"ok": True, "processed": _agent(request).process_no_shows()}


@router.post("/maintenance/power-hour")
def run_power_hour(request: Request, count: Optional[int] = Query(None, ge=0)):
    return {"ok": True, "moved": _agent(request).activate_power_hour(count)}


@router.post("/maintenance/advance")
def run_advance(request: Request):
    return {"ok": True, "sent": _agent(request).schedule_next_communications()}
