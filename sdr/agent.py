"""
SDR agent: the entry point channels talk to.

Rules first. When no campaign rule matches (or AI is forced) the AI
responder writes the reply and the agent carries out whatever campaign
move or booking that reply implies.
"""

from __future__ import annotations

import uuid
from typing import Optional

from sdr.ai.responder import AIResponder
from sdr.campaign_manager import CampaignManager, CampaignRef
from sdr.config import settings
from sdr.models import (
    DEFAULT_REPLY,
    CampaignType,
    CommunicationRecord,
    Prospect,
    ResponseAction,
    ResponseResult,
)
from sdr.runtime import get_logger

logger = get_logger(__name__)


class SdrAgent:
    def __init__(
        self,
        manager: Optional[CampaignManager] = None,
        responder: Optional[AIResponder] = None,
        *,
        use_ai: Optional[bool] = None,
    ):
        self.manager = manager or CampaignManager()
        self.use_ai = settings().AI_ENABLED if use_ai is None else use_ai
        self._responder = responder
        logger.info("SDR agent initialized with AI %s", "enabled" if self.use_ai else "disabled")

    @property
    def responder(self) -> AIResponder:
        if self._responder is None:
            self._responder = AIResponder()
        return self._responder

    def add_prospect(self, prospect: Prospect, start_campaign: CampaignRef = CampaignType.LIST_VALIDATION) -> bool:
        logger.info("Adding new prospect: %s", prospect.full_name or prospect.id)
        return self.manager.add_prospect(prospect, start_campaign)

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------
    def respond(
        self, prospect_id: str, message: str, force_ai: bool = False, channel: str = "sms"
    ) -> Optional[ResponseResult]:
        """Full inbound handling. None only when the prospect is unknown."""
        manager = self.manager
        with manager.locks.hold(prospect_id):
            record = manager.get_record(prospect_id)
            if record is None:
                logger.error("Cannot process message, prospect %s not found", prospect_id)
                return None
            self._log_inbound(prospect_id, message, channel)

            result = None if force_ai else manager.process_response(prospect_id, message)
            if (result is None or result.action is ResponseAction.DEFAULT_REPLY) and (self.use_ai or force_ai):
                try:
                    logger.info("Using AI to generate response for %s", prospect_id)
                    result = self.responder.generate_response(prospect_id, message, record, manager.config.office_name)
                    if result.action is ResponseAction.MOVE_CAMPAIGN and result.target_campaign:
                        manager.move_to_next_campaign(prospect_id, result.target_campaign)
                    elif result.action is ResponseAction.BOOK_APPOINTMENT:
                        manager.book_appointment(prospect_id, message)
                except Exception:
                    logger.exception("AI response generation failed for %s", prospect_id)
                    result = ResponseResult(ResponseAction.DEFAULT_REPLY, DEFAULT_REPLY)

            if result is not None:
                logger.info("Responding to %s with: %r", prospect_id, result.reply)
            return result

    def process_incoming_message(self, prospect_id: str, message: str, force_ai: bool = False) -> Optional[str]:
        result = self.respond(prospect_id, message, force_ai)
        return result.reply if result else None

    def _log_inbound(self, prospect_id: str, message: str, channel: str) -> None:
        record = self.manager.get_record(prospect_id)
        p = record.data
        self.manager.store.log_communication(
            CommunicationRecord(
                id=f"comm_{uuid.uuid4().hex[:12]}",
                prospect_id=prospect_id,
                prospect_name=p.full_name,
                phone=p.phone,
                email=p.email,
                channel=channel,
                direction="inbound",
                content=message,
                timestamp=self.manager.now(),
                status="received",
                campaign=record.current_campaign,
            )
        )

    # ------------------------------------------------------------------
    # Batch entry points
    # ------------------------------------------------------------------
    def schedule_next_communications(self) -> int:
        """One ``send_next_event`` per prospect. Returns how many sent or moved."""
        sent = 0
        for record in self.manager.store.records():
            if self.manager.send_next_event(record.prospect_id):
                sent += 1
        logger.info("Scheduled next communications: %s of %s prospect(s)", sent, len(self.manager.store))
        return sent

    def process_no_shows(self) -> int:
        logger.info("Processing no-shows")
        return self.manager.check_no_shows()

    def activate_power_hour(self, count: Optional[int] = None) -> int:
        logger.info("Activating Power Hour for up to %s prospects", count or self.manager.config.power_hour_batch)
        return self.manager.activate_power_hour(count)
