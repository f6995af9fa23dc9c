"""
SDR Campaign Engine: FastAPI app.

uvicorn sdr.main:app
"""

from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request

# ───────────────────────────── Load .env early ─────────────────────────────
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
ENV_PATH = os.path.join(BASE_DIR, "..", ".env")
load_dotenv(dotenv_path=ENV_PATH, override=True)

from sdr.agent import SdrAgent  # noqa: E402
from sdr.campaign_manager import CampaignManager  # noqa: E402
from sdr.config import settings  # noqa: E402
from sdr.datastore import Repository  # noqa: E402
from sdr.locks import SweepGuard  # noqa: E402
from sdr.runtime import configure_logging, get_logger, mask_env_value  # noqa: E402
from sdr.store import ProspectStore  # noqa: E402
from sdr.webhooks import router  # noqa: E402

configure_logging()
logger = get_logger("sdr.main")


def build_agent() -> SdrAgent:
    """Agent wired from settings: Airtable mirror, Redis sweep lock when configured."""
    s = settings()
    mirror = bool(s.AIRTABLE_API_KEY and s.SDR_BASE_ID and not s.FORCE_IN_MEMORY)
    logger.info(
        "Env summary:\n"
        "• Office=%s (%s)\n"
        "• Airtable Key=%s | SDRBase=%s | Mirror=%s\n"
        "• AI=%s Key=%s Model=%s | Redis=%s",
        s.OFFICE_NAME,
        s.OFFICE_TZ,
        mask_env_value(s.AIRTABLE_API_KEY),
        s.SDR_BASE_ID or "<missing>",
        mirror,
        s.AI_ENABLED,
        mask_env_value(s.AI_API_KEY),
        s.AI_MODEL,
        bool(s.REDIS_URL),
    )
    manager = CampaignManager(
        store=ProspectStore(Repository() if mirror else None),
        sweep_guard=SweepGuard(s.REDIS_URL, ttl=s.SWEEP_LOCK_TTL),
    )
    return SdrAgent(manager)


def create_app(agent: Optional[SdrAgent] = None) -> FastAPI:
    app = FastAPI(title="SDR Campaign Engine")
    app.state.agent = agent or build_agent()
    app.include_router(router)

    @app.get("/health")
    def health(request: Request):
        manager = request.app.state.agent.manager
        return {
            "ok": True,
            "prospects": len(manager.store),
            "campaigns": len(manager.campaigns),
            "ai_enabled": request.app.state.agent.use_ai,
        }

    return app


app = create_app()
