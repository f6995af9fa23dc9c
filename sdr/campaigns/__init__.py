"""Campaign registry."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from sdr.campaigns.followup import NO_RESPONSE, NO_SHOW, RE_ENGAGEMENT
from sdr.campaigns.intake import COLD_OFFER, LEAD_GENERATION, LIST_VALIDATION
from sdr.campaigns.reserve import HOLDING, POWER_HOUR
from sdr.models import CampaignDefinition, CampaignType

ALL_CAMPAIGNS = (
    LEAD_GENERATION,
    NO_RESPONSE,
    NO_SHOW,
    RE_ENGAGEMENT,
    LIST_VALIDATION,
    COLD_OFFER,
    POWER_HOUR,
    HOLDING,
)


def build_campaigns(definitions: Optional[Iterable[CampaignDefinition]] = None) -> Dict[CampaignType, CampaignDefinition]:
    """Fresh registry keyed by campaign type."""
    return {d.key: d for d in (definitions if definitions is not None else ALL_CAMPAIGNS)}


def validate_campaigns(registry: Dict[CampaignType, CampaignDefinition]) -> List[str]:
    """Dangling next/target references, as readable problems. Empty when sound."""
    problems: List[str] = []
    for key, definition in registry.items():
        if definition.next_campaign is not None and definition.next_campaign not in registry:
            problems.append(f"{key.value}: next campaign {definition.next_campaign.value} is not registered")
        for handler in definition.response_handlers:
            target = handler.target_campaign
            if target is not None and target not in registry:
                problems.append(f"{key.value}: handler target {target.value} is not registered")
    return problems


__all__ = ["ALL_CAMPAIGNS", "build_campaigns", "validate_campaigns"]
