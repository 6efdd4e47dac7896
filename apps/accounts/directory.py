"""
Read-side lookups the lead workflow needs about people and statuses.

The only write here is ``touch_assignment``, which moves an agent to the
back of the round-robin queue by stamping ``last_assigned_at``.
"""

import logging
from dataclasses import dataclass, asdict
from typing import List, Optional

from django.db.models import F

from apps.core.models import Status
from .models import User

logger = logging.getLogger(__name__)


# Lead value tier -> agent qualification. Anything below "high" is served
# by low-value agents.
VALUE_TIER_QUALIFICATION = {
    'high': User.QUALIFICATION_HIGH_VALUE,
    'medium': User.QUALIFICATION_LOW_VALUE,
    'low': User.QUALIFICATION_LOW_VALUE,
}


@dataclass(frozen=True)
class AgentFilters:
    """Optional eligibility filters for an agent search."""
    centre_id: Optional[int] = None
    language_id: Optional[int] = None
    value_tier: Optional[str] = None

    @classmethod
    def build(cls, centre=None, language=None, value_tier=None):
        """Accept model instances or primary keys."""
        return cls(
            centre_id=getattr(centre, 'pk', centre),
            language_id=getattr(language, 'pk', language),
            value_tier=value_tier or None,
        )

    def as_dict(self):
        return {key: value for key, value in asdict(self).items() if value is not None}

    def __str__(self):
        return ', '.join(f'{key}={value}' for key, value in self.as_dict().items()) or 'no filters'


class Directory:
    """
    Directory Service backed by the Django ORM.

    Args:
        lock_rows (bool): read candidates with SELECT ... FOR UPDATE SKIP LOCKED.
            Only meaningful inside a transaction; serializes concurrent
            selections for the same team instead of letting two requests
            read the same "oldest" agent.
    """

    def __init__(self, lock_rows=False):
        self.lock_rows = lock_rows

    def find_agents(self, team: str, filters: AgentFilters) -> List[User]:
        """
        Active agents of ``team`` matching ``filters``, next-in-rotation first.

        Ordering: last_assigned_at ascending (never assigned first), then pk.
        """
        roles = User.TEAM_ROLES.get(team)
        if roles is None:
            raise ValueError(f"Unknown team: {team}")

        agents = User.objects.filter(is_active=True, role__in=roles)

        if filters.centre_id:
            agents = agents.filter(centre_id=filters.centre_id)

        if filters.language_id:
            agents = agents.filter(languages__id=filters.language_id)

        if filters.value_tier and team == User.TEAM_SALES:
            agents = agents.filter(qualification=VALUE_TIER_QUALIFICATION.get(filters.value_tier, User.QUALIFICATION_LOW_VALUE))

        agents = agents.order_by(F('last_assigned_at').asc(nulls_first=True), 'pk')

        if self.lock_rows:
            agents = agents.select_for_update(skip_locked=True, of=('self',))

        return list(agents)

    def touch_assignment(self, agent_id, timestamp):
        """Move the agent's rotation cursor and bump its assignment counter"""
        updated = User.objects.filter(pk=agent_id).update(
            last_assigned_at=timestamp,
            total_leads_assigned=F('total_leads_assigned') + 1,
        )
        logger.debug(f"Rotation cursor for agent {agent_id} moved to {timestamp.isoformat()}")
        return updated == 1

    def find_status(self, slug, status_type=Status.TYPE_LEAD):
        """
        Resolve a status slug to its reference record.

        Raises:
            Status.DoesNotExist: if the slug was never seeded
        """
        return Status.objects.get(type=status_type, slug=slug, is_active=True)
