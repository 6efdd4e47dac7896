import logging

from django.utils import timezone

from apps.accounts.directory import AgentFilters, Directory
from .exceptions import NoEligibleAgent

logger = logging.getLogger(__name__)


class AssignmentEngine:
    """
    Round-robin agent selection.

    Picks the eligible agent that has gone longest without a lead
    (``last_assigned_at`` ascending, never-assigned first, ties by pk) and
    moves that agent's cursor to "now". Exactly one cursor changes per
    successful call; nothing changes when no agent is eligible.

    Two concurrent selections for the same team can read the same head
    agent before either cursor write lands. That skew is accepted unless
    the directory was built with ``lock_rows=True``.
    """

    def __init__(self, directory=None, clock=timezone.now):
        self.directory = directory or Directory()
        self.clock = clock

    def select_agent(self, team, centre=None, language=None, value_tier=None):
        """
        Args:
            team (str): User.TEAM_PRESALES or User.TEAM_SALES
            centre: Centre instance or pk (optional)
            language: Language instance or pk (optional)
            value_tier (str): 'high', 'medium' or 'low'; only narrows sales

        Returns:
            User: the selected agent, with ``last_assigned_at`` refreshed

        Raises:
            NoEligibleAgent: if no active agent matches
        """
        filters = AgentFilters.build(centre=centre, language=language, value_tier=value_tier)
        candidates = self.directory.find_agents(team, filters)

        if not candidates:
            logger.warning(f"No eligible {team} agent for {filters}")
            raise NoEligibleAgent(team, filters)

        agent = candidates[0]
        now = self.clock()
        self.directory.touch_assignment(agent.pk, now)
        agent.last_assigned_at = now

        logger.info(f"Assigned {team} agent {agent.pk} ({agent.email}) out of {len(candidates)} candidate(s) for {filters}")
        return agent
