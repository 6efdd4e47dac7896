"""
Lead status lifecycle.

    lead ──► qualified ──► won
      │          │
      └──────────┴──────► lost

Substatus (hot / warm / cif) only moves while a lead is ``qualified``.
``won`` and ``lost`` are absorbing. A trigger whose precondition does not
hold produces a skipped Transition instead of an error: callers still
record the call and the activity, the status just stays where it is.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from apps.core.models import Status
from .models import CallLog

logger = logging.getLogger(__name__)


@dataclass
class Transition:
    """Effect of one trigger on a lead; ``None`` means "leave as is"."""
    trigger: str
    status: Optional[str] = None
    substatus: Optional[str] = None
    next_call_at: Optional[datetime] = None
    cif_at: Optional[datetime] = None
    qualifies: bool = False
    skipped: bool = False
    reason: str = ''

    @property
    def changes_status(self):
        return self.status is not None or self.substatus is not None


class WorkflowStateMachine:

    # outcome -> statuses it is allowed from
    PRECONDITIONS = {
        CallLog.OUTCOME_QUALIFIED: (Status.LEAD,),
        CallLog.OUTCOME_FOLLOW_UP: (Status.LEAD, Status.QUALIFIED),
        CallLog.OUTCOME_NOT_INTERESTED: (Status.LEAD, Status.QUALIFIED),
        CallLog.OUTCOME_SITE_VISIT: (Status.QUALIFIED,),
        CallLog.OUTCOME_MEETING: (Status.QUALIFIED,),
        CallLog.OUTCOME_CIF: (Status.QUALIFIED,),
        CallLog.OUTCOME_WON: (Status.QUALIFIED,),
    }

    def _skip(self, trigger, status, allowed):
        reason = f"'{trigger}' needs status in {', '.join(allowed)}, lead is '{status}'"
        logger.info(f"Transition skipped: {reason}")
        return Transition(trigger=trigger, skipped=True, reason=reason)

    def call_outcome(self, status, connection, outcome='', next_call_at=None,
                     site_visit_at=None, meeting_at=None, cif_at=None, now=None):
        """
        Decide what a logged call does to a lead currently in ``status``.

        A call that did not connect never moves the status; it only carries
        the next call time forward.
        """
        if connection == CallLog.NOT_CONNECTED:
            if status in Status.TERMINAL_SLUGS:
                return Transition(trigger=connection, skipped=True, reason=f"lead is '{status}'")
            return Transition(trigger=connection, next_call_at=next_call_at)

        allowed = self.PRECONDITIONS.get(outcome)
        if allowed is None:
            raise ValueError(f"Unknown call outcome: {outcome}")

        if status not in allowed:
            return self._skip(outcome, status, allowed)

        if outcome == CallLog.OUTCOME_QUALIFIED:
            return self.qualification(status)

        if outcome == CallLog.OUTCOME_FOLLOW_UP:
            substatus = Status.WARM if status == Status.QUALIFIED else None
            return Transition(trigger=outcome, substatus=substatus, next_call_at=next_call_at)

        if outcome == CallLog.OUTCOME_NOT_INTERESTED:
            return Transition(trigger=outcome, status=Status.LOST)

        if outcome == CallLog.OUTCOME_SITE_VISIT:
            return Transition(trigger=outcome, substatus=Status.WARM, next_call_at=site_visit_at)

        if outcome == CallLog.OUTCOME_MEETING:
            return Transition(trigger=outcome, substatus=Status.WARM, next_call_at=meeting_at)

        if outcome == CallLog.OUTCOME_CIF:
            return Transition(trigger=outcome, substatus=Status.CIF, cif_at=cif_at or now)

        # won
        return Transition(trigger=outcome, status=Status.WON)

    def qualification(self, status):
        """Value tier, centre and language are known: hand the lead to sales"""
        if status != Status.LEAD:
            return self._skip('qualification', status, (Status.LEAD,))
        return Transition(trigger='qualification', status=Status.QUALIFIED, substatus=Status.HOT, qualifies=True)

    def disqualification(self, status):
        if status in Status.TERMINAL_SLUGS:
            return self._skip('disqualification', status, (Status.LEAD, Status.QUALIFIED))
        return Transition(trigger='disqualification', status=Status.LOST)
