"""
Errors raised by the lead workflow.

Every error carries a ``context`` dict (lead id, team, filters, ...) so a
caller can report what went wrong without inspecting internal state.
"""


class WorkflowError(Exception):
    """Base class for all lead workflow errors"""

    def __init__(self, message, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def as_dict(self):
        return {'error': type(self).__name__, 'message': self.message, **self.context}


class WorkflowValidationError(WorkflowError):
    """
    Missing or contradictory input.

    Raised before any mutation; ``errors`` maps field names to messages.
    """

    def __init__(self, message='Invalid workflow payload', errors=None, **context):
        self.errors = dict(errors or {})
        super().__init__(message, errors=self.errors, **context)


class IncompleteQualificationData(WorkflowValidationError):
    """Qualification needs value tier, centre and language together"""

    def __init__(self, missing, **context):
        self.missing = sorted(missing)
        errors = {field: ['Required for qualification'] for field in self.missing}
        super().__init__(
            f"Qualification requires value_tier, centre and language; missing: {', '.join(self.missing)}",
            errors=errors,
            missing=self.missing,
            **context
        )


class NoEligibleAgent(WorkflowError):

    def __init__(self, team, filters, **context):
        self.team = team
        self.filters = filters
        super().__init__(
            f"No eligible {team} agent ({filters})",
            team=team,
            filters=filters.as_dict(),
            **context
        )


class NotFoundError(WorkflowError):
    pass


class LeadNotFound(NotFoundError):

    def __init__(self, lead_id):
        self.lead_id = lead_id
        super().__init__(f"Lead {lead_id} does not exist", lead_id=lead_id)


class StatusNotFound(NotFoundError):

    def __init__(self, slug, status_type):
        super().__init__(f"Status '{slug}' ({status_type}) is not seeded", slug=slug, status_type=status_type)


class RecorderFailure(WorkflowError):
    """
    Activity write failed.

    Never leaves the recorder: it is logged and the write is retried in the
    background.
    """
    pass
