class AgencyError(Exception):
    """Base class for domain errors raised by services."""


class NotFoundError(AgencyError):
    """A referenced record does not exist."""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class BillingTypeError(AgencyError):
    """The operation requires a project with a different billing type."""

    def __init__(self, required: str, actual: str | None = None):
        self.required = required
        self.actual = actual
        super().__init__(f"Operation requires a '{required}' project"
                         + (f", got '{actual}'" if actual else ""))


class InvalidTimeEntryError(AgencyError):
    """A time entry write was rejected at the write boundary."""
