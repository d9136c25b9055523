from typing import TYPE_CHECKING, List, Optional
from datetime import date
from sqlmodel import Field, Relationship
from src.api.common.constants.billing import BillingType, RetainerStatus
from src.api.common.models.base import BaseModel, TimestampMixin
from src.api.clients.models.client import Client

if TYPE_CHECKING:
    from src.api.tasks.models.task import Task


class Project(BaseModel, TimestampMixin, table=True):
    """
    Project model. Retainer projects carry the monthly contract terms
    the retainer ledger bills against.
    """
    id: Optional[int] = Field(default=None, primary_key=True)

    # Client relationship
    client_id: int = Field(foreign_key="client.id", index=True)
    client: Client = Relationship(back_populates="projects")

    name: str
    billing_type: BillingType = Field(index=True)
    is_archived: bool = Field(default=False, index=True)

    # Retainer contract terms
    retainer_status: Optional[RetainerStatus] = Field(default=None)
    # Monthly budget, stored as integer minutes
    included_minutes_per_month: Optional[int] = Field(default=None)
    # Currency per hour
    overage_rate: Optional[float] = Field(default=None)
    rollover_enabled: Optional[bool] = Field(default=None)
    # Defines cycle alignment
    start_date: Optional[date] = Field(default=None)

    # T&M terms
    hourly_rate: Optional[float] = Field(default=None)

    # Relationships
    tasks: List["Task"] = Relationship(back_populates="project")

    @property
    def is_retainer(self) -> bool:
        return self.billing_type == BillingType.RETAINER

    class Config:
        from_attributes = True
        arbitrary_types_allowed = True
