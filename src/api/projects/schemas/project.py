from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from src.api.common.constants.billing import BillingType, RetainerStatus


class ProjectBase(BaseModel):
    """Base schema for project data"""
    name: str
    billing_type: BillingType
    included_minutes_per_month: Optional[int] = Field(default=None, ge=0)
    overage_rate: Optional[float] = Field(default=None, ge=0)
    rollover_enabled: Optional[bool] = None
    start_date: Optional[date] = None
    hourly_rate: Optional[float] = Field(default=None, ge=0)

    model_config = ConfigDict(from_attributes=True,
                              arbitrary_types_allowed=True)


class ProjectCreate(ProjectBase):
    """Schema for creating a new project"""
    client_id: int

    @model_validator(mode="after")
    def validate_retainer_budget(self):
        """Retainer projects need a positive monthly budget"""
        if self.billing_type == BillingType.RETAINER and not self.included_minutes_per_month:
            raise ValueError(
                "Retainer projects require included_minutes_per_month greater than 0")
        return self


class ProjectRead(ProjectBase):
    """Schema for reading project data"""
    id: int
    client_id: int
    is_archived: bool
    retainer_status: Optional[RetainerStatus] = None
    created_at: datetime
    updated_at: datetime


class ProjectUpdate(BaseModel):
    """Schema for updating project data"""
    name: Optional[str] = None
    is_archived: Optional[bool] = None
    included_minutes_per_month: Optional[int] = Field(default=None, gt=0)
    overage_rate: Optional[float] = Field(default=None, ge=0)
    rollover_enabled: Optional[bool] = None
    start_date: Optional[date] = None
    hourly_rate: Optional[float] = Field(default=None, ge=0)

    model_config = ConfigDict(arbitrary_types_allowed=True)
