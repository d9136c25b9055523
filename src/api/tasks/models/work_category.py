from typing import Optional
from sqlmodel import Field
from src.api.common.models.base import BaseModel, TimestampMixin


class WorkCategory(BaseModel, TimestampMixin, table=True):
    """Global, admin-managed category of work (design, development, ...)"""
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    is_archived: bool = Field(default=False, index=True)

    class Config:
        from_attributes = True
