from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator
from datetime import datetime
from src.api.common.constants.billing import DEFAULT_CLIENT_CURRENCY


class ClientBase(BaseModel):
    """Base schema for client data"""
    name: str
    contact_name: Optional[str] = None
    currency: str = DEFAULT_CLIENT_CURRENCY

    model_config = ConfigDict(from_attributes=True)

    @field_validator('currency')
    def validate_currency(cls, v):
        """Currency must be a three-letter ISO code"""
        if v is None or len(v) != 3 or not v.isalpha():
            raise ValueError("Currency must be a 3-letter ISO 4217 code")
        return v.upper()


class ClientCreate(ClientBase):
    """Schema for creating a new client"""
    contact_email: Optional[str] = None  # This will be encrypted in the model

    @field_validator('name')
    def validate_name(cls, v):
        """Validate that name is not empty"""
        if not v or not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class ClientRead(ClientBase):
    """Schema for reading client data"""
    id: int
    contact_email: Optional[str] = None  # Decrypted from the model
    is_archived: bool
    created_at: datetime
    updated_at: datetime


class ClientUpdate(BaseModel):
    """Schema for updating client data"""
    name: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    currency: Optional[str] = None
    is_archived: Optional[bool] = None
