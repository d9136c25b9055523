from typing import Optional, List, TYPE_CHECKING
from sqlmodel import Field, Relationship
from src.api.common.constants.billing import DEFAULT_CLIENT_CURRENCY
from src.api.common.models.base import BaseModel, TimestampMixin
from src.api.common.utils.encryption import encrypt_data, decrypt_data

if TYPE_CHECKING:
    from src.api.projects.models.project import Project


class Client(BaseModel, TimestampMixin, table=True):
    """
    Client model with encrypted contact information
    """
    id: Optional[int] = Field(default=None, primary_key=True)

    name: str = Field(index=True)
    contact_name: Optional[str] = None

    # Encrypted contact e-mail
    encrypted_contact_email: Optional[str] = Field(default=None)

    # ISO 4217 code: EUR, USD, HUF, etc.
    currency: str = Field(default=DEFAULT_CLIENT_CURRENCY)
    is_archived: bool = Field(default=False, index=True)

    # Relationships
    projects: List["Project"] = Relationship(back_populates="client")

    @property
    def contact_email(self) -> Optional[str]:
        """Get decrypted contact e-mail"""
        if not self.encrypted_contact_email:
            return None
        return decrypt_data(self.encrypted_contact_email)

    @contact_email.setter
    def contact_email(self, value: Optional[str]):
        """Set encrypted contact e-mail"""
        self.encrypted_contact_email = encrypt_data(value) if value else None

    class Config:
        from_attributes = True
