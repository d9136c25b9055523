from typing import List, Optional
from sqlmodel import Session, select
from src.api.clients.models.client import Client
from src.api.clients.schemas.client import ClientCreate, ClientUpdate


class ClientService:
    """Service class for managing clients."""

    def __init__(self, db: Session):
        self.db = db

    def create_client(self, client_data: ClientCreate) -> Client:
        """Create a new client"""
        client = Client(
            name=client_data.name,
            contact_name=client_data.contact_name,
            currency=client_data.currency,
        )
        client.contact_email = client_data.contact_email  # This will encrypt the e-mail

        self.db.add(client)
        self.db.commit()
        self.db.refresh(client)
        return client

    def get_client(self, client_id: int) -> Optional[Client]:
        """Get a client by ID"""
        return self.db.get(Client, client_id)

    def get_clients(self, skip: int = 0, limit: int = 100, include_archived: bool = False) -> List[Client]:
        """Get clients sorted by name (A to Z)"""
        statement = select(Client)
        if not include_archived:
            statement = statement.where(Client.is_archived == False)  # noqa: E712
        statement = statement.order_by(Client.name).offset(skip).limit(limit)
        return self.db.exec(statement).all()

    def update_client(self, client_id: int, client_data: ClientUpdate) -> Optional[Client]:
        """Update a client"""
        client = self.db.get(Client, client_id)
        if not client:
            return None

        client_data_dict = client_data.model_dump(exclude_unset=True)

        # Handle encrypted fields separately
        if "contact_email" in client_data_dict:
            client.contact_email = client_data_dict.pop("contact_email")
        if client_data_dict.get("currency"):
            client_data_dict["currency"] = client_data_dict["currency"].upper()

        for key, value in client_data_dict.items():
            setattr(client, key, value)

        self.db.add(client)
        self.db.commit()
        self.db.refresh(client)
        return client
