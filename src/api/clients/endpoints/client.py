from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
from src.api.common.utils.database import get_db
from src.api.clients.schemas.client import ClientCreate, ClientRead, ClientUpdate
from src.api.clients.services.client_service import ClientService

router = APIRouter(prefix="/clients", tags=["clients"])


def get_client_service(db: Session = Depends(get_db)):
    return ClientService(db)


@router.post("", response_model=ClientRead)
def create_client(
    client_data: ClientCreate,
    client_service: ClientService = Depends(get_client_service)
):
    """Create a new client"""
    return client_service.create_client(client_data)


@router.get("/{client_id}", response_model=ClientRead)
def get_client(
    client_id: int,
    client_service: ClientService = Depends(get_client_service)
):
    """Get a client by ID"""
    client = client_service.get_client(client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


@router.get("", response_model=List[ClientRead])
def get_clients(
    skip: int = 0,
    limit: int = 100,
    include_archived: bool = False,
    client_service: ClientService = Depends(get_client_service)
):
    """Get a list of clients"""
    return client_service.get_clients(skip, limit, include_archived)


@router.put("/{client_id}", response_model=ClientRead)
def update_client(
    client_id: int,
    client_data: ClientUpdate,
    client_service: ClientService = Depends(get_client_service)
):
    """Update a client"""
    client = client_service.update_client(client_id, client_data)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client
