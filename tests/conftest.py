import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from datetime import date
from sqlmodel import Session, SQLModel, create_engine
from sqlalchemy.pool import StaticPool
from cryptography.fernet import Fernet

# Import all models to ensure they're registered with SQLModel
from src.api.clients.models.client import Client
from src.api.projects.models.project import Project
from src.api.tasks.models.work_category import WorkCategory
from src.api.tasks.models.task import Task
from src.api.tasks.models.time_entry import TimeEntry
from src.api.retainers.models.retainer_period import RetainerPeriod
from src.api.common.constants.billing import BillingType, RetainerStatus


@pytest.fixture(scope="session")
def test_encryption_key():
    """Provide a test encryption key for testing encrypted fields"""
    return Fernet.generate_key().decode()


@pytest.fixture(scope="session", autouse=True)
def setup_test_env(test_encryption_key):
    """Setup test environment variables"""
    os.environ["ENCRYPTION_KEY"] = test_encryption_key
    os.environ["ENV"] = "test"
    yield
    # Cleanup
    if "ENCRYPTION_KEY" in os.environ:
        del os.environ["ENCRYPTION_KEY"]
    if "ENV" in os.environ:
        del os.environ["ENV"]


@pytest.fixture
def test_engine():
    """Create an in-memory SQLite database for testing"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def test_session(test_engine):
    """Create a test database session"""
    with Session(test_engine) as session:
        yield session


@pytest.fixture
def sample_client_data():
    """Sample client data for testing"""
    return {
        "name": "Acme Studio",
        "contact_name": "Jo Doe",
        "contact_email": "jo@acme.test",
        "currency": "EUR",
    }


@pytest.fixture
def sample_retainer_project_data():
    """Sample retainer project data: 10h/month, quarterly rollover"""
    return {
        "client_id": 1,  # Will be overridden in tests
        "name": "Acme Retainer",
        "billing_type": BillingType.RETAINER,
        "included_minutes_per_month": 600,
        "overage_rate": 95.0,
        "rollover_enabled": True,
        "start_date": date(2025, 1, 1),
    }


# Test data factories
class TestDataFactory:
    @staticmethod
    def create_client(session: Session, **kwargs) -> Client:
        """Create a test client"""
        data = {
            "name": "Acme Studio",
            "currency": "EUR",
        }
        data.update(kwargs)
        contact_email = data.pop("contact_email", None)

        client = Client(**data)
        client.contact_email = contact_email
        session.add(client)
        session.commit()
        session.refresh(client)
        return client

    @staticmethod
    def create_project(session: Session, client_id: int = None, **kwargs) -> Project:
        """Create a test retainer project (600 minutes/month from January 2025)"""
        if client_id is None:
            client_id = TestDataFactory.create_client(session).id

        data = {
            "client_id": client_id,
            "name": "Acme Retainer",
            "billing_type": BillingType.RETAINER,
            "retainer_status": RetainerStatus.ACTIVE,
            "included_minutes_per_month": 600,
            "overage_rate": 95.0,
            "rollover_enabled": True,
            "start_date": date(2025, 1, 1),
        }
        data.update(kwargs)

        project = Project(**data)
        session.add(project)
        session.commit()
        session.refresh(project)
        return project

    @staticmethod
    def create_category(session: Session, **kwargs) -> WorkCategory:
        """Create a test work category"""
        data = {"name": "Development"}
        data.update(kwargs)

        category = WorkCategory(**data)
        session.add(category)
        session.commit()
        session.refresh(category)
        return category

    @staticmethod
    def create_task(session: Session, project_id: int = None, **kwargs) -> Task:
        """Create a test task"""
        data = {
            "project_id": project_id,
            "title": "Homepage redesign",
        }
        data.update(kwargs)

        task = Task(**data)
        session.add(task)
        session.commit()
        session.refresh(task)
        return task

    @staticmethod
    def create_time_entry(session: Session, task_id: int, entry_date: date,
                          duration_minutes: int, **kwargs) -> TimeEntry:
        """Create a test time entry directly, bypassing write-boundary checks"""
        entry = TimeEntry(task_id=task_id, entry_date=entry_date,
                          duration_minutes=duration_minutes, **kwargs)
        session.add(entry)
        session.commit()
        session.refresh(entry)
        return entry


@pytest.fixture
def test_data_factory():
    """Provide test data factory"""
    return TestDataFactory
