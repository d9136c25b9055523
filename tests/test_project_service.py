import pytest
from datetime import date
from pydantic import ValidationError

from src.api.common.constants.billing import BillingType, RetainerStatus
from src.api.common.exceptions import BillingTypeError, NotFoundError
from src.api.projects.schemas.project import ProjectCreate, ProjectUpdate
from src.api.projects.services.project_service import ProjectService


class TestProjectService:
    """Test ProjectService class"""

    def test_create_retainer_project(self, test_session, test_data_factory,
                                     sample_retainer_project_data):
        client = test_data_factory.create_client(test_session)
        sample_retainer_project_data["client_id"] = client.id

        project = ProjectService(test_session).create_project(
            ProjectCreate(**sample_retainer_project_data))

        assert project.id is not None
        assert project.is_retainer
        assert project.retainer_status == RetainerStatus.ACTIVE
        assert project.included_minutes_per_month == 600
        assert project.start_date == date(2025, 1, 1)
        assert project.client.currency == "EUR"

    def test_rollover_defaults_to_enabled(self, test_session, test_data_factory,
                                          sample_retainer_project_data):
        client = test_data_factory.create_client(test_session)
        sample_retainer_project_data.update(client_id=client.id, rollover_enabled=None)

        project = ProjectService(test_session).create_project(
            ProjectCreate(**sample_retainer_project_data))

        assert project.rollover_enabled is True

    def test_retainer_requires_budget(self, sample_retainer_project_data):
        sample_retainer_project_data["included_minutes_per_month"] = 0

        with pytest.raises(ValidationError):
            ProjectCreate(**sample_retainer_project_data)

    def test_t_and_m_project_drops_retainer_terms(self, test_session, test_data_factory):
        client = test_data_factory.create_client(test_session)

        project = ProjectService(test_session).create_project(ProjectCreate(
            client_id=client.id, name="Support", billing_type=BillingType.T_AND_M,
            hourly_rate=70, included_minutes_per_month=600))

        assert project.hourly_rate == 70
        assert project.included_minutes_per_month is None
        assert project.retainer_status is None

    def test_create_project_client_not_found(self, test_session, sample_retainer_project_data):
        sample_retainer_project_data["client_id"] = 999

        with pytest.raises(NotFoundError):
            ProjectService(test_session).create_project(ProjectCreate(**sample_retainer_project_data))

    def test_get_projects_by_client(self, test_session, test_data_factory):
        project = test_data_factory.create_project(test_session)
        test_data_factory.create_project(test_session)
        test_data_factory.create_project(test_session, client_id=project.client_id,
                                         name="Old", is_archived=True)
        service = ProjectService(test_session)

        assert [p.id for p in service.get_projects(client_id=project.client_id)] == [project.id]
        assert len(service.get_projects(client_id=project.client_id, include_archived=True)) == 2

    def test_get_retainer_project_errors(self, test_session, test_data_factory):
        fixed = test_data_factory.create_project(test_session, billing_type=BillingType.FIXED)
        service = ProjectService(test_session)

        with pytest.raises(NotFoundError):
            service.get_retainer_project(999)
        with pytest.raises(BillingTypeError):
            service.get_retainer_project(fixed.id)

    def test_update_retainer_terms(self, test_session, test_data_factory):
        project = test_data_factory.create_project(test_session)

        result = ProjectService(test_session).update_project(
            project.id, ProjectUpdate(included_minutes_per_month=900, rollover_enabled=False))

        assert result.included_minutes_per_month == 900
        assert result.rollover_enabled is False

    def test_update_budget_must_be_positive(self):
        with pytest.raises(ValidationError):
            ProjectUpdate(included_minutes_per_month=0)

    def test_update_retainer_terms_on_other_billing_type(self, test_session, test_data_factory):
        project = test_data_factory.create_project(test_session, billing_type=BillingType.T_AND_M)

        with pytest.raises(BillingTypeError):
            ProjectService(test_session).update_project(
                project.id, ProjectUpdate(overage_rate=120))

    def test_update_hourly_rate_on_retainer(self, test_session, test_data_factory):
        project = test_data_factory.create_project(test_session)

        with pytest.raises(BillingTypeError):
            ProjectService(test_session).update_project(project.id, ProjectUpdate(hourly_rate=70))

    def test_update_project_not_found(self, test_session):
        assert ProjectService(test_session).update_project(999, ProjectUpdate(name="X")) is None

    def test_toggle_retainer_status(self, test_session, test_data_factory):
        project = test_data_factory.create_project(test_session)
        service = ProjectService(test_session)

        assert service.toggle_retainer_status(project.id).retainer_status == RetainerStatus.INACTIVE
        assert service.toggle_retainer_status(project.id).retainer_status == RetainerStatus.ACTIVE
