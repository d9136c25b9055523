import pytest
from datetime import date
from unittest.mock import patch
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from src.api.common.constants.billing import BillingType
from src.api.common.exceptions import BillingTypeError, NotFoundError
from src.api.projects.schemas.project import ProjectUpdate
from src.api.projects.services.project_service import ProjectService
from src.api.retainers.models.retainer_period import RetainerPeriod
from src.api.retainers.services.retainer_period_service import RetainerPeriodService


@pytest.fixture
def retainer_project(test_session, test_data_factory):
    return test_data_factory.create_project(test_session)


@pytest.fixture
def retainer_task(test_session, test_data_factory, retainer_project):
    return test_data_factory.create_task(test_session, project_id=retainer_project.id)


def log_time(session, factory, task, entry_date, minutes):
    return factory.create_time_entry(session, task.id, entry_date, minutes)


class TestGetOrCreateForMonth:
    """Test lazy creation of ledger periods"""

    def test_creates_period_with_month_boundaries(self, test_session, retainer_project):
        service = RetainerPeriodService(test_session)

        period = service.get_or_create_for_month(retainer_project.id, "2025-02")

        assert period.id is not None
        assert period.project_id == retainer_project.id
        assert period.period_start == date(2025, 2, 1)
        assert period.period_end == date(2025, 2, 28)
        assert period.year_month == "2025-02"
        assert period.included_minutes == 600
        assert period.rollover_minutes == 0

    def test_second_call_returns_same_period(self, test_session, retainer_project):
        service = RetainerPeriodService(test_session)

        first = service.get_or_create_for_month(retainer_project.id, "2025-02")
        second = service.get_or_create_for_month(retainer_project.id, "2025-02")

        assert first == second
        periods = test_session.exec(select(RetainerPeriod)).all()
        assert len(periods) == 1

    def test_snapshot_is_immutable(self, test_session, retainer_project):
        service = RetainerPeriodService(test_session)
        period = service.get_or_create_for_month(retainer_project.id, "2025-02")

        with pytest.raises(ValidationError):
            period.rollover_minutes = 1000

    def test_rollover_from_previous_periods(self, test_session, test_data_factory,
                                            retainer_project, retainer_task):
        service = RetainerPeriodService(test_session)
        service.get_or_create_for_month(retainer_project.id, "2025-01")
        service.get_or_create_for_month(retainer_project.id, "2025-02")
        log_time(test_session, test_data_factory, retainer_task, date(2025, 1, 15), 200)
        log_time(test_session, test_data_factory, retainer_task, date(2025, 2, 15), 700)

        march = service.get_or_create_for_month(retainer_project.id, "2025-03")

        # January leaves 400 unused, February overran and leaves nothing
        assert march.rollover_minutes == 400

    def test_missing_periods_contribute_nothing(self, test_session, retainer_project):
        service = RetainerPeriodService(test_session)
        service.get_or_create_for_month(retainer_project.id, "2025-01")

        # February and March were never accessed
        april = service.get_or_create_for_month(retainer_project.id, "2025-04")

        assert april.rollover_minutes == 600

    def test_inherited_rollover_is_not_passed_on(self, test_session, retainer_project):
        """Only each period's own allotment counts toward later rollover"""
        service = RetainerPeriodService(test_session)
        for year_month in ["2025-01", "2025-02", "2025-03", "2025-04"]:
            service.get_or_create_for_month(retainer_project.id, year_month)

        may = service.get_or_create_for_month(retainer_project.id, "2025-05")

        assert may.rollover_minutes == 1800

    def test_rolling_window_expires_unused_minutes(self, test_session, test_data_factory,
                                                   retainer_project, retainer_task):
        service = RetainerPeriodService(test_session)
        service.get_or_create_for_month(retainer_project.id, "2025-01")
        for month in (2, 3, 4):
            log_time(test_session, test_data_factory, retainer_task, date(2025, month, 10), 600)
            service.get_or_create_for_month(retainer_project.id, f"2025-{month:02d}")

        may = service.get_or_create_for_month(retainer_project.id, "2025-05")

        assert may.rollover_minutes == 0

    def test_rollover_frozen_after_creation(self, test_session, test_data_factory,
                                            retainer_project, retainer_task):
        service = RetainerPeriodService(test_session)
        service.get_or_create_for_month(retainer_project.id, "2025-01")
        february = service.get_or_create_for_month(retainer_project.id, "2025-02")
        assert february.rollover_minutes == 600

        # Time logged late against January does not change February
        log_time(test_session, test_data_factory, retainer_task, date(2025, 1, 20), 600)

        assert service.get_or_create_for_month(retainer_project.id, "2025-02") == february

    def test_included_minutes_frozen_after_budget_change(self, test_session, retainer_project):
        service = RetainerPeriodService(test_session)
        january = service.get_or_create_for_month(retainer_project.id, "2025-01")

        ProjectService(test_session).update_project(
            retainer_project.id, ProjectUpdate(included_minutes_per_month=900))
        february = service.get_or_create_for_month(retainer_project.id, "2025-02")

        assert service.get_or_create_for_month(retainer_project.id, "2025-01") == january
        assert january.included_minutes == 600
        assert february.included_minutes == 900

    def test_used_minutes_include_archived_tasks(self, test_session, test_data_factory,
                                                 retainer_project):
        service = RetainerPeriodService(test_session)
        service.get_or_create_for_month(retainer_project.id, "2025-01")
        archived = test_data_factory.create_task(test_session, project_id=retainer_project.id,
                                                 is_archived=True)
        log_time(test_session, test_data_factory, archived, date(2025, 1, 31), 500)

        february = service.get_or_create_for_month(retainer_project.id, "2025-02")

        assert february.rollover_minutes == 100

    def test_used_minutes_ignore_other_projects(self, test_session, test_data_factory,
                                                retainer_project):
        other = test_data_factory.create_project(test_session, client_id=retainer_project.client_id)
        other_task = test_data_factory.create_task(test_session, project_id=other.id)
        log_time(test_session, test_data_factory, other_task, date(2025, 1, 10), 600)
        service = RetainerPeriodService(test_session)
        service.get_or_create_for_month(retainer_project.id, "2025-01")

        february = service.get_or_create_for_month(retainer_project.id, "2025-02")

        assert february.rollover_minutes == 600

    def test_project_not_found(self, test_session):
        service = RetainerPeriodService(test_session)

        with pytest.raises(NotFoundError):
            service.get_or_create_for_month(999, "2025-01")

    def test_requires_retainer_project(self, test_session, test_data_factory):
        project = test_data_factory.create_project(
            test_session, billing_type=BillingType.T_AND_M,
            included_minutes_per_month=None, rollover_enabled=None, start_date=None)
        service = RetainerPeriodService(test_session)

        with pytest.raises(BillingTypeError):
            service.get_or_create_for_month(project.id, "2025-01")

    def test_concurrent_insert_returns_existing_period(self, test_session, retainer_project):
        """A lost insert race resolves to the row the other writer created"""
        service = RetainerPeriodService(test_session)
        existing = RetainerPeriod(project_id=retainer_project.id, period_start=date(2025, 3, 1),
                                  period_end=date(2025, 3, 31), included_minutes=600,
                                  rollover_minutes=0)
        test_session.add(existing)
        test_session.commit()
        test_session.refresh(existing)

        real_get_period = service.get_period
        calls = []

        def get_period_missing_once(project_id, year_month):
            calls.append(year_month)
            if year_month == "2025-03" and calls.count("2025-03") == 1:
                return None
            return real_get_period(project_id, year_month)

        with patch.object(service, "get_period", side_effect=get_period_missing_once):
            period = service.get_or_create_for_month(retainer_project.id, "2025-03")

        assert period.id == existing.id
        assert len(test_session.exec(select(RetainerPeriod)).all()) == 1

    def test_unique_constraint(self, test_session, retainer_project):
        for _ in range(2):
            test_session.add(RetainerPeriod(project_id=retainer_project.id,
                                            period_start=date(2025, 3, 1),
                                            period_end=date(2025, 3, 31),
                                            included_minutes=600))
        with pytest.raises(IntegrityError):
            test_session.commit()


class TestGetUsage:
    """Test live usage figures and warnings"""

    def test_usage_of_existing_period(self, test_session, test_data_factory,
                                      retainer_project, retainer_task):
        service = RetainerPeriodService(test_session)
        service.get_or_create_for_month(retainer_project.id, "2025-01")
        service.get_or_create_for_month(retainer_project.id, "2025-02")
        log_time(test_session, test_data_factory, retainer_task, date(2025, 2, 1), 300)
        log_time(test_session, test_data_factory, retainer_task, date(2025, 2, 28), 150)

        usage = service.get_usage(retainer_project.id, "2025-02")

        assert usage.period_exists is True
        assert usage.included_minutes == 600
        assert usage.rollover_minutes == 600
        assert usage.used_minutes == 450
        assert usage.total_available == 1200
        assert usage.overage_minutes == 0
        assert usage.usage_percent == 38
        assert usage.overage_rate == 95.0
        assert not usage.warnings.usage80
        assert not usage.warnings.overage

    def test_usage_without_period_uses_live_budget(self, test_session, retainer_project):
        service = RetainerPeriodService(test_session)

        usage = service.get_usage(retainer_project.id, "2025-06")

        assert usage.period_exists is False
        assert usage.included_minutes == 600
        assert usage.rollover_minutes == 0
        assert usage.used_minutes == 0
        assert usage.usage_percent == 0
        # Reading usage never creates a period
        assert service.get_period(retainer_project.id, "2025-06") is None

    def test_usage80_warning(self, test_session, test_data_factory, retainer_project, retainer_task):
        log_time(test_session, test_data_factory, retainer_task, date(2025, 1, 10), 480)
        service = RetainerPeriodService(test_session)

        usage = service.get_usage(retainer_project.id, "2025-01")

        assert usage.usage_percent == 80
        assert usage.warnings.usage80 is True
        assert usage.warnings.overage is False

    def test_overage_warning_replaces_usage80(self, test_session, test_data_factory,
                                              retainer_project, retainer_task):
        log_time(test_session, test_data_factory, retainer_task, date(2025, 1, 10), 700)
        service = RetainerPeriodService(test_session)

        usage = service.get_usage(retainer_project.id, "2025-01")

        assert usage.overage_minutes == 100
        assert usage.usage_percent == 117
        assert usage.warnings.overage is True
        assert usage.warnings.usage80 is False

    def test_expiring_minutes(self, test_session, test_data_factory, retainer_project, retainer_task):
        service = RetainerPeriodService(test_session)
        service.get_or_create_for_month(retainer_project.id, "2025-01")
        log_time(test_session, test_data_factory, retainer_task, date(2025, 1, 10), 240)

        usage = service.get_usage(retainer_project.id, "2025-04")

        assert usage.expiring_minutes == 360
        assert usage.warnings.expiring is True

    def test_no_expiring_without_period(self, test_session, retainer_project):
        service = RetainerPeriodService(test_session)

        usage = service.get_usage(retainer_project.id, "2025-04")

        assert usage.expiring_minutes == 0
        assert usage.warnings.expiring is False

    def test_usage_with_zero_available(self, test_session, test_data_factory, retainer_project,
                                       retainer_task):
        test_session.add(RetainerPeriod(project_id=retainer_project.id,
                                        period_start=date(2025, 1, 1),
                                        period_end=date(2025, 1, 31),
                                        included_minutes=0))
        test_session.commit()
        log_time(test_session, test_data_factory, retainer_task, date(2025, 1, 10), 30)
        service = RetainerPeriodService(test_session)

        usage = service.get_usage(retainer_project.id, "2025-01")

        assert usage.usage_percent == 0
        assert usage.overage_minutes == 30
        assert usage.warnings.overage is True


class TestGetHistory:
    """Test the period history listing"""

    def test_history_newest_first(self, test_session, test_data_factory,
                                  retainer_project, retainer_task):
        service = RetainerPeriodService(test_session)
        for year_month in ["2025-01", "2025-02", "2025-03"]:
            service.get_or_create_for_month(retainer_project.id, year_month)
        log_time(test_session, test_data_factory, retainer_task, date(2025, 3, 5), 2000)

        history = service.get_history(retainer_project.id)

        assert [period.year_month for period in history] == ["2025-03", "2025-02", "2025-01"]
        assert history[0].used_minutes == 2000
        assert history[0].rollover_minutes == 1200
        assert history[0].overage_minutes == 200
        assert history[2].used_minutes == 0

    def test_history_empty(self, test_session, retainer_project):
        assert RetainerPeriodService(test_session).get_history(retainer_project.id) == []

    def test_history_project_not_found(self, test_session):
        with pytest.raises(NotFoundError):
            RetainerPeriodService(test_session).get_history(999)
