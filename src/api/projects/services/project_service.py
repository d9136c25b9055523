from typing import List, Optional
from fastapi.logger import logger
from sqlmodel import Session, select
from src.api.common.constants.billing import BillingType, RetainerStatus
from src.api.common.exceptions import BillingTypeError, NotFoundError
from src.api.clients.models.client import Client
from src.api.projects.models.project import Project
from src.api.projects.schemas.project import ProjectCreate, ProjectUpdate

RETAINER_FIELDS = {"included_minutes_per_month",
                   "overage_rate", "rollover_enabled", "start_date"}
T_AND_M_FIELDS = {"hourly_rate"}


class ProjectService:
    def __init__(self, db: Session):
        self.db = db

    def create_project(self, project_data: ProjectCreate) -> Project:
        """Create a new project, keeping only the terms of its billing type"""
        if not self.db.get(Client, project_data.client_id):
            raise NotFoundError("Client", project_data.client_id)

        project = Project(
            client_id=project_data.client_id,
            name=project_data.name,
            billing_type=project_data.billing_type,
        )

        if project_data.billing_type == BillingType.RETAINER:
            project.retainer_status = RetainerStatus.ACTIVE
            project.included_minutes_per_month = project_data.included_minutes_per_month
            project.overage_rate = project_data.overage_rate
            project.rollover_enabled = (True if project_data.rollover_enabled is None
                                        else project_data.rollover_enabled)
            project.start_date = project_data.start_date
        elif project_data.billing_type == BillingType.T_AND_M:
            project.hourly_rate = project_data.hourly_rate

        self.db.add(project)
        self.db.commit()
        self.db.refresh(project)
        return project

    def get_project(self, project_id: int) -> Optional[Project]:
        """Get a project by ID"""
        return self.db.get(Project, project_id)

    def get_projects(self, client_id: Optional[int] = None,
                     include_archived: bool = False) -> List[Project]:
        """Get projects, optionally for a single client"""
        statement = select(Project)
        if client_id is not None:
            statement = statement.where(Project.client_id == client_id)
        if not include_archived:
            statement = statement.where(Project.is_archived == False)  # noqa: E712
        return self.db.exec(statement.order_by(Project.name)).all()

    def get_retainer_project(self, project_id: int) -> Project:
        """
        Get a project that must be billed as a retainer.

        Raises:
            NotFoundError: if the project does not exist
            BillingTypeError: if the project is not a retainer project
        """
        project = self.db.get(Project, project_id)
        if not project:
            raise NotFoundError("Project", project_id)
        if not project.is_retainer:
            raise BillingTypeError(BillingType.RETAINER.value,
                                   project.billing_type.value if project.billing_type else None)
        return project

    def update_project(self, project_id: int, project_data: ProjectUpdate) -> Optional[Project]:
        """Update a project. Contract terms only apply to their billing type."""
        project = self.db.get(Project, project_id)
        if not project:
            return None

        project_data_dict = project_data.model_dump(exclude_unset=True)

        if RETAINER_FIELDS & project_data_dict.keys() and not project.is_retainer:
            raise BillingTypeError(BillingType.RETAINER.value, project.billing_type.value)
        if T_AND_M_FIELDS & project_data_dict.keys() and project.billing_type != BillingType.T_AND_M:
            raise BillingTypeError(BillingType.T_AND_M.value, project.billing_type.value)

        if "included_minutes_per_month" in project_data_dict \
                and project_data_dict["included_minutes_per_month"] != project.included_minutes_per_month:
            # Already created retainer periods keep their own snapshot
            logger.info(
                f"Project {project_id}: monthly budget changed from "
                f"{project.included_minutes_per_month} to {project_data_dict['included_minutes_per_month']} minutes")

        for key, value in project_data_dict.items():
            setattr(project, key, value)

        self.db.add(project)
        self.db.commit()
        self.db.refresh(project)
        return project

    def toggle_retainer_status(self, project_id: int) -> Project:
        """Flip a retainer project between active and inactive"""
        project = self.get_retainer_project(project_id)
        project.retainer_status = (RetainerStatus.INACTIVE
                                   if project.retainer_status == RetainerStatus.ACTIVE
                                   else RetainerStatus.ACTIVE)
        self.db.add(project)
        self.db.commit()
        self.db.refresh(project)
        return project
