from typing import TYPE_CHECKING, List, Optional
from sqlmodel import Field, Relationship
from src.api.common.models.base import BaseModel, TimestampMixin
from src.api.tasks.models.work_category import WorkCategory
from src.api.tasks.models.time_entry import TimeEntry

if TYPE_CHECKING:
    from src.api.projects.models.project import Project


class Task(BaseModel, TimestampMixin, table=True):
    """
    Unit of work time is logged against
    """
    id: Optional[int] = Field(default=None, primary_key=True)

    # A task must have a project before time can be logged on it
    project_id: Optional[int] = Field(default=None, foreign_key="project.id", index=True)
    project: Optional["Project"] = Relationship(back_populates="tasks")

    title: str
    # Plain text excerpt shown to the client in the retainer statement
    client_update_text: Optional[str] = None

    # Category is resolved live, never copied onto time entries
    work_category_id: Optional[int] = Field(
        default=None, foreign_key="workcategory.id", index=True)
    work_category: Optional[WorkCategory] = Relationship()

    is_archived: bool = Field(default=False, index=True)

    time_entries: List[TimeEntry] = Relationship(back_populates="task")

    class Config:
        from_attributes = True
        arbitrary_types_allowed = True
