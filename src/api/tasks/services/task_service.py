from typing import List, Optional
from sqlmodel import Session, select
from src.api.common.exceptions import NotFoundError
from src.api.projects.models.project import Project
from src.api.tasks.models.task import Task
from src.api.tasks.models.work_category import WorkCategory
from src.api.tasks.schemas.task import TaskCreate, TaskUpdate


class TaskService:
    def __init__(self, db: Session):
        self.db = db

    def _check_references(self, project_id: Optional[int], work_category_id: Optional[int]) -> None:
        if project_id is not None and not self.db.get(Project, project_id):
            raise NotFoundError("Project", project_id)
        if work_category_id is not None and not self.db.get(WorkCategory, work_category_id):
            raise NotFoundError("Work category", work_category_id)

    def create_task(self, task_data: TaskCreate) -> Task:
        """Create a new task"""
        self._check_references(task_data.project_id, task_data.work_category_id)
        task = Task(**task_data.model_dump())

        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        return task

    def get_task(self, task_id: int) -> Optional[Task]:
        """Get a task by ID"""
        return self.db.get(Task, task_id)

    def get_tasks_by_project(self, project_id: int, include_archived: bool = True) -> List[Task]:
        """Get all tasks for a project"""
        statement = select(Task).where(Task.project_id == project_id)
        if not include_archived:
            statement = statement.where(Task.is_archived == False)  # noqa: E712
        return self.db.exec(statement.order_by(Task.id)).all()

    def update_task(self, task_id: int, task_data: TaskUpdate) -> Optional[Task]:
        """Update a task"""
        task = self.db.get(Task, task_id)
        if not task:
            return None

        task_data_dict = task_data.model_dump(exclude_unset=True)
        self._check_references(task_data_dict.get("project_id"),
                               task_data_dict.get("work_category_id"))

        for key, value in task_data_dict.items():
            setattr(task, key, value)

        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        return task
