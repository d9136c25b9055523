from typing import Dict, List, Optional
from sqlmodel import Session, select
from src.api.tasks.models.work_category import WorkCategory
from src.api.tasks.schemas.task import WorkCategoryCreate, WorkCategoryUpdate


class WorkCategoryService:
    def __init__(self, db: Session):
        self.db = db

    def create_category(self, category_data: WorkCategoryCreate) -> WorkCategory:
        """Create a new work category"""
        category = WorkCategory(name=category_data.name.strip())

        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def get_categories(self, include_archived: bool = False) -> List[WorkCategory]:
        """Get work categories sorted by name"""
        statement = select(WorkCategory)
        if not include_archived:
            statement = statement.where(WorkCategory.is_archived == False)  # noqa: E712
        return self.db.exec(statement.order_by(WorkCategory.name)).all()

    def get_category_names(self) -> Dict[int, str]:
        """Map of category ID to its current name, archived categories included"""
        return {category.id: category.name for category in self.get_categories(include_archived=True)}

    def update_category(self, category_id: int, category_data: WorkCategoryUpdate) -> Optional[WorkCategory]:
        """Update a work category"""
        category = self.db.get(WorkCategory, category_id)
        if not category:
            return None

        for key, value in category_data.model_dump(exclude_unset=True).items():
            setattr(category, key, value)

        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category
