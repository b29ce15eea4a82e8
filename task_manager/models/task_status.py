from sqlalchemy import Column, Integer, String, DateTime, func
from task_manager.database import Base

class TaskStatus(Base):
    __tablename__ = "task_statuses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=False)  # Used by clients instead of id
    created_at = Column(DateTime(timezone=True), server_default=func.now())
