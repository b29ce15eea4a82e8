from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Table, func
from task_manager.database import Base

# Tasks reference labels by id only; the services read this table explicitly.
task_labels = Table(
    "task_labels",
    Base.metadata,
    Column("task_id", Integer, ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True),
    Column("label_id", Integer, ForeignKey("labels.id"), primary_key=True),
)

class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    index = Column("index", Integer, nullable=True)       # Display position on the board
    description = Column(Text, nullable=True)
    task_status_id = Column(Integer, ForeignKey("task_statuses.id"), nullable=False)
    assignee_id = Column(Integer, ForeignKey("users.id"), nullable=True)  # Who may change it
    created_at = Column(DateTime(timezone=True), server_default=func.now())
