from sqlalchemy import Column, Integer, String, DateTime, func
from task_manager.database import Base

class Label(Base):
    __tablename__ = "labels"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(1000), unique=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
