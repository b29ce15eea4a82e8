from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional


class LabelCreate(BaseModel):
    name: str = Field(..., min_length=3, max_length=1000)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class LabelResponse(BaseModel):
    id: int
    name: str
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    model_config = {"from_attributes": True, "populate_by_name": True}
