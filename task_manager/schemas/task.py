from pydantic import AliasChoices, BaseModel, Field, field_validator
from datetime import datetime
from typing import Any, List, Optional

# Accept both spellings; clients send "labelIds" on update and "taskLabelIds" on create
LABEL_IDS = AliasChoices("taskLabelIds", "labelIds", "label_ids")


class TaskCreate(BaseModel):
    index: Optional[int] = None
    title: str = Field(..., min_length=1)
    content: Optional[str] = None
    status: str = Field(..., min_length=1)  # task status slug
    assignee_id: Optional[int] = None
    label_ids: Optional[List[int]] = Field(None, validation_alias=LABEL_IDS)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class TaskUpdate(BaseModel):
    """
    Partial update. A field that is absent from the payload is left alone;
    an explicit null clears the nullable fields (index, content,
    assignee_id, labels) and is rejected for title and status.
    """

    index: Optional[int] = None
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = None
    status: Optional[str] = Field(None, min_length=1)
    assignee_id: Optional[int] = None
    label_ids: Optional[List[int]] = Field(None, validation_alias=LABEL_IDS)

    @field_validator("title", "status")
    @classmethod
    def required_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("must not be null")
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    def changes(self) -> dict[str, Any]:
        """Only the fields the client actually sent."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class TaskResponse(BaseModel):
    id: int
    index: Optional[int]
    title: str
    content: Optional[str]
    status: str
    assignee_id: Optional[int]
    label_ids: List[int] = Field(default_factory=list, alias="taskLabelIds")
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    model_config = {"populate_by_name": True}
