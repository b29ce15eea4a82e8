from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator
from email_validator import EmailNotValidError, validate_email
from typing import Any, Optional
from datetime import datetime

class UserCreate(BaseModel):
    email: EmailStr
    first_name: Optional[str] = Field(None, max_length=100, validation_alias=AliasChoices("firstName", "first_name"))
    last_name: Optional[str] = Field(None, max_length=100, validation_alias=AliasChoices("lastName", "last_name"))
    password: str = Field(..., min_length=3, max_length=72)

class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, max_length=100, validation_alias=AliasChoices("firstName", "first_name"))
    last_name: Optional[str] = Field(None, max_length=100, validation_alias=AliasChoices("lastName", "last_name"))
    password: Optional[str] = Field(None, min_length=3, max_length=72)

    @field_validator("email", "password")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v

    def changes(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.model_fields_set}

class UserResponse(BaseModel):
    id: int
    email: EmailStr
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    model_config = {"from_attributes": True, "populate_by_name": True}  # ✅ Pydantic v2 style

class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("username")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        # Stored emails went through EmailStr, which lowercases the domain
        try:
            return validate_email(v, check_deliverability=False).normalized
        except EmailNotValidError:
            return v
