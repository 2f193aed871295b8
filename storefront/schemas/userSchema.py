from datetime import datetime
from typing import Optional

from beanie import PydanticObjectId
from fastapi_users import schemas
from pydantic import Field, field_validator, model_validator


class UserRead(schemas.BaseUser[PydanticObjectId]):
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True  # Pydantic v2 style for ORMs


class UserCreate(schemas.BaseUserCreate):
    full_name: str
    phone_number: Optional[str] = None
    # Only checked here, never stored
    confirm_password: Optional[str] = Field(None, exclude=True)

    @field_validator("full_name")
    @classmethod
    def full_name_required(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Please enter your first and last name")
        return value.strip()

    @model_validator(mode="after")
    def passwords_match(self):
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        return self


class UserUpdate(schemas.BaseUserUpdate):
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[str] = None

    @field_validator("full_name")
    @classmethod
    def full_name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("First and last name are required")
        return value.strip() if value is not None else value
