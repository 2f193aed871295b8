from datetime import datetime

from beanie import Document
from typing import Optional
from pydantic import Field
from fastapi_users.db import BeanieBaseUser, BeanieUserDatabase


class User(BeanieBaseUser, Document):
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[str] = None  # ISO date as entered on the account page
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings(BeanieBaseUser.Settings):
        name = "users"

    class Config:
        json_schema_extra = {
            "example": {
                "email": "ada@example.com",
                "full_name": "Ada Obi",
                "phone_number": "+2348012345678",
            }
        }


async def get_user_db():
    yield BeanieUserDatabase(User)
