from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .plant import normalize


class LocationItem(BaseModel):
    id: int
    name: str
    created_at: Optional[str] = None


class LocationCreateRequest(BaseModel):
    name: str = Field(max_length=50)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = normalize(v)
        if not v:
            raise ValueError("Name cannot be empty")
        return v
