from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class OrganizationCreate(BaseModel):
    name: str = Field(max_length=100)


class OrganizationRead(OrganizationCreate):
    id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class CoachBase(BaseModel):
    name: str = Field(max_length=100)
    email: EmailStr
    organization_id: int | None = None


class CoachCreate(CoachBase):
    pass


class CoachRead(CoachBase):
    id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class ClientBase(BaseModel):
    name: str = Field(max_length=100)
    email: EmailStr | None = None


class ClientCreate(ClientBase):
    pass


class ClientRead(ClientBase):
    id: int
    coach_id: int

    model_config = {"from_attributes": True}
