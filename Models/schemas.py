# Models/schemas.py
from pydantic import BaseModel, EmailStr, Field, confloat, conint, constr
from typing import Optional
from .car import CarStatus


class Customer(BaseModel):
    """
    Customer embedded in a car while it is reserved or sold.

    Serialized with the keys fullName, email and phoneNumber.
    """
    full_name: constr(strip_whitespace=True, min_length=1) = Field(alias="fullName")
    email: EmailStr
    phone_number: constr(pattern=r"^\d+$") = Field(alias="phoneNumber")

    class Config:
        populate_by_name = True


class CarAttributes(BaseModel):
    """
    Caller-editable car fields.

    status and picture are accepted so that boundary code can pass whatever
    it received, but the inventory store always decides both itself.
    """
    make: constr(strip_whitespace=True, min_length=1)
    model: constr(strip_whitespace=True, min_length=1)
    year: conint(ge=1900)
    price: confloat(gt=0)
    status: Optional[CarStatus] = None
    picture: Optional[str] = None


class CarResponse(BaseModel):
    id: str
    make: str
    model: str
    year: int
    price: float
    status: CarStatus
    picture: str
    customer: Optional[Customer] = None

    class Config:
        from_attributes = True
        populate_by_name = True


class InsertResult(BaseModel):
    id: str


class UpdateResult(BaseModel):
    matched_count: int = 0
    modified_count: int = 0


class DeleteResult(BaseModel):
    deleted_count: int = 0
