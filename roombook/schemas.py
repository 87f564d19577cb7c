"""Pydantic schemas for request payloads. Wire names are camelCase."""

import re
from datetime import date as Date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, ValidationError as PydanticValidationError

from roombook.errors import ValidationError
from roombook.utils.timeslots import to_minutes

DATE_RE = re.compile(r'^\d{4}-\d{2}-\d{2}$', re.ASCII)


def _check_date(value):
    if value is None:
        return value
    if not DATE_RE.match(value):
        raise ValueError('date must be YYYY-MM-DD')
    try:
        Date.fromisoformat(value)
    except ValueError:
        raise ValueError(f'{value} is not a calendar date')
    return value


def _check_time(value):
    if value is not None:
        try:
            to_minutes(value)
        except ValidationError as e:
            raise ValueError(e.message)
    return value


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra='ignore')


class BookingCreate(_Payload):
    title: str = Field(..., min_length=1, max_length=100)
    room_id: int = Field(..., alias='roomId')
    date: str
    start_time: str = Field(..., alias='startTime')
    end_time: str = Field(..., alias='endTime')
    description: Optional[str] = None
    responsavel: Optional[str] = None
    cafe_requested: bool = Field(False, alias='cafeRequested')
    people_count: Optional[int] = Field(None, alias='peopleCount', ge=1)
    requested_meals: Optional[str] = Field(None, alias='requestedMeals')
    requested_drinks: Optional[str] = Field(None, alias='requestedDrinks')

    @field_validator('date')
    @classmethod
    def validate_date(cls, value):
        return _check_date(value)

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_time(cls, value):
        return _check_time(value)


class BookingUpdate(_Payload):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    room_id: Optional[int] = Field(None, alias='roomId')
    date: Optional[str] = None
    start_time: Optional[str] = Field(None, alias='startTime')
    end_time: Optional[str] = Field(None, alias='endTime')
    description: Optional[str] = None
    responsavel: Optional[str] = None
    status: Optional[str] = None
    cafe_requested: Optional[bool] = Field(None, alias='cafeRequested')
    people_count: Optional[int] = Field(None, alias='peopleCount', ge=1)
    requested_meals: Optional[str] = Field(None, alias='requestedMeals')
    requested_drinks: Optional[str] = Field(None, alias='requestedDrinks')

    @field_validator('date')
    @classmethod
    def validate_date(cls, value):
        return _check_date(value)

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_time(cls, value):
        return _check_time(value)

    @field_validator('status')
    @classmethod
    def validate_status(cls, value):
        if value is not None and value not in ('confirmed', 'pending', 'cancelled'):
            raise ValueError('status must be confirmed, pending or cancelled')
        return value


class RoomCreate(_Payload):
    name: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    capacity: int = Field(..., ge=1, le=500)


class RoomUpdate(_Payload):
    name: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    capacity: Optional[int] = Field(None, ge=1, le=500)
    is_active: Optional[bool] = Field(None, alias='isActive')
    assigned_kitchen_user_id: Optional[int] = Field(None, alias='assignedKitchenUserId')


class UserRegister(_Payload):
    username: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., alias='fullName', min_length=1)
    position: str = Field(..., min_length=1)
    email: str = Field(..., pattern=r'^[^@\s]+@[^@\s]+$')


class KitchenConnect(_Payload):
    type: str
    user_id: int = Field(..., alias='userId')


def parse_payload(schema, data):
    """Validate ``data`` against ``schema`` or raise the domain ValidationError."""
    if data is None:
        raise ValidationError('No input data provided')
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        details = [
            {'field': '.'.join(str(p) for p in err['loc']), 'message': err['msg']}
            for err in e.errors()
        ]
        raise ValidationError('Invalid payload', details=details)


def patch_fields(payload):
    """Fields explicitly present in a partial update, keyed by attribute name."""
    return payload.model_dump(exclude_unset=True)
