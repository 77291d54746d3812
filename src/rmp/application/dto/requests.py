from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from rmp.domain.meal.entities import MealCategory
from rmp.domain.restaurant.entities import RestaurantCategory
from rmp.domain.user.entities import Role

_PHONE_PATTERN = r"^\+?[0-9]{10,15}$"


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


def _normalize_email(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


def _phone_as_text(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def _not_blank(value: str | None) -> str | None:
    if value is not None and not value.strip():
        raise ValueError("name must be non-empty")
    return value


def _within_bcrypt_limit(value: str) -> str:
    # bcrypt only accepts the first 72 bytes of the encoded password
    if len(value.encode("utf-8")) > 72:
        raise ValueError("password must be at most 72 bytes")
    return value


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class SignUpRequest(CamelBaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=8)
    role: Role = Role.USER

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: Any) -> Any:
        return _normalize_email(value)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return _not_blank(value)

    @field_validator("password")
    @classmethod
    def password_within_limit(cls, value: str) -> str:
        return _within_bcrypt_limit(value)


class LoginRequest(CamelBaseModel):
    # Passwords are compared exactly as signed up, surrounding whitespace included.
    email: EmailStr
    password: str = Field(min_length=8)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value: Any) -> Any:
        return _normalize_email(value)

    @field_validator("password")
    @classmethod
    def password_within_limit(cls, value: str) -> str:
        return _within_bcrypt_limit(value)


class CreateRestaurantRequest(CamelBaseModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    email: EmailStr
    phone_no: str = Field(pattern=_PHONE_PATTERN)
    address: str = Field(min_length=1)
    category: RestaurantCategory

    @field_validator("phone_no", mode="before")
    @classmethod
    def phone_as_text(cls, value: Any) -> Any:
        return _phone_as_text(value)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return _not_blank(value)


class UpdateRestaurantRequest(CamelBaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    email: EmailStr | None = None
    phone_no: str | None = Field(default=None, pattern=_PHONE_PATTERN)
    address: str | None = None
    category: RestaurantCategory | None = None

    @field_validator("phone_no", mode="before")
    @classmethod
    def phone_as_text(cls, value: Any) -> Any:
        return _phone_as_text(value)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str | None) -> str | None:
        return _not_blank(value)


class CreateMealRequest(CamelBaseModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    price: float = Field(ge=0)
    category: MealCategory
    restaurant: str = Field(min_length=1)

    @model_validator(mode="before")
    @classmethod
    def reject_owner(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("user") is not None:
            raise ValueError("You cannot provide a User ID.")
        return data

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        return _not_blank(value)


class UpdateMealRequest(CamelBaseModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    category: MealCategory | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str | None) -> str | None:
        return _not_blank(value)
