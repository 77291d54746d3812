from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class UserSummaryResponse(BaseModel):
    id: str
    name: str
    email: str
    role: str


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: str
    createdAt: datetime


class LoginUserResponse(BaseModel):
    name: str
    email: str
    role: str


class LoginResponse(BaseModel):
    message: str
    token: str
    user: LoginUserResponse


class MealSummaryResponse(BaseModel):
    id: str
    name: str
    description: str
    price: float
    category: str
    ownerId: str


class RestaurantResponse(BaseModel):
    id: str
    name: str
    description: str
    email: str
    phoneNo: str
    address: str
    category: str
    owner: UserSummaryResponse | None = None
    updatedBy: UserSummaryResponse | None = None
    mealIds: list[str] = Field(default_factory=list)
    meals: list[MealSummaryResponse] = Field(default_factory=list)
    createdAt: datetime
    updatedAt: datetime


class RestaurantSummaryResponse(BaseModel):
    id: str
    name: str
    category: str
    ownerId: str


class MealResponse(BaseModel):
    id: str
    name: str
    description: str
    price: float
    category: str
    restaurant: RestaurantSummaryResponse | None = None
    owner: UserSummaryResponse | None = None
    createdAt: datetime
    updatedAt: datetime


class MealListResponse(BaseModel):
    role: str
    meals: list[MealResponse] = Field(default_factory=list)


class CreateMealResponse(BaseModel):
    outcome: Literal["created", "updated"]
    mealId: str
    restaurant: RestaurantResponse


class RestaurantDeleteResponse(BaseModel):
    deleted: bool
    message: str


class MessageResponse(BaseModel):
    message: str
