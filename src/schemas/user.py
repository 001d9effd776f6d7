# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""User schemas."""
import datetime
import uuid
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class UserBase(BaseModel):
    """Base user schema."""

    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr


class UserCreate(UserBase):
    """Schema for creating a user."""

    console_user_id: Optional[str] = Field(None, max_length=64)


class UserUpdate(BaseModel):
    """Schema for updating a user (admin use)."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    console_user_id: Optional[str] = Field(None, max_length=64)


class UserResponse(BaseModel):
    """Schema for user response."""

    id: uuid.UUID
    name: str
    email: str
    console_user_id: Optional[str] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = {"from_attributes": True}
