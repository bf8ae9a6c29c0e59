"""User Profile domain model"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class UserProfileBase(BaseModel):
    """Base user profile fields"""
    email: Optional[str] = None
    user_name: Optional[str] = None


class UserProfileCreate(UserProfileBase):
    """User profile creation model"""
    id: str  # auth user UUID as string


class UserProfileUpdate(BaseModel):
    """User profile update model"""
    user_name: Optional[str] = None


class UserProfile(UserProfileBase):
    """Complete user profile model from database"""
    model_config = ConfigDict(from_attributes=True)

    id: str  # auth user UUID as string
    created_at: Optional[datetime] = None
