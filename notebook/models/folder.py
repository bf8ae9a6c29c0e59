"""Folder domain model"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class FolderBase(BaseModel):
    """Base folder fields"""
    name: str
    icon: Optional[str] = None
    color: Optional[str] = None


class FolderCreate(FolderBase):
    """Folder creation model"""
    owner_id: str


class FolderUpdate(BaseModel):
    """Folder update model - all fields optional"""
    name: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None


class Folder(FolderBase):
    """Complete folder model from database"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    created_at: datetime
