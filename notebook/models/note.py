"""Note domain model"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class NoteBase(BaseModel):
    """Base note fields"""
    title: str = ""
    content: str = ""  # serialized editor markup, opaque to the backend
    color: Optional[str] = None
    folder_id: Optional[str] = None


class NoteCreate(NoteBase):
    """Note creation model"""
    owner_id: str


class NoteUpdate(BaseModel):
    """Note update model - all fields optional"""
    title: Optional[str] = None
    content: Optional[str] = None
    color: Optional[str] = None
    folder_id: Optional[str] = None


class Note(NoteBase):
    """Complete note model from database"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    created_at: datetime
