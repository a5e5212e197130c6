# squad/schemas.py

import datetime
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field

# Request bodies use the camelCase keys the frontend sends; rows go out snake_case.
_request_config = ConfigDict(populate_by_name=True)
_row_config = ConfigDict(from_attributes=True)

# -------------------------------
# Player Schemas
# -------------------------------
class PlayerOut(BaseModel):
    model_config = _row_config

    id: int
    user_id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    position: Optional[str] = None
    date_of_birth: Optional[datetime.date] = None
    height: Optional[float] = None
    weight: Optional[float] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

class PlayerUpdate(BaseModel):
    model_config = _request_config

    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    position: Optional[str] = None
    date_of_birth: Optional[datetime.date] = Field(None, alias="dateOfBirth")
    height: Optional[float] = None
    weight: Optional[float] = None
    # Game names; replaces the player's whole association list
    sports: Optional[List[str]] = None

# -------------------------------
# Attendance Schemas
# -------------------------------
class AttendanceOut(BaseModel):
    model_config = _row_config

    id: int
    session_id: int
    player_id: int
    status: str
    comments: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

class AttendanceCreate(BaseModel):
    model_config = _request_config

    session_id: Optional[int] = Field(None, alias="sessionId")
    player_id: Optional[int] = Field(None, alias="playerId")
    status: Optional[str] = None
    comments: Optional[str] = None

class AttendanceUpdate(BaseModel):
    model_config = _request_config

    status: Optional[str] = None
    comments: Optional[str] = None

# -------------------------------
# Performance Note Schemas
# -------------------------------
class PerformanceNoteOut(BaseModel):
    model_config = _row_config

    id: int
    player_id: int
    coach_id: Optional[int] = None
    date: datetime.date
    note: str
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

class PerformanceNoteCreate(BaseModel):
    model_config = _request_config

    player_id: Optional[int] = Field(None, alias="playerId")
    coach_id: Optional[int] = Field(None, alias="coachId")
    date: Optional[datetime.date] = None
    note: Optional[str] = None

class PerformanceNoteUpdate(BaseModel):
    model_config = _request_config

    date: Optional[datetime.date] = None
    note: Optional[str] = None

