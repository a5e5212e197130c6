# squad/models.py

from enum import Enum

from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, Float, ForeignKey, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from squad.db import Base

# -------------------------------
# Enumerations
# -------------------------------
class Role(str, Enum):
    ADMIN = "admin"
    COACH = "coach"
    PLAYER = "player"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    EXCUSED = "excused"

# -------------------------------
# Users
# -------------------------------
class AppUser(Base):
    __tablename__ = "app_user"
    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String, unique=True, nullable=False)
    full_name = Column(String, nullable=False)
    role = Column(String, nullable=False, default=Role.PLAYER.value)
    password_hash = Column(String)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    coach_profile = relationship("Coach", back_populates="user", uselist=False)
    player_profile = relationship("Player", back_populates="user", uselist=False)

# -------------------------------
# Coaches
# -------------------------------
class Coach(Base):
    __tablename__ = "coach"
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("app_user.id", ondelete="CASCADE"), unique=True, nullable=False)
    specialization = Column(String)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("AppUser", back_populates="coach_profile")
    batches = relationship("Batch", back_populates="coach")
    notes = relationship("PerformanceNote", back_populates="coach")

# -------------------------------
# Players
# -------------------------------
class Player(Base):
    __tablename__ = "player"
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("app_user.id", ondelete="CASCADE"), unique=True, nullable=False)
    first_name = Column(String)
    last_name = Column(String)
    position = Column(String)
    date_of_birth = Column(Date)
    height = Column(Float)
    weight = Column(Float)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("AppUser", back_populates="player_profile")
    games = relationship("Game", secondary="player_game", back_populates="players", viewonly=True)
    attendance_records = relationship("SessionAttendance", back_populates="player", passive_deletes=True)
    notes = relationship("PerformanceNote", back_populates="player", passive_deletes=True)

# -------------------------------
# Games (sports) and the player <-> game association
# -------------------------------
class Game(Base):
    __tablename__ = "game"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, unique=True, nullable=False)

    players = relationship("Player", secondary="player_game", back_populates="games", viewonly=True)


class PlayerGame(Base):
    __tablename__ = "player_game"
    player_id = Column(Integer, ForeignKey("player.id", ondelete="CASCADE"), primary_key=True)
    game_id = Column(Integer, ForeignKey("game.id", ondelete="CASCADE"), primary_key=True)

# -------------------------------
# Batches and training sessions
# -------------------------------
class Batch(Base):
    __tablename__ = "batch"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    coach_id = Column(Integer, ForeignKey("coach.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    coach = relationship("Coach", back_populates="batches")
    sessions = relationship("TrainingSession", back_populates="batch")


class TrainingSession(Base):
    __tablename__ = "training_session"
    id = Column(Integer, primary_key=True, autoincrement=True)
    batch_id = Column(Integer, ForeignKey("batch.id", ondelete="CASCADE"), nullable=False)
    title = Column(String)
    session_date = Column(Date)
    location = Column(String)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    batch = relationship("Batch", back_populates="sessions")
    attendance_records = relationship("SessionAttendance", back_populates="session", passive_deletes=True)

# -------------------------------
# Attendance
# -------------------------------
class SessionAttendance(Base):
    __tablename__ = "session_attendance"
    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(Integer, ForeignKey("training_session.id", ondelete="CASCADE"), nullable=False)
    player_id = Column(Integer, ForeignKey("player.id", ondelete="CASCADE"), nullable=False)
    status = Column(String, nullable=False)  # present, absent, excused
    comments = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    session = relationship("TrainingSession", back_populates="attendance_records")
    player = relationship("Player", back_populates="attendance_records")

# -------------------------------
# Performance notes
# -------------------------------
class PerformanceNote(Base):
    __tablename__ = "performance_note"
    id = Column(Integer, primary_key=True, autoincrement=True)
    player_id = Column(Integer, ForeignKey("player.id", ondelete="CASCADE"), nullable=False)
    coach_id = Column(Integer, ForeignKey("coach.id", ondelete="SET NULL"), nullable=True)
    date = Column(Date, nullable=False)
    note = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    player = relationship("Player", back_populates="notes")
    coach = relationship("Coach", back_populates="notes")
