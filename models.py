# models.py

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Float, Boolean, ForeignKey
from db import Base


class User(Base):
    """
    Student account. Teachers are not stored here; the teacher flag
    only ever lives in the session.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, nullable=False)
    password = Column(String, nullable=False)
    role = Column(String, nullable=False, default="student")


class Detection(Base):
    """
    One classifier result for one uploaded photo. Append-only.
    """
    __tablename__ = "detections"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True)
    username = Column(String)
    label = Column(String, nullable=False)
    confidence = Column(Float, nullable=False)
    is_compliant = Column(Boolean, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
