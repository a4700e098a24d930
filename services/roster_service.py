# services/roster_service.py
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session
from queries import get_students, get_all_detections


def _recency_key(detection):
    return (detection.created_at or datetime.min, detection.id or 0)


def latest_detection_by_user(detections) -> dict:
    """
    Group detections by user_id and keep the most recent one per user.
    The winner is decided by (created_at, id), not by input order.
    """
    latest = {}
    for d in detections:
        current = latest.get(d.user_id)
        if current is None or _recency_key(d) > _recency_key(current):
            latest[d.user_id] = d
    return latest


def get_roster_service(db: Session, q: Optional[str] = None):
    students = get_students(db)
    if q:
        needle = q.strip().lower()
        students = [s for s in students if needle in s.username.lower()]

    latest = latest_detection_by_user(get_all_detections(db))
    return [{"student": s, "latest": latest.get(s.id)} for s in students]
