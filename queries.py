from sqlalchemy.orm import Session
from models import User, Detection


def get_user_by_credentials(db: Session, username: str, password: str):
    # exact field match, same as the stored record
    return db.query(User).filter_by(username=username, password=password).first()


def create_user(db: Session, username: str, password: str, role: str = "student"):
    user = User(username=username, password=password, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_students(db: Session):
    return db.query(User).filter_by(role="student").order_by(User.username).all()


def save_detection(
    db: Session,
    user_id: int,
    username: str,
    label: str,
    confidence: float,
    is_compliant: bool,
):
    detection = Detection(
        user_id=user_id,
        username=username,
        label=label,
        confidence=confidence,
        is_compliant=is_compliant,
    )
    db.add(detection)
    db.commit()
    return detection


def get_recent_detections(db: Session, user_id: int, limit: int = 10):
    return (
        db.query(Detection)
        .filter(Detection.user_id == user_id)
        .order_by(Detection.created_at.desc(), Detection.id.desc())
        .limit(limit)
        .all()
    )


def get_all_detections(db: Session):
    return (
        db.query(Detection)
        .order_by(Detection.created_at.desc(), Detection.id.desc())
        .all()
    )


def get_detections_for_user(db: Session, user_id: int):
    return db.query(Detection.label, Detection.confidence, Detection.is_compliant).filter(
        Detection.user_id == user_id
    ).all()

