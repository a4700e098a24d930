# services/account_service.py
import logging
import secrets

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import config
from queries import create_user, get_user_by_credentials

logger = logging.getLogger(__name__)


class AccountError(Exception):
    pass


def signup_service(db: Session, username: str, password: str):
    if not username or not password:
        raise AccountError("Username and password are required")
    try:
        return create_user(db, username, password, role="student")
    except SQLAlchemyError as e:
        # every store failure is reported the same way
        db.rollback()
        logger.info("Signup failed for %r: %s", username, e)
        raise AccountError("User already exists")


def login_service(db: Session, username: str, password: str):
    # NOTE: plaintext comparison against the stored password
    user = get_user_by_credentials(db, username, password)
    if user is None:
        raise AccountError("Invalid credentials")
    return user


def check_teacher_credentials(teacher_id: str, password: str) -> bool:
    id_ok = secrets.compare_digest(
        (teacher_id or "").encode(), config.TEACHER_ID.encode()
    )
    pw_ok = secrets.compare_digest(
        (password or "").encode(), config.TEACHER_PASSWORD.encode()
    )
    return id_ok and pw_ok
