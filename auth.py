# auth.py
from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, Request


class LoginRequired(Exception):
    """Raised by a session gate; the app answers with a redirect to `location`."""

    def __init__(self, location: str):
        super().__init__(location)
        self.location = location


@dataclass(frozen=True)
class RequestContext:
    user_id: Optional[int] = None
    username: Optional[str] = None
    is_teacher: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


def get_context(request: Request) -> RequestContext:
    user = request.session.get("user") or {}
    return RequestContext(
        user_id=user.get("id"),
        username=user.get("username"),
        is_teacher=bool(request.session.get("is_teacher", False)),
    )


def login_session(request: Request, user):
    request.session["user"] = {"id": user.id, "username": user.username}


def require_student(ctx: RequestContext = Depends(get_context)) -> RequestContext:
    if not ctx.is_authenticated:
        raise LoginRequired("/login")
    return ctx


def require_teacher(ctx: RequestContext = Depends(get_context)) -> RequestContext:
    if not ctx.is_teacher:
        raise LoginRequired("/teacher-login")
    return ctx
