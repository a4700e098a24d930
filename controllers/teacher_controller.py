from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from auth import RequestContext, require_teacher
from db import get_db
from services.roster_service import get_roster_service
from views import render

router = APIRouter()


@router.get("/teacher/students")
def teacher_students(
    request: Request,
    q: Optional[str] = Query(None, description="Filter students by username"),
    ctx: RequestContext = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    roster = get_roster_service(db, q)
    return render(request, "users/teacher-students.html", ctx, roster=roster, q=q or "")
