from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from auth import RequestContext, get_context, login_session
from db import get_db
from services.account_service import (
    AccountError,
    check_teacher_credentials,
    login_service,
    signup_service,
)
from views import render

router = APIRouter()


def _redirect(url: str):
    return RedirectResponse(url, status_code=303)


@router.get("/signup")
def signup_page(request: Request, ctx: RequestContext = Depends(get_context)):
    if ctx.is_authenticated:
        return _redirect("/detect")
    return render(request, "users/signup.html", ctx)


@router.post("/signup")
def signup(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    ctx: RequestContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    try:
        user = signup_service(db, username, password)
    except AccountError as e:
        return render(request, "users/signup.html", ctx, status_code=400, error=str(e))
    login_session(request, user)
    return _redirect("/detect")


@router.get("/login")
def login_page(request: Request, ctx: RequestContext = Depends(get_context)):
    if ctx.is_authenticated:
        return _redirect("/detect")
    return render(request, "users/login.html", ctx)


@router.post("/login")
def login(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    ctx: RequestContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    try:
        user = login_service(db, username, password)
    except AccountError as e:
        return render(request, "users/login.html", ctx, status_code=400, error=str(e))
    login_session(request, user)
    return _redirect("/detect")


@router.post("/logout")
def logout(request: Request):
    request.session.clear()
    return _redirect("/")


@router.get("/teacher-login")
def teacher_login_page(request: Request, ctx: RequestContext = Depends(get_context)):
    return render(request, "users/teacher-login.html", ctx)


@router.post("/teacher-login")
def teacher_login(
    request: Request,
    teacher_id: str = Form("", alias="teacherId"),
    password: str = Form(""),
    ctx: RequestContext = Depends(get_context),
):
    if check_teacher_credentials(teacher_id, password):
        request.session["is_teacher"] = True
        return _redirect("/teacher/students")
    return render(
        request,
        "users/teacher-login.html",
        ctx,
        status_code=400,
        error="Invalid credentials",
    )
