from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from db import get_db
from auth import RequestContext, require_student
from services.stats_service import get_stats_service

router = APIRouter()

@router.get("/stats")
def get_stats(ctx: RequestContext = Depends(require_student), db: Session = Depends(get_db)):
    return get_stats_service(ctx.user_id, db)
