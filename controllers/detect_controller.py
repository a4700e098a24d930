import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from auth import RequestContext, require_student
from db import get_db
from queries import get_recent_detections
from services.classifier import ModelNotReady, UniformClassifier
from services.detect_service import NoImage, UploadTooLarge, process_detection
from views import render

logger = logging.getLogger(__name__)

router = APIRouter()


def get_classifier(request: Request) -> UniformClassifier:
    return request.app.state.classifier


async def get_image_field(request: Request):
    """
    Raw "image" form value: an UploadFile, a plain string, or None.
    Type checking is left to the detection service.
    """
    form = await request.form()
    try:
        yield form.get("image")
    finally:
        await form.close()


@router.get("/detect")
def detect_page(
    request: Request,
    ctx: RequestContext = Depends(require_student),
    db: Session = Depends(get_db),
):
    history = get_recent_detections(db, ctx.user_id, limit=10)
    return render(request, "detect.html", ctx, history=history)


def _handle_detection(db, classifier, ctx, image):
    try:
        return process_detection(db=db, classifier=classifier, ctx=ctx, file=image)
    except ModelNotReady as e:
        return JSONResponse({"error": str(e)}, status_code=503)
    except NoImage as e:
        return JSONResponse({"error": str(e)}, status_code=400)
    except UploadTooLarge as e:
        return JSONResponse({"error": str(e)}, status_code=413)
    except Exception:
        # decode, inference and store failures all answer the same way
        logger.exception("Detection error for user %s", ctx.username)
        return JSONResponse({"error": "Detection failed"}, status_code=500)


@router.post("/detect-image")
def detect_image(
    image=Depends(get_image_field),
    ctx: RequestContext = Depends(require_student),
    classifier: UniformClassifier = Depends(get_classifier),
    db: Session = Depends(get_db),
):
    return _handle_detection(db, classifier, ctx, image)


@router.post("/detect-frame")
def detect_frame(
    image=Depends(get_image_field),
    ctx: RequestContext = Depends(require_student),
    classifier: UniformClassifier = Depends(get_classifier),
    db: Session = Depends(get_db),
):
    return _handle_detection(db, classifier, ctx, image)
