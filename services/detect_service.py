# services/detect_service.py
import os
import logging
import tempfile

from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

import config
from auth import RequestContext
from queries import save_detection
from services.classifier import UniformClassifier, DetectionFailed, ModelNotReady

logger = logging.getLogger(__name__)

CHUNK = 1 * 1024 * 1024  # 1 MB


class NoImage(Exception):
    pass


class UploadTooLarge(Exception):
    pass


def _write_upload_with_cap(upload_file, dst, max_bytes: int):
    """Stream an UploadFile into `dst` with a hard size cap."""
    total = 0
    while True:
        chunk = upload_file.file.read(CHUNK)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise UploadTooLarge("File too large")
        dst.write(chunk)


def _remove_quietly(path: str):
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Failed to delete temp upload %s: %s", path, e)


def process_detection(
    db: Session,
    classifier: UniformClassifier,
    ctx: RequestContext,
    file=None,  # UploadFile, or whatever the "image" form field held
):
    if not classifier.ready:
        raise ModelNotReady("Model not ready")
    if not isinstance(file, UploadFile) or not file.filename:
        raise NoImage("No image")

    os.makedirs(config.UPLOAD_DIR, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=config.UPLOAD_DIR, prefix="upload-")
    try:
        with os.fdopen(fd, "wb") as out:
            _write_upload_with_cap(file, out, config.MAX_UPLOAD_BYTES)

        with open(tmp_path, "rb") as f:
            data = f.read()

        result = classifier.predict(data)
        try:
            save_detection(
                db,
                user_id=ctx.user_id,
                username=ctx.username,
                label=result["label"],
                confidence=result["confidence"],
                is_compliant=result["is_compliant"],
            )
        except Exception as e:
            db.rollback()
            raise DetectionFailed("Could not save detection") from e
    finally:
        _remove_quietly(tmp_path)

    return {"label": result["label"], "confidence": result["confidence"]}
