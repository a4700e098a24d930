import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import RedirectResponse
from starlette.middleware.sessions import SessionMiddleware

import config
from auth import LoginRequired, RequestContext, get_context
from db import Base, engine
from infra import purge_stale_uploads
from services.classifier import UniformClassifier
from views import render

from controllers import (
    auth_controller,
    detect_controller,
    teacher_controller,
    stats_controller,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # create tables once at startup
    from models import User, Detection  # noqa: F401

    Base.metadata.create_all(bind=engine)

    # one classifier for the whole process; a failed load is final
    app.state.classifier = UniformClassifier(config.MODEL_PATH)
    await asyncio.to_thread(app.state.classifier.load)

    # sweep temp uploads a crashed request may have left behind
    await asyncio.to_thread(
        purge_stale_uploads,
        config.UPLOAD_DIR,
        max_age_seconds=config.UPLOAD_MAX_AGE_SECONDS,
    )

    async def _cleanup_loop():
        while True:
            await asyncio.sleep(3600)
            await asyncio.to_thread(
                purge_stale_uploads,
                config.UPLOAD_DIR,
                max_age_seconds=config.UPLOAD_MAX_AGE_SECONDS,
            )

    cleanup_task = asyncio.create_task(_cleanup_loop())
    try:
        yield
    finally:
        cleanup_task.cancel()


app = FastAPI(lifespan=lifespan)

# until lifespan runs, detection requests see an unloaded model
app.state.classifier = UniformClassifier(config.MODEL_PATH)

app.add_middleware(
    SessionMiddleware,
    secret_key=config.SESSION_SECRET,
    max_age=config.SESSION_MAX_AGE,
)


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    return RedirectResponse(exc.location, status_code=303)


@app.get("/")
def home(request: Request, ctx: RequestContext = Depends(get_context)):
    return render(request, "home.html", ctx)


@app.get("/health")
def health(request: Request):
    return {"status": "ok", "model": request.app.state.classifier.state.value}


# Register routers
app.include_router(auth_controller.router)
app.include_router(detect_controller.router)
app.include_router(teacher_controller.router)
app.include_router(stats_controller.router)

if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
