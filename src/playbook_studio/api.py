from __future__ import annotations
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import Settings, cors_origins_from_env
from .dependencies.repository import close_repo
from .logging_config import configure_logging
from .routers.playbooks import router as playbooks_router
from .routers.workflows import router as workflows_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        logger.info("[lifespan] Loading configuration...")
        settings = Settings.load()
        configure_logging(settings.log_level)
        logger.info(f"[lifespan] Workflow collection: {settings.mongo_workflow_db}.{settings.mongo_workflow_collection}")
    except RuntimeError as e:
        logger.warning("[lifespan] Configuration incomplete, requests will fail until it is fixed: %s", e)

    yield
    await close_repo()
    logger.info("[lifespan] API shutting down.")


app = FastAPI(
    title="Playbook Studio",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins_from_env(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(workflows_router)
app.include_router(playbooks_router)


@app.exception_handler(RequestValidationError)
async def invalid_body_handler(request: Request, exc: RequestValidationError):
    """Malformed JSON or a body that does not fit the request model never reaches the repository."""
    logger.warning("[%s %s] Rejected request body: %s", request.method, request.url.path, exc.errors())
    return JSONResponse({"success": False, "error": "Invalid request body"}, status_code=400)


@app.get("/healthz")
def healthz():
    return {"status": "ok"}


def main() -> None:
    import uvicorn
    settings = Settings.load()
    configure_logging(settings.log_level)
    uvicorn.run("playbook_studio.api:app", host=settings.api_host, port=settings.api_port)


# ---------- Allow `python -m playbook_studio.api` to start the server ----------
if __name__ == "__main__":
    main()
