# main.py
# ------------------------------------------------------------------------------------
#  FastAPI gateway for doodle magic:
#  - POST /magic          -> start an image transform (returns our handle)
#  - GET  /magic/status   -> poll an image transform by handle
#  - POST /video/start    -> start a video animation (returns the provider id)
#  - GET  /video/status   -> poll a video by provider id
#  - GET  /health, /me    -> liveness + model/style summary
#  - GET  /debug/config   -> runtime env (DEBUG only)
#  State:
#    * handle -> prediction id map kept in process memory (bounded by TTL/size)
#  All waiting happens on the client, which re-polls the status routes.
# ------------------------------------------------------------------------------------

import logging
from typing import Any, Optional

from fastapi import FastAPI, File, Form, Query, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from job_store import InMemoryJobStore, JobStore
from logger import setup_logging
from provider_client import ProviderClient
from settings import Settings, settings as default_settings
from styles import JobKind, catalog
from submitter import JobSubmitter, SubmissionError
from tracker import JobTracker, LookupFailed

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "generation failed"

# ---------- Schemas ----------
class StartResponse(BaseModel):
    ok: bool = True
    id: str

class StatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    status: str
    output_url: Optional[Any] = Field(None, alias="outputUrl")
    error: Optional[Any] = None

def _fail(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": error})


def create_app(
    settings: Optional[Settings] = None,
    provider: Optional[ProviderClient] = None,
    store: Optional[JobStore] = None,
) -> FastAPI:
    settings = settings or default_settings
    provider = provider or ProviderClient.from_settings(settings)
    store = store or InMemoryJobStore(ttl_sec=settings.job_ttl_sec, max_entries=settings.job_max_entries)
    tracker = JobTracker(provider, store)
    submitter = JobSubmitter(provider, tracker, settings)

    logger.info(
        "provider=%s image_model=%s video_model=%s dance_model=%s timeout=%ss job_ttl=%ss job_max=%s",
        settings.replicate_api_base, settings.image_model, settings.video_model,
        settings.video_dance_model, settings.provider_timeout_sec, settings.job_ttl_sec,
        settings.job_max_entries,
    )
    if not settings.replicate_api_token:
        logger.warning("REPLICATE_API_TOKEN is not set, every generation request will fail")

    app = FastAPI(title="Doodle Magic API", version="0.3.0")
    app.state.settings = settings
    app.state.tracker = tracker
    app.state.submitter = submitter

    @app.exception_handler(RequestValidationError)
    async def _invalid_request(request: Request, exc: RequestValidationError):
        # e.g. "image" sent as a text field instead of a file
        fields = {str(loc) for err in exc.errors() for loc in err.get("loc", ())}
        if "image" in fields:
            return _fail(400, "image required")
        return _fail(400, "invalid request")

    # In prod, tighten this list to your domains
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins.split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    async def _start(image: Optional[UploadFile], style_id: str, kind: JobKind):
        if image is None:
            return _fail(400, "image required")
        data = await image.read()
        if not data:
            return _fail(400, "image required")
        if len(data) > settings.max_upload_bytes:
            return _fail(413, "image too large")
        try:
            result = await submitter.submit(data, style_id, kind, content_type=image.content_type)
        except SubmissionError as e:
            logger.warning("%s submission failed: %s", kind.value, e)
            return _fail(502, GENERIC_FAILURE)
        return StartResponse(id=result.id)

    async def _status(job_id: str, kind: JobKind):
        if not job_id:
            return _fail(400, "id required")
        try:
            st = await tracker.resolve_status(job_id, kind)
        except LookupFailed as e:
            logger.warning("%s status for %s failed: %s", kind.value, job_id, e)
            return _fail(502, GENERIC_FAILURE)
        return StatusResponse(status=st.status, output_url=st.output, error=st.error)

    # ---------- Health ----------
    @app.get("/", response_class=PlainTextResponse)
    def index():
        return "doodle magic backend: OK"

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.get("/me")
    def me():
        return {
            "service": "backend",
            "mode": "replicate",
            "ok": True,
            "image": {"model": settings.image_model or None, "img_input_key": settings.img_input_key},
            "video": {
                "model": settings.video_model or None,
                "dance_model": settings.video_dance_model or None,
                "video_input_key": settings.video_input_key,
            },
            "styles": catalog(),
        }

    # ---------- Image ----------
    @app.post("/magic", response_model=StartResponse)
    async def start_image(image: Optional[UploadFile] = File(None), styleId: str = Form("")):
        return await _start(image, styleId, JobKind.IMAGE)

    @app.get("/magic/status", response_model=StatusResponse)
    async def image_status(id: str = Query("")):
        return await _status(id, JobKind.IMAGE)

    # ---------- Video ----------
    @app.post("/video/start", response_model=StartResponse)
    async def start_video(image: Optional[UploadFile] = File(None), styleId: str = Form("")):
        return await _start(image, styleId, JobKind.VIDEO)

    @app.get("/video/status", response_model=StatusResponse)
    async def video_status(id: str = Query("")):
        return await _status(id, JobKind.VIDEO)

    # ---------- Debug (hide in prod) ----------
    if settings.debug:
        @app.get("/debug/config")
        def debug_config():
            return {
                "REPLICATE_API_BASE": settings.replicate_api_base,
                "REPLICATE_API_TOKEN_SET": bool(settings.replicate_api_token),
                "REPLICATE_IMAGE_MODEL": settings.image_model,
                "REPLICATE_VIDEO_MODEL": settings.video_model,
                "REPLICATE_VIDEO_DANCE_MODEL": settings.video_dance_model,
                "PROVIDER_TIMEOUT_SEC": settings.provider_timeout_sec,
                "JOB_TTL_SEC": settings.job_ttl_sec,
                "JOB_MAX_ENTRIES": settings.job_max_entries,
            }

    return app


setup_logging(default_settings.log_level)
app = create_app()

if __name__ == "__main__":
    import uvicorn

    logger.info("listening on 0.0.0.0:%s", default_settings.port)
    uvicorn.run(app, host="0.0.0.0", port=default_settings.port)
