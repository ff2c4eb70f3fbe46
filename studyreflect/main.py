from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from studyreflect.api.responses import router as responses_router
from studyreflect.api.study import router as study_router
from studyreflect.api.transcribe import router as transcribe_router
from studyreflect.core.config import settings
from studyreflect.core.logging import setup_logging
from studyreflect.exceptions import InternalError, StudyReflectError

logger = setup_logging(settings.log_level)

app = FastAPI(title="StudyReflect API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(transcribe_router)
app.include_router(study_router)
app.include_router(responses_router)


@app.exception_handler(StudyReflectError)
def handle_study_reflect_error(request: Request, exc: StudyReflectError) -> JSONResponse:
    logger.warning(
        "Request failed",
        extra={"path": request.url.path, "status_code": exc.status_code, "error": exc.error},
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(Exception)
def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error", extra={"path": request.url.path}, exc_info=exc)
    error = InternalError(details=str(exc))
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


class HealthResponse(BaseModel):
    status: str
    message: str
    service: str
    version: str


@app.get("/api/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", message="Backend is running", service="api", version=app.version)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("studyreflect.main:app", host="0.0.0.0", port=settings.port)
