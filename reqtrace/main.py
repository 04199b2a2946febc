import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from reqtrace.api.endpoints import auth
from reqtrace.api.endpoints import workspaces
from reqtrace.api.endpoints import projects
from reqtrace.api.endpoints import tasks
from reqtrace.api.endpoints import requirements
from reqtrace.api.endpoints import stakeholders
from reqtrace.core.config import Settings
from reqtrace.core.errors import AppError
from reqtrace.core.logging_config import configure_logging

settings = Settings()
configure_logging(settings)
logger = logging.getLogger(__name__)

app = FastAPI(title="reqtrace")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Todas las respuestas de error llevan {"message": ...}
@app.exception_handler(AppError)
def handle_app_error(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(StarletteHTTPException)
def handle_http_exception(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
def handle_request_validation(request: Request, exc: RequestValidationError):
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())[1:])
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return JSONResponse(status_code=400, content={"message": "; ".join(parts) or "Invalid request"})


@app.exception_handler(Exception)
def handle_unexpected(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if settings.expose_internal_errors else "Internal server error"
    return JSONResponse(status_code=500, content={"message": message})


@app.get("/")
def root():
    return {"status": "ok"}


app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(workspaces.router, prefix="/api/workspaces", tags=["workspaces"])
app.include_router(projects.router, prefix="/api/projects", tags=["projects"])
app.include_router(tasks.router, prefix="/api/tasks", tags=["tasks"])
app.include_router(requirements.router, prefix="/api/requirements", tags=["requirements"])
app.include_router(stakeholders.router, prefix="/api/stakeholders", tags=["stakeholders"])
