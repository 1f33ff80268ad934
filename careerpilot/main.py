import json
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
from starlette.exceptions import HTTPException
import sentry_sdk

from careerpilot.ai.errors import ValidationError
from careerpilot.api.v1.health import router as health_router
from careerpilot.api.v1.guidance import router as guidance_router
from careerpilot.api.v1.evaluation import router as evaluation_router
from careerpilot.api.v1.analytics import router as analytics_router
from careerpilot.core.rate_limit import limiter
from careerpilot.core.config import settings
from careerpilot.core.lifespan import lifespan
from careerpilot.integrations.github import GitHubError

logging.basicConfig(level=settings.log_level, format="%(message)s")
logger = logging.getLogger(__name__)
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="CareerPilot API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_allowed_origins),
    allow_origin_regex=(settings.cors_allow_origin_regex or "").strip() or None,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


@app.exception_handler(GitHubError)
async def github_error_handler(request: Request, exc: GitHubError):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request body") if errors else "Invalid request body"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(status_code=exc.status_code, content={"error": detail}, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(json.dumps({"event": "unhandled_error", "path": request.url.path, "error": repr(exc)}))
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(guidance_router, prefix="/v1", tags=["Guidance"])
app.include_router(evaluation_router, prefix="/v1", tags=["Evaluation"])
app.include_router(analytics_router, prefix="/v1", tags=["Analytics"])
