import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lostfound.config import get_settings
from lostfound.db.db import create_db_and_tables
from lostfound.routers import auth, lost_found
from lostfound.utils.errors import AuthError, LostFoundError

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    yield


app = FastAPI(title="Campus Lost & Found", lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


# Error handlers
@app.exception_handler(LostFoundError)
async def lost_found_error_handler(request: Request, exc: LostFoundError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"error": "validation_error", "message": "Validation failed", "errors": errors},
    )


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)

    message = str(exc) if get_settings().is_development else "Something went wrong!"
    return JSONResponse(status_code=500, content={"error": "internal", "message": message})


# Register routers
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(lost_found.router, prefix="/lost-found", tags=["Lost & Found"])


@app.get("/")
def root():
    return {"status": "ok"}
