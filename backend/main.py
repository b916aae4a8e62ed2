from dotenv import load_dotenv
load_dotenv()

import logging
import traceback

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from database import Store, get_store

# ENV
from config.env import (
    ENV,
    LOG_LEVEL,
    DATABASE_URL,
    CORS_ALLOWED_ORIGINS,
    validate_production_env,
)

# ROUTES
from routes.listings import router as listings_router
from routes.sellers import router as sellers_router
from routes.profile import router as profile_router
from routes.reports import router as reports_router
from routes.uploads import router as uploads_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("buymesho")

logger.info("ENV: %s", ENV)

app = FastAPI(
    title="Buymesho API",
    version="1.0.0",
    docs_url=None if ENV == "production" else "/docs",
    redoc_url=None if ENV == "production" else "/redoc",
    openapi_url=None if ENV == "production" else "/openapi.json",
)

# -----------------------------
# CORS
# -----------------------------

allowed_origins = [origin.strip() for origin in CORS_ALLOWED_ORIGINS if origin.strip()]
if not allowed_origins:
    allowed_origins = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -----------------------------
# REQUEST LOGGING
# -----------------------------

@app.middleware("http")
async def log_requests(request: Request, call_next):
    response = await call_next(request)
    logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
    return response


# -----------------------------
# ERROR BODIES ({"error": ...} everywhere)
# -----------------------------

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict):
        body = exc.detail
    else:
        body = {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "Invalid request")

    return JSONResponse(
        status_code=400,
        content={
            "error": f"{field}: {message}" if field else message,
            "details": [
                {"loc": list(e.get("loc", ())), "msg": e.get("msg")}
                for e in errors
            ],
        },
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(
        "UNHANDLED_ERROR %s %s",
        request.method,
        request.url.path,
        exc_info=(type(exc), exc, exc.__traceback__),
    )

    body = {"error": "Internal Server Error", "message": str(exc)}
    if ENV == "development":
        body["stack"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    return JSONResponse(status_code=500, content=body)


# -----------------------------
# ROUTES
# -----------------------------

app.include_router(listings_router, prefix="/api")
app.include_router(sellers_router, prefix="/api")
app.include_router(profile_router, prefix="/api")
app.include_router(reports_router, prefix="/api")
app.include_router(uploads_router, prefix="/api")

# -----------------------------
# HEALTH CHECKS
# -----------------------------

@app.get("/api/health")
async def health():

    return {"status": "ok"}

@app.get("/api/health/db")
def health_db(store: Store = Depends(get_store)):
    store.ping()
    return {"status": "database connected"}


# -----------------------------
# API 404 (MUST BE LAST)
# -----------------------------

@app.api_route(
    "/api/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def api_not_found(request: Request, path: str):
    return JSONResponse(
        status_code=404,
        content={"error": "API route not found", "path": request.url.path},
    )


# -----------------------------
# STARTUP / SHUTDOWN
# -----------------------------

@app.on_event("startup")
def open_store():
    validate_production_env()

    # tests install their own store before the app starts
    if getattr(app.state, "store", None) is None:
        app.state.store = Store(DATABASE_URL)
    app.state.store.init_db()


@app.on_event("shutdown")
def close_store():
    store = getattr(app.state, "store", None)
    if store is not None:
        store.dispose()
