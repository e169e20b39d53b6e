import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

# Import models so every table is registered with Base before create_all
from . import models  # noqa: F401
from .config import FRONTEND_URL, SHOP_NAME
from .database import Base, SessionLocal, engine
from .domain.admin.router import router as admin_router
from .domain.checklist.router import admin_router as checklist_admin_router
from .domain.checklist.router import router as checklist_router
from .domain.quotes.router import router as quotes_router
from .domain.repairs.router import router as repairs_router
from .rate_limiter import get_optional_redis_client
from .routes.auth import router as auth_router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Quiet per-request logs of outgoing notification calls
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"🔧 {SHOP_NAME} workshop API starting...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("✅ Workshop tables ready")
    except Exception as e:
        # Several workers may race on the first create_all
        if "already exists" in str(e) or "duplicate key" in str(e):
            logger.info("Workshop tables already created by another worker")
        else:
            logger.error(f"❌ Could not create workshop tables: {e}")

    if get_optional_redis_client() is None:
        logger.warning("⚠️ Redis unreachable - sign-in throttling is per process and change cues reach this process only")
    else:
        logger.info("✅ Redis reachable")

    yield
    logger.info("👋 Workshop API stopped")


app = FastAPI(title=f"{SHOP_NAME} Workshop API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    logger.warning(f"⚠️ Rejected {request.method} {request.url.path}: {errors}")
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


@app.middleware("http")
async def log_slow_requests(request: Request, call_next):
    started = time.time()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"❌ {request.method} {request.url.path} failed: {e}")
        raise
    elapsed_ms = (time.time() - started) * 1000
    if elapsed_ms > 1000:
        logger.warning(f"🐢 Slow request {request.method} {request.url.path}: {elapsed_ms:.0f}ms")
    return response


# Staff front-end origins
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", f"{FRONTEND_URL},http://localhost:5173").split(",")
logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(repairs_router)
app.include_router(quotes_router)
app.include_router(checklist_router)
app.include_router(checklist_admin_router)
app.include_router(admin_router)


@app.get("/health")
def health():
    """Liveness plus the reachability of the database and Redis"""
    database_ok = True
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"❌ Health check could not reach the database: {e}")
        database_ok = False
    finally:
        db.close()

    return {
        "status": "healthy" if database_ok else "degraded",
        "database": database_ok,
        "redis": get_optional_redis_client() is not None,
    }
