from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import os
import time

from relive.database import Base, engine
# Models must be imported before create_all
from relive.models import user, tag, memory, media  # noqa: F401
# Application routers
from relive.routers import auth, memories, uploads, tags, stats, views
from relive.relive_logger import logger

# Load environment variables
DEBUG = os.getenv("DEBUG", "False").lower() == "true"
APP_VERSION = os.getenv("APP_VERSION", "0.1.0")

# Initialize FastAPI with configuration
app = FastAPI(
    title="ReLive",
    description="A personal journal for memories with photos, video, audio, tags and moods",
    version=APP_VERSION,
    debug=DEBUG,
    docs_url="/api/docs" if DEBUG else None,  # Only show docs in debug mode
    redoc_url="/api/redoc" if DEBUG else None,
)

logger.info(f"Server starting... Version: {APP_VERSION}, Debug: {DEBUG}")

allowed_origins = [
    "http://localhost:3000",          # Next.js dev server
    "http://localhost:8000",          # FastAPI dev server
]

extra_origins = os.getenv("CORS_ORIGINS", "")
if extra_origins:
    allowed_origins.extend(origin.strip() for origin in extra_origins.split(",") if origin.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["Content-Type", "Authorization"],
    max_age=3600,
)

@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    log_dict = {
        "request": {
            "url": str(request.url),
            "method": request.method,
        }
    }
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = f"{process_time:.4f}"
    log_dict["status"] = response.status_code
    log_dict["process Time"] = process_time
    logger.info(log_dict)
    return response

# Register all API routers
app.include_router(auth.router, tags=["Authentication"])
app.include_router(memories.router, tags=["Memories"])
app.include_router(uploads.router, tags=["Media"])
app.include_router(tags.router, tags=["Tags"])
app.include_router(stats.router, tags=["Stats"])
app.include_router(views.router, tags=["Views"])

# Health check endpoint
@app.get("/health")
async def root():
    return {
        "status": "healthy",
        "version": APP_VERSION,
        "message": "ReLive API is running"
    }

@app.on_event("startup")
async def startup_event():
    Base.metadata.create_all(bind=engine)
    logger.info("Application startup complete")

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")
