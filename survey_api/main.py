# FastAPI entry point; wires routers, CORS, request logging and table creation
# survey_api/main.py
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from survey_api.endpoints import (
    admin as admin_router,
    analytics as analytics_router,
    answers as answers_router,
    auth as auth_router,
    questions as questions_router,
    survey as survey_router,
)
from survey_api.models.question import Base
from survey_api.utils.db import engine
from survey_api.utils.logger import logger

API_PREFIX = "/api/v1"

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manages application startup and shutdown events.
    """
    logger.info("Survey API starting up...")

    # Create database tables if they don't exist
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Startup complete.")
    yield
    logger.info("Survey API shutting down...")
    await engine.dispose()

# --- FastAPI App Initialization ---
app = FastAPI(
    title="Survey API",
    description="Question authoring, survey submission and response analytics.",
    version="1.0.0",
    lifespan=lifespan
)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this to your frontend's domain
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Request Logging ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    response = await call_next(request)
    logger.info(f"{request.method} {request.url.path} -> {response.status_code}")
    return response

# --- API Routers ---
app.include_router(auth_router.router, prefix=f"{API_PREFIX}/auth", tags=["Auth"])
app.include_router(questions_router.router, prefix=f"{API_PREFIX}/questions", tags=["Questions"])
app.include_router(survey_router.router, prefix=f"{API_PREFIX}/survey", tags=["Survey"])
app.include_router(admin_router.router, prefix=f"{API_PREFIX}/admin/survey", tags=["Admin"])
app.include_router(answers_router.router, prefix=f"{API_PREFIX}/answers", tags=["Answers"])
app.include_router(analytics_router.router, prefix=f"{API_PREFIX}/analytics", tags=["Analytics"])

# --- Root Endpoint ---
@app.get("/")
async def root():
    return {"message": "Welcome to the Survey API"}
