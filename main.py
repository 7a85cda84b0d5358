import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from database import init_db
from exceptions import AppError
from routes.account import router as account_router
from routes.admin import router as admin_router
from routes.auth import router as auth_router
from routes.comments import router as comments_router
from routes.pages import router as pages_router
from routes.posts import router as posts_router
from routes.profile import router as profile_router
from routes.storage import router as storage_router

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize database
    init_db()
    logger.info("Underdogs API started")
    yield


app = FastAPI(title="Underdogs API", lifespan=lifespan)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],  # Allows all methods
    allow_headers=["*"],  # Allows all headers
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Include routers
app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(posts_router)
app.include_router(comments_router)
app.include_router(admin_router)
app.include_router(account_router)
app.include_router(storage_router)
app.include_router(pages_router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=21541, reload=True)
