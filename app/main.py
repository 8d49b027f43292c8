from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import sys
import traceback

from app.api.dependencies import get_image_host
from app.api.v1.api import api_router
from app.core.config import settings
from app.db.base import init_db

# Quiet the reloader's file watcher
logging.getLogger('watchfiles').setLevel(logging.ERROR)
logging.getLogger('watchfiles.main').setLevel(logging.ERROR)

# No-op when run.py already configured the root logger
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Product catalog API"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_V1_STR)


@app.on_event("startup")
async def startup_services():
    """
    Create tables and prepare the image bucket
    """
    logger.info("Initializing database...")
    try:
        init_db()
        logger.info("Database initialized")
    except Exception as e:
        logger.error(f"Database initialization failed: {str(e)}")
        logger.error(traceback.format_exc())
        logger.warning("Starting anyway, product endpoints will fail until the database is reachable")

    logger.info("Initializing image storage...")
    if get_image_host().initialize():
        logger.info("Image storage initialized")
    else:
        logger.error("Image storage initialization failed, uploads will be rejected")


@app.get("/")
async def root():
    """Health check"""
    return {
        "status": "online",
        "version": settings.VERSION,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, reload=settings.RELOAD)
