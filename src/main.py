"""Main FastAPI application."""
import sys
from pathlib import Path

# Add project root to path if not already there
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from src.config import settings
from src.logging_config import get_logger, setup_logging
from src.middlewares.uploadSizeMiddleware import UploadSizeMiddleware
from src.routes.admin import router as admin_router
from src.routes.artisan import router as artisan_router
from src.routes.auth import router as auth_router
from src.routes.messages import account_router, router as messages_router
from src.routes.products import router as products_router
from src.routes.profiles import router as profiles_router
from src.routes.reviews import router as reviews_router
from src.utils.storage import get_storage
from data.database.connection import init_db

setup_logging()
logger = get_logger("app")

# Create database tables
init_db()

# Initialize FastAPI app
app = FastAPI(
    title=settings.project_name,
    version=settings.api_version,
    description="Marketplace for handmade goods - catalogue, artisan shops, reviews and messaging"
)

# Serve stored images; each bucket is a sub-directory of the media root
storage = get_storage()
app.mount(settings.storage_route, StaticFiles(directory=str(storage.root)), name="storage")
logger.info("Serving stored objects from %s at %s", storage.root, settings.storage_route)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(UploadSizeMiddleware)

# Include routers
app.include_router(auth_router)
app.include_router(products_router)
app.include_router(artisan_router)
app.include_router(reviews_router)
app.include_router(profiles_router)
app.include_router(messages_router)
app.include_router(account_router)
app.include_router(admin_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Handcrafted Haven API",
        "version": settings.api_version,
        "docs": "/docs"
    }


@app.get("/health")
@app.head("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
