"""
Bali Real Estate LINE Bot - Main Application Entry Point
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from app.api import webhooks
from app.config import settings
from app.version import __version__
import logging
import re
from pathlib import Path


# Custom logging filter to redact sensitive data
class SensitiveDataFilter(logging.Filter):
    """Filter to redact sensitive data from logs"""

    def filter(self, record):
        if hasattr(record, 'msg'):
            msg = str(record.msg)

            # Authorization headers (LINE channel token, Airtable key)
            msg = re.sub(r'(Bearer\s+)[A-Za-z0-9._~+/=-]+', r'\1[REDACTED]', msg)

            # Airtable personal access tokens: pat<14 chars>.<64 hex>
            msg = re.sub(r'\bpat[A-Za-z0-9]{10,}\.[A-Za-z0-9]+', '[PAT_REDACTED]', msg)

            # LINE reply tokens and other long opaque identifiers
            msg = re.sub(r'\b[A-Za-z0-9_-]{80,}\b', '[ID_REDACTED]', msg)

            record.msg = msg
        return True


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# Add filter to all loggers
for handler in logging.root.handlers:
    handler.addFilter(SensitiveDataFilter())

# Add filter to httpx logger (logs API requests)
httpx_logger = logging.getLogger('httpx')
httpx_logger.addFilter(SensitiveDataFilter())

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - handles startup and shutdown"""
    # Startup
    logger.info("🚀 Starting Bali Real Estate LINE Bot")
    logger.info(f"📦 Version: {__version__}")
    logger.info(f"📝 Environment: {settings.environment}")
    logger.info(f"🤖 Bot profile: {settings.bot_profile}")

    if settings.airtable_enabled:
        logger.info(f"✅ Airtable configured - table: {settings.airtable_table_name}")
    else:
        logger.warning("⚠️ Airtable not configured - area lookups will return no listings")

    if not settings.line_channel_access_token:
        logger.warning("⚠️ LINE_CHANNEL_ACCESS_TOKEN not set - replies are logged, not sent")

    logger.info("✅ Configuration loaded successfully")
    logger.info("🔗 Webhook endpoint: /webhook")

    yield

    # Shutdown
    logger.info("Shutting down...")


app = FastAPI(
    title="Bali Real Estate LINE Bot",
    description="LINE chatbot for Bali property listings, investment info and inspection booking",
    version=__version__,
    lifespan=lifespan
)

# Register webhook routes
app.include_router(webhooks.router, tags=["webhooks"])


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "app": "Bali Real Estate LINE Bot",
        "version": __version__,
        "status": "running",
        "environment": settings.environment,
        "webhook_url": "/webhook"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment
    }


# ============================================
# Static card images (/images/<file>)
# ============================================
# Card templates reference BASE_URL/images/...; the directory may be absent
# when images are served by a CDN instead.
images_dir = Path(__file__).parent.parent / "static" / "images"
app.mount("/images", StaticFiles(directory=str(images_dir), check_dir=False), name="images")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, reload=True)
