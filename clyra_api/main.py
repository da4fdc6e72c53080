#run it with uvicorn clyra_api.main:app --reload
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
import logging

from clyra_api import __version__
from clyra_api.api.api_router import api_router
from clyra_api.core.admin_gate import AdminQueryGate
from clyra_api.core.config import get_settings
from clyra_api.core.intake import IntakePipeline
from clyra_api.core.notifier import MailNotifier

# Load environment variables from .env file
load_dotenv()

settings = get_settings()

# Set up logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect to MongoDB, check mail, and wire the intake components"""
    from clyra_api.db.init_db import initialize_database
    from clyra_api.db.mongo import create_client, get_database
    from clyra_api.db.submission_store import SubmissionStore

    client = create_client(settings)
    db = get_database(client, settings)

    logger.info("🚀 Starting database initialization...")
    if await initialize_database(db):
        logger.info("✅ Database initialization completed successfully")
    else:
        logger.warning("⚠️ Database initialization completed with warnings")

    notifier = MailNotifier(settings.mail_config)
    await notifier.verify()

    store = SubmissionStore(db)
    app.state.notifier = notifier
    app.state.intake_pipeline = IntakePipeline(store, notifier)
    app.state.admin_gate = AdminQueryGate(store, settings.access_code)
    logger.info(f"✅ Server ready on port {settings.port}")

    yield

    client.close()
    logger.info("MongoDB connections closed successfully")


app = FastAPI(title="Clyra Website Backend", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)

app.include_router(api_router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"❌ Unhandled error on {request.method} {request.url.path}: {str(exc)}", exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Internal Server Error"})
