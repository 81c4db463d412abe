from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.dependencies import get_response_classifier
from app.api.routes import assets, businesses, calls, webhooks
from app.config import get_settings
from app.db.supabase import init_supabase
from app.telephony.config import validate_twilio_config

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    settings = get_settings()
    logger.info("Starting Valor discount caller...", classifier=settings.classifier_strategy)
    init_supabase()
    # Classifier misconfiguration stops startup
    get_response_classifier()
    if not validate_twilio_config():
        logger.warning("Twilio is not configured; calls cannot be placed")
    yield
    # Shutdown
    logger.info("Shutting down Valor discount caller...")


app = FastAPI(
    title="Valor Discount Caller",
    description="Calls businesses to ask about military discounts and records the answers",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(businesses.router, prefix="/api")
app.include_router(calls.router, prefix="/api")
app.include_router(webhooks.router, prefix="/api")
app.include_router(assets.router, prefix="/api")


@app.get("/")
async def root():
    return {"message": "Valor Discount Caller API", "version": "0.1.0"}


@app.get("/health")
async def health():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.port, reload=settings.debug)
