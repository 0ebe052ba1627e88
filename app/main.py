"""
app/main.py

Purpose: Application entry point

- Initializes FastAPI app
- Loads configuration and logging
- Registers API routes (OTP, payments, users)
- No business logic should be written here
- Manages application lifecycle (startup/shutdown)
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import time

from app.core.config import settings, validate_settings
from app.core.errors import add_exception_handlers
from app.core.logging import setup_logging, get_logger
from app.db.mongo import MongoDatabase
from app.db.indexes import create_indexes
from app.services.mail_service import MailService
from app.services.payment_service import PaymentService, RazorpayClient
from app.api import otp, payments, users
from utils.constants import MSG_BACKEND_ACTIVE

# Initialize logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Builds the process-wide resources at startup and disposes of them at shutdown.
    """
    logger.info("🚀 Starting COSCO backend...")

    try:
        logger.info("Validating configuration...")
        validate_settings()
        logger.info("✅ Configuration validated")

        mongo = MongoDatabase(settings.MONGODB_URL, settings.MONGODB_DB_NAME)
        await mongo.connect()
        await create_indexes(mongo.database)

        gateway = RazorpayClient(
            key_id=settings.RAZORPAY_KEY_ID,
            key_secret=settings.RAZORPAY_KEY_SECRET,
            base_url=settings.RAZORPAY_BASE_URL,
            timeout=settings.RAZORPAY_TIMEOUT,
        )

        app.state.mongo = mongo
        app.state.mailer = MailService(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            from_name=settings.MAIL_FROM_NAME,
            use_tls=settings.SMTP_USE_TLS,
            timeout=settings.SMTP_TIMEOUT,
        )
        app.state.payments = PaymentService(
            gateway=gateway,
            secret=settings.RAZORPAY_KEY_SECRET,
            currency=settings.PAYMENT_CURRENCY,
        )

        logger.info("🎉 COSCO backend started successfully!")
        logger.info(f"Environment: {settings.ENVIRONMENT}")

    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        raise

    yield  # Application runs here

    logger.info("🛑 Shutting down COSCO backend...")

    try:
        await gateway.close()
        logger.info("✅ Razorpay client closed")

        await mongo.close()
        logger.info("✅ MongoDB connection closed")

    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}", exc_info=True)


app = FastAPI(
    title="COSCO Backend",
    description="Email OTP onboarding and Razorpay checkout",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.is_development else None,  # Disable docs in production
    redoc_url="/redoc" if settings.is_development else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "x-requested-with"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request and add a processing time header."""
    start_time = time.time()
    logger.info(
        f"{request.method} {request.url.path} from {request.headers.get('origin', 'no-origin')}"
    )

    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    if process_time > 5.0:
        logger.warning(
            f"Slow request detected: {request.method} {request.url.path}",
            extra={"process_time": process_time}
        )

    return response


add_exception_handlers(app)

app.include_router(otp.router, tags=["OTP"])
app.include_router(payments.router, tags=["Payments"])
app.include_router(users.router, tags=["Users"])


@app.get("/", tags=["Health"])
async def root():
    """Liveness message."""
    return {"success": True, "message": MSG_BACKEND_ACTIVE}


@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    """
    Checks database connectivity.
    """
    health_status = {
        "success": True,
        "message": "healthy",
        "status": "healthy",
        "timestamp": time.time(),
        "environment": settings.ENVIRONMENT,
        "checks": {}
    }

    mongo = getattr(request.app.state, "mongo", None)
    db_healthy = mongo is not None and await mongo.check_health()
    health_status["checks"]["database"] = "healthy" if db_healthy else "unhealthy"

    if not db_healthy:
        health_status.update(success=False, message="database unavailable", status="unhealthy")

    status_code = 200 if db_healthy else 503
    return JSONResponse(content=health_status, status_code=status_code)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
