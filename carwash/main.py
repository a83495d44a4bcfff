import asyncio
import logging
import os
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from carwash.core.config import settings
from carwash.routes import (
    auth_router,
    bookings_router,
    branches_router,
    customers_router,
    loyalty_router,
    reports_router,
    services_router,
)
from carwash.utils.validators import format_validation_errors

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

async def keep_alive():
    """Ping our own health endpoint so the free Render instance stays warm"""
    if not settings.IS_PRODUCTION:
        return

    await asyncio.sleep(30)
    while True:
        try:
            async with httpx.AsyncClient(timeout=30.0) as client:
                for endpoint in (f"{settings.CURRENT_BASE_URL}/health", f"{settings.CURRENT_BASE_URL}/ping"):
                    try:
                        response = await client.get(endpoint)
                        logger.debug(f"Keep-alive ping to {endpoint}: {response.status_code}")
                        break
                    except httpx.HTTPError as e:
                        logger.warning(f"Keep-alive ping failed for {endpoint}: {e}")
        except Exception:
            logger.exception("Keep-alive loop error")
        await asyncio.sleep(600)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Car Wash Booking API starting...")

    if settings.IS_PRODUCTION:
        logger.info("Starting production keep-alive service")
        keep_alive_task = asyncio.create_task(keep_alive())
        yield
        keep_alive_task.cancel()
    else:
        logger.info("Development mode - no keep-alive")
        yield

app = FastAPI(
    title="Car Wash Booking API",
    description="Bookings, branches, services and loyalty for a multi-branch car and motorcycle wash",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = format_validation_errors(exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "; ".join(messages) or "Invalid request"}
    )

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )

# Include routers
app.include_router(auth_router, prefix="/api/auth", tags=["Authentication"])
app.include_router(bookings_router, prefix="/api/bookings", tags=["Bookings"])
app.include_router(services_router, prefix="/api/services", tags=["Services"])
app.include_router(branches_router, prefix="/api/branches", tags=["Branches"])
app.include_router(customers_router, prefix="/api/customers", tags=["Customers"])
app.include_router(reports_router, prefix="/api/reports", tags=["Reports"])
app.include_router(loyalty_router, prefix="/api/loyalty", tags=["Loyalty"])

@app.get("/")
async def root():
    return {
        "message": "Welcome to Car Wash Booking API",
        "status": "healthy",
        "version": "1.0.0",
        "environment": "production" if settings.IS_PRODUCTION else "development"
    }

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "message": "Car Wash Booking API is running",
        "environment": "production" if settings.IS_PRODUCTION else "development"
    }

@app.get("/ping")
async def ping():
    return {"message": "pong"}

if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("carwash.main:app", host="0.0.0.0", port=port, reload=not settings.IS_PRODUCTION)
