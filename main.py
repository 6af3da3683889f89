import logging
import os

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
import uvicorn

import config
from database import check_connection
from routers import payments_router
from services.exceptions import (
    NotFound,
    PaymentServiceError,
    PersistenceError,
    ValidationError,
)

# Load .env
load_dotenv()

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _status_for(exc: PaymentServiceError) -> int:
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, NotFound):
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def create_app() -> FastAPI:
    app = FastAPI(title="Lease Payments API")

    # CORS
    origins = [origin for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PaymentServiceError)
    async def payment_error_handler(request: Request, exc: PaymentServiceError):
        if isinstance(exc, PersistenceError):
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=_status_for(exc), content=exc.to_dict())

    @app.get("/health")
    def health():
        return {"status": "ok", "database": check_connection()}

    app.include_router(payments_router)
    return app


# App instance
app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")), reload=False)
