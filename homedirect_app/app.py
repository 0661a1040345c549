import logging

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from core.cache import Cache, get_cache
from core.catch_error_middleware import ErrorHandlerMiddleware
from core.exception_handler import ValidationErrorHandler
from core.lifespan import lifespan
from core.settings import settings
from routes.admin_routes import router as admin_router
from routes.message_routes import router as message_router
from routes.offer_routes import router as offer_router
from routes.payment_routes import router as payment_router
from routes.property_media_routes import router as property_media_router
from routes.property_routes import router as property_router
from routes.user_routes import router as user_router

logging.basicConfig(level=settings.LOG_LEVEL)

app = FastAPI(
    lifespan=lifespan,
    title=settings.PROJECT_NAME,
    version="1.0.0",
)

app.include_router(property_router, prefix="/api")
app.include_router(property_media_router, prefix="/api")
app.include_router(message_router, prefix="/api")
app.include_router(offer_router, prefix="/api")
app.include_router(payment_router, prefix="/api")
app.include_router(user_router, prefix="/api")
app.include_router(admin_router, prefix="/api/admin")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["System"])
async def health_check(cache: Cache = Depends(get_cache)):
    if not cache.enabled:
        return {"status": "ok", "cache": "disabled"}
    return {"status": "ok", "cache": "up" if await cache.ping() else "down"}


app.add_exception_handler(
    RequestValidationError,
    ValidationErrorHandler(),
)

app.add_middleware(ErrorHandlerMiddleware)


if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=8001)
