import logging
import os
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, load_settings
from database import Database, connect, now_utc
from errors import register_error_handlers
from images import ImageUploader
from routers import api_router
from services import Services

logger = logging.getLogger("sayad_alsamak")


def create_app(
    settings: Optional[Settings] = None,
    db: Optional[Database] = None,
    uploader: Optional[ImageUploader] = None,
) -> FastAPI:
    settings = settings or load_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    db = db or connect(settings)
    db.ensure_indexes()
    uploader = uploader or ImageUploader.from_settings(settings)

    app = FastAPI(title="Sayad Alsamak API", version="1.0.0")

    origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    register_error_handlers(app, debug=settings.is_development)

    app.state.settings = settings
    app.state.db = db
    app.state.services = Services(db, uploader, settings)

    app.include_router(api_router)

    # ===================== Public Endpoints =====================
    @app.get("/")
    def root():
        return {"message": "Sayad Alsamak API running"}

    @app.get("/health")
    def health():
        return {"status": "OK", "timestamp": now_utc(), "environment": settings.environment}

    @app.get("/test")
    def test_database():
        response = {
            "backend": "✅ Running",
            "database": "❌ Not Available",
            "database_url": None,
            "database_name": None,
            "connection_status": "Not Connected",
            "collections": [],
        }
        try:
            response["collections"] = db.ping()
            response["database"] = "✅ Available"
            response["connection_status"] = "Connected"
        except Exception as e:
            response["database"] = f"❌ Error: {str(e)[:80]}"
        response["database_url"] = "✅ Set" if os.getenv("DATABASE_URL") else "❌ Not Set"
        response["database_name"] = "✅ Set" if os.getenv("DATABASE_NAME") else "❌ Not Set"
        return response

    logger.info("Sayad Alsamak API ready (%s)", settings.environment)
    return app


if __name__ == "__main__":
    import uvicorn

    app_settings = load_settings()
    uvicorn.run(create_app(app_settings), host="0.0.0.0", port=app_settings.port)
