import os

from dotenv import load_dotenv

# Settings are read from the environment on first use, so load .env first
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from api.middleware import RequestTimingMiddleware
from api.requests.api_menu_layout import router as menu_layout_router
from config.menu_layout import get_layout_settings
from setup_logging_optimized import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)

ENVIRONMENT = (os.getenv("ENVIRONMENT") or os.getenv("ENV") or "development").lower()


def create_app() -> FastAPI:
    """Build the menu layout API application"""
    app = FastAPI(title="Menu Board Layout API")

    allowed_origins = [origin for origin in os.getenv("ALLOWED_ORIGINS", "").split(",") if origin]
    if ENVIRONMENT != "production":
        allowed_origins += ["http://localhost:4200", "http://127.0.0.1:4200"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )
    app.add_middleware(RequestTimingMiddleware)
    app.include_router(menu_layout_router)

    @app.get("/health")
    async def health():
        return {"status": "ok", "settings": get_layout_settings().to_dict()}

    return app


app = create_app()


if __name__ == "__main__":
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "9091"))
    logger.info(f"Starting Menu Board Layout API on http://{host}:{port} ({ENVIRONMENT})")
    uvicorn.run("api.menu_server:app", host=host, port=port, reload=ENVIRONMENT != "production", workers=1)
