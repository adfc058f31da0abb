"""
Pixel Placement Checker — FastAPI Backend
Entry point.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import get_settings
from core.logging import configure_logging
from api.routes import pixel


settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(
    title="Pixel Placement Checker",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(pixel.router)


@app.get("/health")
async def health():
    return {"status": "ok", "service": "pixel-checker"}
