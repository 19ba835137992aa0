"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from garden_wand.config import settings

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.garden_wand_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Garden Wand",
        description="Magic-wand area extraction for garden plans — raster + click → polygon with holes",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from garden_wand.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
