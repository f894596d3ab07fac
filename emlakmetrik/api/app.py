"""FastAPI application entry point."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from emlakmetrik.config import settings
from emlakmetrik.api.routes import analysis, regional, wallet

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="EmlakMetrik",
    description="Real Estate Investment Analysis API",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analysis.router)
app.include_router(regional.router)
app.include_router(wallet.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
