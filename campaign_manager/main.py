import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from campaign_manager.config import settings
from campaign_manager.errors import register_error_handlers
from campaign_manager.logging_config import configure_logging
from campaign_manager.routers import combats, initiatives

configure_logging()

app = FastAPI(
    title="Campaign Manager",
    description="Combat and initiative tracking for tabletop campaign sessions",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(combats.router)
app.include_router(initiatives.router)


@app.get("/health")
async def health_check():
    return {"status": "ok"}


def run() -> None:
    uvicorn.run("campaign_manager.main:app", host=settings.host, port=settings.port)
