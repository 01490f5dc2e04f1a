from fastapi import FastAPI
from loguru import logger

from app.core.logging import setup_logging
from app.core.init_db import init_db
from app.modules.connections.routes import router as connections_router
from app.modules.notifications.router import router as notifications_router
from app.modules.personas.routes import router as personas_router
from app.modules.suggestions.router import router as suggestions_router

setup_logging()
logger.info("Starting Eventura Connect backend")


app = FastAPI(
    title="Eventura Connect Backend",
    version="0.1.0"
)

# Connections module
app.include_router(connections_router)

app.include_router(personas_router)
app.include_router(suggestions_router)
app.include_router(notifications_router)

# Init DB after app is created
init_db()

@app.get("/health")
def health():
    logger.debug("Health check hit")
    return {"status": "ok"}
