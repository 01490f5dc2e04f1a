from loguru import logger
from app.core.db import engine, Base

# Import all models so SQLAlchemy registers them
from app.modules.connections.models import ConnectionRequest
from app.modules.notifications.models import Notification
from app.modules.personas.models import EventPersona

def init_db(bind=None):
    logger.info("Creating database tables")
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables created")
