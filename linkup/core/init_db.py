from loguru import logger
from linkup.core.db import engine, Base

# Import all models so SQLAlchemy registers them
from linkup.modules.profiles.models import Profile
from linkup.modules.connections.models import ConnectionRequest
from linkup.modules.messages.models import Message
from linkup.modules.notifications.models import Notification

def init_db():
    logger.info("Creating database tables")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")
