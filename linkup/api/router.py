from fastapi import APIRouter

from linkup.modules.connections import routes as connections
from linkup.modules.messages import routes as messages
from linkup.modules.notifications import router as notifications
from linkup.modules.profiles import routes as profiles
from linkup.modules.realtime import routes as realtime

api_router = APIRouter(prefix="/v1")

api_router.include_router(profiles.router)
api_router.include_router(connections.router)
api_router.include_router(messages.router)
api_router.include_router(notifications.router)
api_router.include_router(realtime.router)
