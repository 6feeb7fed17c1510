from fastapi import APIRouter
from api.v1.routes.messages import router as messages_router
from api.v1.routes.notifications import router as notifications_router
from api.v1.routes.resilience import router as resilience_router


# Main v1 router (includes all endpoints)
router = APIRouter()
router.include_router(messages_router)
router.include_router(notifications_router)
router.include_router(resilience_router)
