from fastapi import APIRouter

from app.api.v1 import events

# Initialize API router
api_router = APIRouter()

api_router.include_router(events.router, prefix="/events", tags=["Events"])
