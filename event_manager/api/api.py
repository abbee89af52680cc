from fastapi import APIRouter

from .endpoints import attendee, organiser

api_router = APIRouter()
api_router.include_router(attendee.router, prefix="/attendee", tags=["attendee"])
api_router.include_router(organiser.router, prefix="/organiser", tags=["organiser"])
