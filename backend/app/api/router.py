"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from app.api.routes import auth, income, expenses, dashboard, trips, trip_socket

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router)
api_router.include_router(income.router)
api_router.include_router(expenses.router)
api_router.include_router(dashboard.router)
api_router.include_router(trips.router)
api_router.include_router(trip_socket.router)
