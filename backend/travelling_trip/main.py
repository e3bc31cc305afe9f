# backend/travelling_trip/main.py

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from travelling_trip.api.routes_fetch import router as fetch_router
from travelling_trip.api.routes_itinerary import router as itinerary_router
from travelling_trip.api.routes_payment import router as payment_router
from travelling_trip.api.routes_places import router as places_router
from travelling_trip.api.routes_plan import router as plan_router
from travelling_trip.api.routes_share import router as share_router
from travelling_trip.api.routes_trips import router as trips_router
from travelling_trip.core.config_loader import settings
from travelling_trip.core.errors import TravelPlannerError
from travelling_trip.core.logger import logger
from travelling_trip.core.services import ServiceContainer, build_services
from travelling_trip.utils.itinerary_board import ItineraryError


def create_app(services: Optional[ServiceContainer] = None) -> FastAPI:
    app = FastAPI(
        title="Travelling Trip",
        description="AI travel planning backend: Gemini itineraries, trip storage, Stripe premium",
        version="1.0.0"
    )
    app.state.services = services or build_services(settings)

    # -------------------------------------------------------------
    # CORS
    # -------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # update to frontend domain in production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------
    # ERRORS
    # -------------------------------------------------------------
    @app.exception_handler(TravelPlannerError)
    async def travel_planner_error_handler(request: Request, exc: TravelPlannerError):
        logger.warning(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(ItineraryError)
    async def itinerary_error_handler(request: Request, exc: ItineraryError):
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": {"message": str(exc), "code": "invalid_itinerary"}},
        )

    # -------------------------------------------------------------
    # ROUTES
    # -------------------------------------------------------------
    app.include_router(plan_router)
    app.include_router(itinerary_router)
    app.include_router(trips_router)
    app.include_router(share_router)
    app.include_router(payment_router)
    app.include_router(places_router)
    app.include_router(fetch_router)

    @app.get("/")
    def root():
        return {
            "status": "ok",
            "message": "Travelling Trip backend is running",
            "env": app.state.services.settings.environment
        }

    return app
