"""FastAPI routes for the FoodRescue domain."""

import json

from fastapi import APIRouter, Query, Response
from protean.utils.globals import current_domain
from pydantic import AwareDatetime

from foodrescue.alert.alert import EmergencyAlert
from foodrescue.alert.creation import CreateEmergencyAlert
from foodrescue.alert.removal import DeleteEmergencyAlert
from foodrescue.alert.response import RespondToAlert
from foodrescue.alert.search import search_alerts
from foodrescue.alert.status import UpdateAlertStatus
from foodrescue.api.schemas import (
    CreateEmergencyAlertRequest,
    CreateFoodListingRequest,
    ExpiredCountResponse,
    ExpireFoodListingsRequest,
    MatchFoodRequest,
    RateDeliveryRequest,
    RegisterUserRequest,
    RespondToAlertRequest,
    StatusResponse,
    UpdateAlertStatusRequest,
    UpdateAvailabilityRequest,
    UpdateDeliveryStatusRequest,
    UpdateFoodListingRequest,
    UserIdResponse,
)
from foodrescue.delivery.cancellation import CancelDelivery
from foodrescue.delivery.delivery import Delivery
from foodrescue.delivery.rating import RateDelivery
from foodrescue.delivery.search import search_deliveries
from foodrescue.delivery.status import UpdateDeliveryStatus
from foodrescue.food.expiry import ExpireFoodListings
from foodrescue.food.food import Food
from foodrescue.food.listing import CreateFoodListing, DeleteFoodListing, UpdateFoodListing
from foodrescue.food.matching import MatchFood
from foodrescue.food.search import search_food_listings
from foodrescue.shared.location import GeoPoint
from foodrescue.user.availability import UpdateAvailability
from foodrescue.user.registration import RegisterUser
from foodrescue.user.user import User


def _json_or_none(value):
    return json.dumps(value) if value is not None else None


def _near(lat: float | None, lng: float | None):
    if lat is None or lng is None:
        return None
    return GeoPoint(lat=lat, lng=lng)


# ---------------------------------------------------------------------------
# User Router
# ---------------------------------------------------------------------------
user_router = APIRouter(prefix="/users", tags=["users"])


@user_router.post("", status_code=201, response_model=UserIdResponse)
async def register_user(body: RegisterUserRequest) -> UserIdResponse:
    """Register a donor, shelter, or volunteer."""
    command = RegisterUser(
        name=body.name,
        email=body.email,
        role=body.role,
        phone=body.phone,
        availability=json.dumps([slot.model_dump() for slot in body.availability]),
    )
    result = current_domain.process(command, asynchronous=False)
    return UserIdResponse(user_id=result)


@user_router.put("/{user_id}/availability", response_model=StatusResponse)
async def update_availability(user_id: str, body: UpdateAvailabilityRequest) -> StatusResponse:
    """Replace a volunteer's weekly availability."""
    command = UpdateAvailability(
        user_id=user_id,
        availability=json.dumps([slot.model_dump() for slot in body.availability]),
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="availability_updated")


@user_router.get("/{user_id}")
async def get_user(user_id: str) -> dict:
    user = current_domain.repository_for(User).get(user_id)
    return {
        "id": str(user.id),
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "phone": user.phone,
        "availability": [slot.to_payload() for slot in user.availability or []],
        "completed_deliveries": user.completed_deliveries,
        "rating": user.rating,
    }


# ---------------------------------------------------------------------------
# Food Router
# ---------------------------------------------------------------------------
food_router = APIRouter(prefix="/foods", tags=["foods"])


@food_router.post("", status_code=201)
async def create_food_listing(body: CreateFoodListingRequest) -> dict:
    """Post a food donation; the response lists active alerts it could serve."""
    command = CreateFoodListing(
        donor_id=body.donor_id,
        title=body.title,
        description=body.description,
        quantity=body.quantity,
        unit=body.unit,
        category=body.category,
        expiry_date=body.expiry_date,
        pickup_start=body.pickup_start,
        pickup_end=body.pickup_end,
        location=_json_or_none(body.location.model_dump() if body.location else None),
        allergens=json.dumps(body.allergens),
        dietary_restrictions=json.dumps(body.dietary_restrictions),
    )
    return current_domain.process(command, asynchronous=False)


@food_router.get("")
async def list_food_listings(
    status: str | None = None,
    category: str | None = None,
    expiry_from: AwareDatetime | None = None,
    expiry_to: AwareDatetime | None = None,
    lat: float | None = Query(default=None, ge=-90, le=90),
    lng: float | None = Query(default=None, ge=-180, le=180),
    radius_km: float | None = Query(default=None, gt=0),
) -> list[dict]:
    listings = search_food_listings(
        status=status,
        category=category,
        expiry_from=expiry_from,
        expiry_to=expiry_to,
        near=_near(lat, lng),
        radius_km=radius_km,
    )
    return [food.to_payload() for food in listings]


@food_router.post("/expire", response_model=ExpiredCountResponse)
async def expire_food_listings(body: ExpireFoodListingsRequest) -> ExpiredCountResponse:
    """Expire available listings past their expiry date (for schedulers)."""
    result = current_domain.process(ExpireFoodListings(as_of=body.as_of), asynchronous=False)
    return ExpiredCountResponse(expired=result)


@food_router.get("/{food_id}")
async def get_food_listing(food_id: str) -> dict:
    return current_domain.repository_for(Food).get(food_id).to_payload()


@food_router.put("/{food_id}")
async def update_food_listing(food_id: str, body: UpdateFoodListingRequest) -> dict:
    command = UpdateFoodListing(
        food_id=food_id,
        title=body.title,
        description=body.description,
        quantity=body.quantity,
        unit=body.unit,
        category=body.category,
        expiry_date=body.expiry_date,
        pickup_start=body.pickup_start,
        pickup_end=body.pickup_end,
        location=_json_or_none(body.location.model_dump() if body.location else None),
        allergens=_json_or_none(body.allergens),
        dietary_restrictions=_json_or_none(body.dietary_restrictions),
    )
    return current_domain.process(command, asynchronous=False)


@food_router.delete("/{food_id}", status_code=204)
async def delete_food_listing(food_id: str) -> Response:
    current_domain.process(DeleteFoodListing(food_id=food_id), asynchronous=False)
    return Response(status_code=204)


@food_router.post("/{food_id}/match")
async def match_food(food_id: str, body: MatchFoodRequest) -> dict:
    """Match a listing to a shelter and an available volunteer."""
    command = MatchFood(food_id=food_id, shelter_id=body.shelter_id, notes=body.notes)
    return current_domain.process(command, asynchronous=False)


# ---------------------------------------------------------------------------
# Delivery Router
# ---------------------------------------------------------------------------
delivery_router = APIRouter(prefix="/deliveries", tags=["deliveries"])


@delivery_router.get("")
async def list_deliveries(
    status: str | None = None,
    volunteer_id: str | None = None,
    shelter_id: str | None = None,
    pickup_from: AwareDatetime | None = None,
    pickup_to: AwareDatetime | None = None,
) -> list[dict]:
    deliveries = search_deliveries(
        status=status,
        volunteer_id=volunteer_id,
        shelter_id=shelter_id,
        pickup_from=pickup_from,
        pickup_to=pickup_to,
    )
    return [delivery.to_payload() for delivery in deliveries]


@delivery_router.get("/{delivery_id}")
async def get_delivery(delivery_id: str) -> dict:
    return current_domain.repository_for(Delivery).get(delivery_id).to_payload()


@delivery_router.put("/{delivery_id}/status")
async def update_delivery_status(delivery_id: str, body: UpdateDeliveryStatusRequest) -> dict:
    command = UpdateDeliveryStatus(delivery_id=delivery_id, status=body.status)
    return current_domain.process(command, asynchronous=False)


@delivery_router.put("/{delivery_id}/rating")
async def rate_delivery(delivery_id: str, body: RateDeliveryRequest) -> dict:
    command = RateDelivery(delivery_id=delivery_id, rating=body.rating, feedback=body.feedback)
    return current_domain.process(command, asynchronous=False)


@delivery_router.put("/{delivery_id}/cancel")
async def cancel_delivery(delivery_id: str) -> dict:
    return current_domain.process(CancelDelivery(delivery_id=delivery_id), asynchronous=False)


# ---------------------------------------------------------------------------
# Alert Router
# ---------------------------------------------------------------------------
alert_router = APIRouter(prefix="/alerts", tags=["alerts"])


@alert_router.post("", status_code=201)
async def create_emergency_alert(body: CreateEmergencyAlertRequest) -> dict:
    """Raise an alert; the response lists food that could meet it."""
    command = CreateEmergencyAlert(
        shelter_id=body.shelter_id,
        title=body.title,
        description=body.description,
        priority=body.priority,
        food_needs=json.dumps([need.model_dump() for need in body.food_needs]),
        location=_json_or_none(body.location.model_dump() if body.location else None),
        deadline=body.deadline,
    )
    return current_domain.process(command, asynchronous=False)


@alert_router.get("")
async def list_alerts(
    status: str | None = None,
    priority: str | None = None,
    deadline_from: AwareDatetime | None = None,
    deadline_to: AwareDatetime | None = None,
    lat: float | None = Query(default=None, ge=-90, le=90),
    lng: float | None = Query(default=None, ge=-180, le=180),
    radius_km: float | None = Query(default=None, gt=0),
) -> list[dict]:
    alerts = search_alerts(
        status=status,
        priority=priority,
        deadline_from=deadline_from,
        deadline_to=deadline_to,
        near=_near(lat, lng),
        radius_km=radius_km,
    )
    return [alert.to_payload() for alert in alerts]


@alert_router.get("/{alert_id}")
async def get_alert(alert_id: str) -> dict:
    return current_domain.repository_for(EmergencyAlert).get(alert_id).to_payload()


@alert_router.post("/{alert_id}/responses")
async def respond_to_alert(alert_id: str, body: RespondToAlertRequest) -> dict:
    command = RespondToAlert(alert_id=alert_id, donor_id=body.donor_id, food_id=body.food_id)
    return current_domain.process(command, asynchronous=False)


@alert_router.put("/{alert_id}/status")
async def update_alert_status(alert_id: str, body: UpdateAlertStatusRequest) -> dict:
    command = UpdateAlertStatus(alert_id=alert_id, status=body.status)
    return current_domain.process(command, asynchronous=False)


@alert_router.delete("/{alert_id}", status_code=204)
async def delete_emergency_alert(alert_id: str) -> Response:
    current_domain.process(DeleteEmergencyAlert(alert_id=alert_id), asynchronous=False)
    return Response(status_code=204)
