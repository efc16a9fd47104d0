"""Pydantic API schemas for the FoodRescue domain.

These are the external API contracts — separate from domain commands.
Timestamps must carry a UTC offset; naive datetimes are rejected.
"""

from pydantic import AwareDatetime, BaseModel, Field


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class LocationRequest(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    address: str | None = None


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
class AvailabilitySlotRequest(BaseModel):
    day: str
    start_time: str
    end_time: str


class RegisterUserRequest(BaseModel):
    name: str
    email: str
    role: str
    phone: str | None = None
    availability: list[AvailabilitySlotRequest] = []


class UpdateAvailabilityRequest(BaseModel):
    availability: list[AvailabilitySlotRequest]


class UserIdResponse(BaseModel):
    user_id: str


# ---------------------------------------------------------------------------
# Food listings
# ---------------------------------------------------------------------------
class CreateFoodListingRequest(BaseModel):
    donor_id: str
    title: str
    description: str | None = None
    quantity: int
    unit: str
    category: str
    expiry_date: AwareDatetime
    pickup_start: AwareDatetime
    pickup_end: AwareDatetime
    location: LocationRequest | None = None
    allergens: list[str] = []
    dietary_restrictions: list[str] = []


class UpdateFoodListingRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    quantity: int | None = None
    unit: str | None = None
    category: str | None = None
    expiry_date: AwareDatetime | None = None
    pickup_start: AwareDatetime | None = None
    pickup_end: AwareDatetime | None = None
    location: LocationRequest | None = None
    allergens: list[str] | None = None
    dietary_restrictions: list[str] | None = None


class MatchFoodRequest(BaseModel):
    shelter_id: str
    notes: str | None = None


class ExpireFoodListingsRequest(BaseModel):
    as_of: AwareDatetime | None = None


class ExpiredCountResponse(BaseModel):
    expired: int


# ---------------------------------------------------------------------------
# Deliveries
# ---------------------------------------------------------------------------
class UpdateDeliveryStatusRequest(BaseModel):
    status: str


class RateDeliveryRequest(BaseModel):
    rating: int
    feedback: str | None = None


# ---------------------------------------------------------------------------
# Emergency alerts
# ---------------------------------------------------------------------------
class FoodNeedRequest(BaseModel):
    category: str
    quantity: int
    unit: str
    urgency: str


class CreateEmergencyAlertRequest(BaseModel):
    shelter_id: str
    title: str
    description: str
    priority: str = "medium"
    food_needs: list[FoodNeedRequest]
    location: LocationRequest | None = None
    deadline: AwareDatetime


class RespondToAlertRequest(BaseModel):
    donor_id: str
    food_id: str


class UpdateAlertStatusRequest(BaseModel):
    status: str


class StatusResponse(BaseModel):
    status: str
