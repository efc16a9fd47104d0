"""Shared BDD fixtures and step definitions for deliveries."""

import json
from datetime import UTC, datetime

import pytest
from foodrescue.delivery.delivery import Delivery
from foodrescue.food.food import Food
from foodrescue.food.matching import MatchFood
from foodrescue.user.availability import UpdateAvailability
from foodrescue.user.user import User
from protean import current_domain
from protean.exceptions import InvalidStateError, ObjectNotFoundError, ValidationError
from pytest_bdd import given, parsers, then, when

MONDAY = datetime(2026, 3, 2, 8, 0, tzinfo=UTC)


@pytest.fixture()
def trip():
    """Ids collected while the scenario runs, plus any refusal."""
    return {"error": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a donor, a shelter, and a volunteer free on Monday mornings")
def participants(trip, donor_id, shelter_id, volunteer_id):
    trip.update(donor_id=donor_id, shelter_id=shelter_id, volunteer_id=volunteer_id)


@given(parsers.cfparse("a food listing with pickup on Monday from {start:d}:00 to {end:d}:00"))
def food_listing(trip, post_food, start, end):
    trip["food_id"] = post_food(
        pickup_start=MONDAY.replace(hour=start),
        pickup_end=MONDAY.replace(hour=end),
    )


@given("the volunteer is only free on Tuesday mornings")
def volunteer_on_tuesdays(trip):
    current_domain.process(
        UpdateAvailability(
            user_id=trip["volunteer_id"],
            availability=json.dumps([{"day": "Tuesday", "start_time": "09:00", "end_time": "13:00"}]),
        ),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Actions (usable as Given or When)
# ---------------------------------------------------------------------------
@given("the shelter is matched with the listing")
@when("the shelter is matched with the listing")
def match_listing(trip):
    try:
        result = current_domain.process(
            MatchFood(food_id=trip["food_id"], shelter_id=trip["shelter_id"]),
            asynchronous=False,
        )
        trip["delivery_id"] = result["delivery"]["id"]
    except (ObjectNotFoundError, InvalidStateError) as exc:
        trip["error"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the delivery is "{status}"'))
def delivery_status(trip, status):
    delivery = current_domain.repository_for(Delivery).get(trip["delivery_id"])
    assert delivery.status == status


@then(parsers.cfparse('the food is "{status}"'))
def food_status(trip, status):
    assert current_domain.repository_for(Food).get(trip["food_id"]).status == status


@then("the food is assigned to the volunteer")
def food_assigned(trip):
    food = current_domain.repository_for(Food).get(trip["food_id"])
    assert food.matched_shelter_id == trip["shelter_id"]
    assert food.assigned_volunteer_id == trip["volunteer_id"]


@then("the food has no assignment")
def food_unassigned(trip):
    food = current_domain.repository_for(Food).get(trip["food_id"])
    assert food.matched_shelter_id is None
    assert food.assigned_volunteer_id is None


@then(parsers.cfparse("the volunteer has completed {count:d} deliveries"))
def volunteer_completed(trip, count):
    assert current_domain.repository_for(User).get(trip["volunteer_id"]).completed_deliveries == count


@then(parsers.cfparse('the request is refused with "{message}"'))
def refused(trip, message):
    assert trip["error"] is not None
    assert not isinstance(trip["error"], ValidationError)
    assert message in str(trip["error"])
