import json
import os
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture
from protean.utils.globals import current_domain

# A Monday. Pickup windows in tests default to 10:00-12:00 on this day.
MONDAY = datetime(2026, 3, 2, 8, 0, tzinfo=UTC)

WEEKDAY_AVAILABILITY = [{"day": "Monday", "start_time": "09:00", "end_time": "13:00"}]


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before the domain module is first imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


class FrozenClock:
    """Stand-in for the domain clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


@pytest.fixture(scope="session")
def foodrescue_bed():
    from foodrescue.domain import foodrescue

    bed = DomainFixture(foodrescue)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(foodrescue_bed):
    with foodrescue_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def clock(foodrescue_bed):
    original = foodrescue_bed.domain.clock
    frozen = FrozenClock(MONDAY)
    foodrescue_bed.domain.clock = frozen
    yield frozen
    foodrescue_bed.domain.clock = original


@pytest.fixture(autouse=True)
def publisher():
    from foodrescue.matching import reset_availability_matcher
    from foodrescue.realtime import get_publisher, reset_publisher

    reset_publisher()
    reset_availability_matcher()
    fake = get_publisher()
    yield fake
    fake.reset()
    reset_publisher()


# ---------------------------------------------------------------------------
# Command helpers
# ---------------------------------------------------------------------------
@pytest.fixture()
def register_user():
    from foodrescue.user.registration import RegisterUser

    def _register(role, name=None, availability=None):
        return current_domain.process(
            RegisterUser(
                name=name or f"Test {role}",
                email=f"{name or role}@example.org".replace(" ", ".").lower(),
                role=role,
                availability=json.dumps(availability) if availability else None,
            ),
            asynchronous=False,
        )

    return _register


@pytest.fixture()
def donor_id(register_user):
    return register_user("donor", name="Corner Bakery")


@pytest.fixture()
def shelter_id(register_user):
    return register_user("shelter", name="Harbor Shelter")


@pytest.fixture()
def volunteer_id(register_user):
    return register_user("volunteer", name="Vera Volunteer", availability=WEEKDAY_AVAILABILITY)


@pytest.fixture()
def post_food(donor_id):
    from foodrescue.food.listing import CreateFoodListing

    def _post(**overrides):
        values = {
            "donor_id": donor_id,
            "title": "Day-old bread",
            "description": "Two crates of sourdough",
            "quantity": 10,
            "unit": "items",
            "category": "pantry",
            "expiry_date": MONDAY + timedelta(days=3),
            "pickup_start": MONDAY.replace(hour=10),
            "pickup_end": MONDAY.replace(hour=12),
        }
        values.update(overrides)
        result = current_domain.process(CreateFoodListing(**values), asynchronous=False)
        return result["food"]["id"]

    return _post


@pytest.fixture()
def food_id(post_food):
    return post_food()


@pytest.fixture()
def match():
    from foodrescue.food.matching import MatchFood

    def _match(food_id, shelter_id):
        return current_domain.process(MatchFood(food_id=food_id, shelter_id=shelter_id), asynchronous=False)

    return _match


@pytest.fixture()
def delivery_id(food_id, shelter_id, volunteer_id, match):
    return match(food_id, shelter_id)["delivery"]["id"]


@pytest.fixture()
def set_delivery_status():
    from foodrescue.delivery.status import UpdateDeliveryStatus

    def _set(delivery_id, status):
        return current_domain.process(
            UpdateDeliveryStatus(delivery_id=delivery_id, status=status),
            asynchronous=False,
        )

    return _set


@pytest.fixture()
def raise_alert(shelter_id):
    from foodrescue.alert.creation import CreateEmergencyAlert

    def _raise(categories=("produce",), deadline=None, **overrides):
        values = {
            "shelter_id": shelter_id,
            "title": "Weekend shortfall",
            "description": "Running low ahead of the weekend",
            "priority": "high",
            "food_needs": json.dumps(
                [{"category": c, "quantity": 20, "unit": "servings", "urgency": "today"} for c in categories]
            ),
            "deadline": deadline or MONDAY + timedelta(days=1),
        }
        values.update(overrides)
        return current_domain.process(CreateEmergencyAlert(**values), asynchronous=False)

    return _raise


@pytest.fixture()
def client():
    from fastapi import FastAPI
    from fastapi.testclient import TestClient
    from foodrescue.api import alert_router, delivery_router, food_router, user_router
    from protean.integrations.fastapi import register_exception_handlers

    app = FastAPI()
    for router in (user_router, food_router, delivery_router, alert_router):
        app.include_router(router)
    register_exception_handlers(app)
    return TestClient(app)
