"""Food listing domain events.

Past-tense facts about a listing's lifecycle. Status-changing events carry
the shelter and volunteer references so downstream handlers do not have to
re-read the listing.
"""

from protean.fields import DateTime, Identifier, Integer, String, Text

from foodrescue.domain import foodrescue


@foodrescue.event(part_of="Food")
class FoodListed:
    """A donor posted a new food listing."""

    __version__ = 1

    food_id = Identifier(required=True)
    donor_id = Identifier(required=True)
    title = String(required=True)
    category = String(required=True)
    quantity = Integer(required=True)
    unit = String(required=True)
    expiry_date = DateTime(required=True)
    pickup_start = DateTime(required=True)
    pickup_end = DateTime(required=True)
    matching_alert_ids = Text()  # JSON list of active alerts this listing could serve
    listed_at = DateTime(required=True)


@foodrescue.event(part_of="Food")
class FoodListingUpdated:
    """A donor revised an available listing."""

    __version__ = 1

    food_id = Identifier(required=True)
    changes = Text(required=True)  # JSON list of changed field names
    updated_at = DateTime(required=True)


@foodrescue.event(part_of="Food")
class FoodReserved:
    """A listing was matched to a shelter and a volunteer."""

    __version__ = 1

    food_id = Identifier(required=True)
    shelter_id = Identifier(required=True)
    volunteer_id = Identifier(required=True)
    reserved_at = DateTime(required=True)


@foodrescue.event(part_of="Food")
class FoodPickedUp:
    """The delivery carrying this listing was completed."""

    __version__ = 1

    food_id = Identifier(required=True)
    shelter_id = Identifier()
    volunteer_id = Identifier()
    picked_up_at = DateTime(required=True)


@foodrescue.event(part_of="Food")
class FoodReleased:
    """A cancelled delivery returned the listing to the matchable pool."""

    __version__ = 1

    food_id = Identifier(required=True)
    previous_shelter_id = Identifier()
    previous_volunteer_id = Identifier()
    released_at = DateTime(required=True)


@foodrescue.event(part_of="Food")
class FoodExpired:
    """An unmatched listing passed its expiry date."""

    __version__ = 1

    food_id = Identifier(required=True)
    expiry_date = DateTime(required=True)
    expired_at = DateTime(required=True)
