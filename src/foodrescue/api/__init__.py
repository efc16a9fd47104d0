"""FoodRescue API package."""

from foodrescue.api.routes import alert_router, delivery_router, food_router, user_router

__all__ = ["user_router", "food_router", "delivery_router", "alert_router"]
