from .restaurant_settings import RestaurantSettings

__all__ = ["RestaurantSettings"]
