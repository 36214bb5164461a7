from .restaurant_settings import RestaurantSettingsSerializer

__all__ = ["RestaurantSettingsSerializer"]
