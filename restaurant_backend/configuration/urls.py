# configuration/urls.py

from django.urls import path

from configuration.api.views import RestaurantSettingsView

urlpatterns = [
    path("", RestaurantSettingsView.as_view(), name="restaurant-settings"),
]
