# promotions/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from promotions.api.views import PromotionViewSet

router = DefaultRouter()
router.register(r"", PromotionViewSet, basename="promotions")

urlpatterns = [
    path("", include(router.urls)),
]
