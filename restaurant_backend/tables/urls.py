# tables/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from tables.api.views import TableViewSet

router = DefaultRouter()
router.register(r"", TableViewSet, basename="tables")

urlpatterns = [
    path("", include(router.urls)),
]
