# configuration/api/views.py

"""
RESTAURANT SETTINGS API

- GET   /api/settings/   current pricing configuration (bills.view)
- PATCH /api/settings/   update (settings.edit, admin)

Changes apply to bills opened or edited afterwards; existing bill
snapshots are untouched.
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from configuration.models import RestaurantSettings
from configuration.serializers import RestaurantSettingsSerializer
from permissions.roles import CAP_BILLS_VIEW, CAP_SETTINGS_EDIT, HasCapability

logger = logging.getLogger(__name__)


class RestaurantSettingsView(APIView):
    required_capability = None

    def get_permissions(self):
        if self.request.method == "PATCH":
            self.required_capability = CAP_SETTINGS_EDIT
        else:
            self.required_capability = CAP_BILLS_VIEW
        return [IsAuthenticated(), HasCapability()]

    @extend_schema(responses={200: RestaurantSettingsSerializer})
    def get(self, request):
        return Response(RestaurantSettingsSerializer(RestaurantSettings.load()).data)

    @extend_schema(request=RestaurantSettingsSerializer, responses={200: RestaurantSettingsSerializer})
    def patch(self, request):
        instance = RestaurantSettings.load()
        serializer = RestaurantSettingsSerializer(instance, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        logger.info(
            "Restaurant settings updated",
            extra={
                "fields": sorted(serializer.validated_data.keys()),
                "user_id": str(request.user.id),
            },
        )
        return Response(serializer.data)
