# promotions/api/views.py

"""
PROMOTIONS API

- GET    /api/promotions/            list (admin)
- POST   /api/promotions/            create (admin)
- GET    /api/promotions/<id>/       retrieve (admin)
- PATCH  /api/promotions/<id>/       update (admin, key immutable)
- DELETE /api/promotions/<id>/       deactivate (admin; rows are kept)
- GET    /api/promotions/active/     promotions eligible right now (any bills.view user)
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from billing.api.errors import UUID_PATTERN
from billing.services.clock import system_clock
from billing.services.promotion_selector import is_eligible, select_applicable_promotion
from permissions.roles import CAP_BILLS_VIEW, CAP_PROMOTIONS_MANAGE, HasCapability
from promotions.models import Promotion
from promotions.serializers import PromotionSerializer

logger = logging.getLogger(__name__)


class PromotionViewSet(viewsets.ModelViewSet):
    queryset = Promotion.objects.all()
    serializer_class = PromotionSerializer
    pagination_class = None
    filterset_fields = ["active", "type"]
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]
    lookup_value_regex = UUID_PATTERN

    required_capability = None

    def get_permissions(self):
        if self.action == "active":
            self.required_capability = CAP_BILLS_VIEW
        else:
            self.required_capability = CAP_PROMOTIONS_MANAGE
        return [IsAuthenticated(), HasCapability()]

    def perform_create(self, serializer):
        promotion = serializer.save()
        logger.info("Promotion created", extra={"promotion": promotion.key})

    def perform_update(self, serializer):
        promotion = serializer.save()
        logger.info("Promotion updated", extra={"promotion": promotion.key})

    def destroy(self, request, *args, **kwargs):
        promotion = self.get_object()
        if promotion.active:
            promotion.active = False
            promotion.save(update_fields=["active", "updated_at"])
            logger.info("Promotion deactivated", extra={"promotion": promotion.key})
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: dict})
    @action(detail=False, methods=["get"], url_path="active")
    def active(self, request):
        now = system_clock.now()
        today = system_clock.today_code()
        candidates = list(Promotion.objects.active_at(now))
        eligible = [p for p in candidates if is_eligible(p, today, now=now)]
        selected = select_applicable_promotion(candidates, today, now=now)

        return Response(
            {
                "day": today,
                "selected": PromotionSerializer(selected).data if selected else None,
                "promotions": PromotionSerializer(eligible, many=True).data,
            }
        )
