# billing/api/reports.py

"""
RESTAURANT REPORTS API

- GET /api/reports/daily/?date=YYYY-MM-DD    (default: today, local time)
- GET /api/reports/monthly/?month=YYYY-MM    (default: current month)

Security: reports.view
"""

from __future__ import annotations

from datetime import datetime

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from billing.api.errors import error_response
from billing.services.clock import system_clock
from billing.services.reports import daily_report, monthly_report
from permissions.roles import CAP_REPORTS_VIEW, HasCapability


class _ReportView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW


class DailyReportView(_ReportView):
    @extend_schema(
        parameters=[OpenApiParameter("date", str, description="YYYY-MM-DD")],
        responses={200: dict},
    )
    def get(self, request):
        raw = (request.query_params.get("date") or "").strip()
        if raw:
            try:
                day = datetime.strptime(raw, "%Y-%m-%d").date()
            except ValueError:
                return error_response(
                    code="VALIDATION_ERROR",
                    message="date must be YYYY-MM-DD",
                    http_status=status.HTTP_400_BAD_REQUEST,
                    details=[{"field": "date", "message": "date must be YYYY-MM-DD"}],
                )
        else:
            day = system_clock.today()

        return Response(daily_report(day))


class MonthlyReportView(_ReportView):
    @extend_schema(
        parameters=[OpenApiParameter("month", str, description="YYYY-MM")],
        responses={200: dict},
    )
    def get(self, request):
        raw = (request.query_params.get("month") or "").strip()
        if raw:
            try:
                parsed = datetime.strptime(raw, "%Y-%m")
            except ValueError:
                return error_response(
                    code="VALIDATION_ERROR",
                    message="month must be YYYY-MM",
                    http_status=status.HTTP_400_BAD_REQUEST,
                    details=[{"field": "month", "message": "month must be YYYY-MM"}],
                )
            year, month = parsed.year, parsed.month
        else:
            today = system_clock.today()
            year, month = today.year, today.month

        return Response(monthly_report(year, month))
