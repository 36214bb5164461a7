# billing/api/report_urls.py

from django.urls import path

from billing.api.reports import DailyReportView, MonthlyReportView

urlpatterns = [
    path("daily/", DailyReportView.as_view(), name="reports-daily"),
    path("monthly/", MonthlyReportView.as_view(), name="reports-monthly"),
]
