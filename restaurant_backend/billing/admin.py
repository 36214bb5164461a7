from django.contrib import admin

from billing.models import Bill


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    """Read-only: bills change only through the bill service."""

    list_display = ("id", "table", "status", "adult_count", "child_count", "total_gross", "opened_at")
    list_filter = ("status", "payment_method", "loyalty_free_applied")
    search_fields = ("id", "table__code", "customer__phone", "promo_applied")
    date_hierarchy = "opened_at"

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
