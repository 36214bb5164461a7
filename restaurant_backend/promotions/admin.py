from django.contrib import admin

from promotions.models import Promotion


@admin.register(Promotion)
class PromotionAdmin(admin.ModelAdmin):
    list_display = ("key", "name", "type", "value", "active", "priority", "expires_at")
    list_filter = ("active", "type")
    search_fields = ("key", "name")

    def get_readonly_fields(self, request, obj=None):
        if obj is not None:
            return ("key", "created_at", "updated_at")
        return ("created_at", "updated_at")
