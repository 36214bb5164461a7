from django.contrib import admin

from tables.models import Table


@admin.register(Table)
class TableAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "status", "current_bill")
    list_filter = ("status",)
    search_fields = ("code", "name")
    readonly_fields = ("current_bill", "created_at", "updated_at")

    def has_delete_permission(self, request, obj=None):
        return False
