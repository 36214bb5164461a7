from django.contrib import admin

from customers.models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("phone", "name", "loyalty_stamps", "created_at")
    search_fields = ("phone", "name")
    readonly_fields = ("loyalty_stamps", "created_at", "updated_at")

    def has_delete_permission(self, request, obj=None):
        return False
