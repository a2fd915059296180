from django.contrib import admin

from .models import TrackedOrder


@admin.register(TrackedOrder)
class TrackedOrderAdmin(admin.ModelAdmin):
    list_display = ['order_id', 'value', 'currency', 'created']
    search_fields = ['order_id']
    readonly_fields = ['order_id', 'value', 'currency', 'created']
    ordering = ['-created']
