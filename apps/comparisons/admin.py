from django.contrib import admin

from .models import Comparison


@admin.register(Comparison)
class ComparisonAdmin(admin.ModelAdmin):
    list_display = ('user', 'equipment', 'created_at')
    search_fields = ('user__email', 'equipment__name')
