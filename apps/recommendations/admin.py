from django.contrib import admin

from .models import Recommendation


@admin.register(Recommendation)
class RecommendationAdmin(admin.ModelAdmin):
    list_display = ('user', 'equipment', 'score', 'reason', 'created_at')
    list_filter = ('score',)
    search_fields = ('user__email', 'equipment__name')
