"""FilterSet definitions for equipment listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Equipment


class EquipmentFilterSet(django_filters.FilterSet):
    """Filters used by the equipment list endpoint."""

    category = django_filters.ChoiceFilter(field_name="category", choices=Equipment.Category.choices)
    location = django_filters.CharFilter(field_name="location", lookup_expr="icontains")
    availability = django_filters.BooleanFilter(field_name="availability")
    # Daily rate bounds, minor currency units
    price_min = django_filters.NumberFilter(field_name="daily_rate", lookup_expr="gte")
    price_max = django_filters.NumberFilter(field_name="daily_rate", lookup_expr="lte")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Equipment
        fields = ["category", "location", "availability"]

    def filter_search(self, queryset, name, value):  # type: ignore
        if not value:
            return queryset
        return queryset.filter(name__icontains=value) | queryset.filter(description__icontains=value)
