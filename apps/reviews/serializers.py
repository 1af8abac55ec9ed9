"""Serializers for reviews.

The creating user is inferred from the request in the view.
"""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.bookings.models import Booking

from .models import Review


class ReviewSerializer(serializers.ModelSerializer):
    user_name = serializers.SerializerMethodField()

    class Meta:
        model = Review
        fields = ['id', 'user', 'user_name', 'equipment', 'booking', 'rating', 'comment', 'created_at']
        read_only_fields = fields

    def get_user_name(self, obj: Review) -> str:
        return obj.user.get_full_name() or obj.user.username or obj.user.email


class ReviewCreateSerializer(serializers.Serializer):
    """Serializer for creating a new review."""

    booking = serializers.PrimaryKeyRelatedField(queryset=Booking.objects.select_related('equipment'))
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(required=False, allow_blank=True, max_length=2000)

    def validate_booking(self, booking: Booking) -> Booking:  # type: ignore
        user = self.context['request'].user
        if booking.renter_id != user.id:
            raise serializers.ValidationError('You can only review your own bookings.')
        if booking.status != Booking.Status.PAID:
            raise serializers.ValidationError('Only paid rentals can be reviewed.')
        if Review.objects.filter(booking=booking).exists():
            raise serializers.ValidationError('This booking has already been reviewed.')
        return booking
