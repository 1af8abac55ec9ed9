"""API tests for reviews and equipment popularity."""

from __future__ import annotations

from datetime import timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.equipment.models import Equipment
from apps.reviews.models import Review
from apps.reviews.services import popularity_from_average
from apps.users.models import User
from shared.domain.value_objects import Money


class PopularityScaleTests(APITestCase):
    def test_average_maps_to_ten_point_scale(self) -> None:
        self.assertEqual(popularity_from_average(None), 0)
        self.assertEqual(popularity_from_average(4.0), 8)
        self.assertEqual(popularity_from_average(4.25), 9)
        self.assertEqual(popularity_from_average(5.0), 10)


class ReviewAPITests(APITestCase):
    def setUp(self) -> None:
        self.renter = User.objects.create_user(email="renter@example.com", password="RenterPass123")
        self.other = User.objects.create_user(email="other@example.com", password="OtherPass123")
        owner = User.objects.create_user(email="owner@example.com", password="OwnerPass123")
        self.equipment = Equipment.objects.create(
            owner=owner,
            name="Rotavator 7ft",
            category=Equipment.Category.ROTAVATORS,
            daily_rate=Money(60000),
            location="Indore",
        )
        self.list_url = reverse("review-list")

    def _booking(self, renter=None, booking_status=Booking.Status.PAID) -> Booking:
        start = timezone.localdate() - timedelta(days=3)
        return Booking.objects.create(
            renter=renter or self.renter,
            equipment=self.equipment,
            start_date=start,
            end_date=start,
            status=booking_status,
            daily_rate=Money(60000),
            total_price=Money(60000),
        )

    def test_review_updates_popularity_and_marks_booking(self) -> None:
        booking = self._booking()
        self.client.force_authenticate(self.renter)

        response = self.client.post(
            self.list_url, {"booking": booking.id, "rating": 4, "comment": "Solid machine"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["equipment"], self.equipment.id)
        booking.refresh_from_db()
        self.assertTrue(booking.is_rated)
        self.equipment.refresh_from_db()
        self.assertEqual(self.equipment.popularity, 8)

    def test_popularity_uses_average_of_all_reviews(self) -> None:
        self.client.force_authenticate(self.renter)
        self.client.post(self.list_url, {"booking": self._booking().id, "rating": 5}, format="json")
        self.client.force_authenticate(self.other)
        self.client.post(self.list_url, {"booking": self._booking(self.other).id, "rating": 3}, format="json")

        self.equipment.refresh_from_db()
        self.assertEqual(self.equipment.popularity, 8)

    def test_unpaid_booking_cannot_be_reviewed(self) -> None:
        booking = self._booking(booking_status=Booking.Status.AWAITING_PAYMENT)
        self.client.force_authenticate(self.renter)
        response = self.client.post(self.list_url, {"booking": booking.id, "rating": 5}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("booking", response.data)

    def test_cannot_review_twice(self) -> None:
        booking = self._booking()
        self.client.force_authenticate(self.renter)
        self.client.post(self.list_url, {"booking": booking.id, "rating": 5}, format="json")
        response = self.client.post(self.list_url, {"booking": booking.id, "rating": 1}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Review.objects.count(), 1)

    def test_cannot_review_someone_elses_booking(self) -> None:
        booking = self._booking()
        self.client.force_authenticate(self.other)
        response = self.client.post(self.list_url, {"booking": booking.id, "rating": 5}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_rating_out_of_range(self) -> None:
        booking = self._booking()
        self.client.force_authenticate(self.renter)
        response = self.client.post(self.list_url, {"booking": booking.id, "rating": 6}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("rating", response.data)

    def test_list_by_equipment_is_public(self) -> None:
        booking = self._booking()
        Review.objects.create(user=self.renter, equipment=self.equipment, booking=booking, rating=4)
        response = self.client.get(self.list_url, {"equipment": self.equipment.id})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_delete_recomputes_popularity(self) -> None:
        booking = self._booking()
        self.client.force_authenticate(self.renter)
        created = self.client.post(self.list_url, {"booking": booking.id, "rating": 5}, format="json")

        response = self.client.delete(reverse("review-detail", args=[created.data["id"]]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.equipment.refresh_from_db()
        self.assertEqual(self.equipment.popularity, 0)

    def test_only_author_can_delete(self) -> None:
        booking = self._booking()
        review = Review.objects.create(user=self.renter, equipment=self.equipment, booking=booking, rating=4)
        self.client.force_authenticate(self.other)
        response = self.client.delete(reverse("review-detail", args=[review.id]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
