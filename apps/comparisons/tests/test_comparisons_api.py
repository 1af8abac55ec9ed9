"""API tests for the comparison list."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.comparisons.models import Comparison
from apps.equipment.models import Equipment
from apps.users.models import User
from shared.domain.value_objects import Money


class ComparisonAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email="farmer@example.com", password="FarmerPass123")
        owner = User.objects.create_user(email="owner@example.com", password="OwnerPass123")
        self.tractor = Equipment.objects.create(
            owner=owner,
            name="Swaraj 744",
            category=Equipment.Category.TRACTORS,
            daily_rate=Money(120000),
            location="Karnal",
        )
        self.client.force_authenticate(self.user)

    def _add_url(self, equipment_id: int) -> str:
        return reverse("comparison-add", kwargs={"equipment_id": equipment_id})

    def _remove_url(self, equipment_id: int) -> str:
        return reverse("comparison-remove", kwargs={"equipment_id": equipment_id})

    def test_add_is_idempotent(self) -> None:
        first = self.client.post(self._add_url(self.tractor.id))
        second = self.client.post(self._add_url(self.tractor.id))

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertEqual(Comparison.objects.filter(user=self.user).count(), 1)
        self.assertEqual(first.data["equipment"]["name"], "Swaraj 744")

    def test_add_unknown_equipment(self) -> None:
        response = self.client.post(self._add_url(999999))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_shows_only_own_entries(self) -> None:
        self.client.post(self._add_url(self.tractor.id))
        stranger = User.objects.create_user(email="stranger@example.com", password="StrangerPass123")
        Comparison.objects.create(user=stranger, equipment=self.tractor)

        response = self.client.get(reverse("comparison-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_remove(self) -> None:
        self.client.post(self._add_url(self.tractor.id))
        response = self.client.delete(self._remove_url(self.tractor.id))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Comparison.objects.exists())

        response = self.client.delete(self._remove_url(self.tractor.id))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_requires_authentication(self) -> None:
        self.client.force_authenticate(None)
        response = self.client.get(reverse("comparison-list"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
