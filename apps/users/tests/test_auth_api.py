"""API tests for authentication and profile endpoints."""

from __future__ import annotations

from datetime import timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import User


class AuthAPITests(APITestCase):
    def test_register_returns_tokens(self) -> None:
        payload = {
            "email": "farmer@example.com",
            "phone": "+919812345678",
            "first_name": "Ravi",
            "last_name": "Kumar",
            "password": "StrongPass123",
            "password_confirm": "StrongPass123",
        }

        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertIn("tokens", response.data)
        self.assertEqual(response.data["user"]["email"], payload["email"])
        self.assertEqual(response.data["user"]["role"], User.RoleChoices.RENTER)
        self.assertTrue(User.objects.filter(email=payload["email"]).exists())

    def test_register_as_owner(self) -> None:
        payload = {
            "email": "dealer@example.com",
            "password": "StrongPass123",
            "password_confirm": "StrongPass123",
            "role": "owner",
        }
        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(User.objects.get(email="dealer@example.com").is_owner())

    def test_register_cannot_claim_admin_role(self) -> None:
        payload = {
            "email": "sneaky@example.com",
            "password": "StrongPass123",
            "password_confirm": "StrongPass123",
            "role": "admin",
        }
        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_register_rejects_mismatched_passwords(self) -> None:
        payload = {
            "email": "typo@example.com",
            "password": "StrongPass123",
            "password_confirm": "StrongPass124",
        }
        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("password_confirm", response.data)

    def test_login_limited_attempts(self) -> None:
        user = User.objects.create_user(
            email="lock@example.com",
            phone="+919800000001",
            password="CorrectPassword1",
        )

        url = reverse("auth:login")
        wrong_payload = {"login": user.email, "password": "wrong"}
        for _ in range(5):
            response = self.client.post(url, wrong_payload, format="json")

        user.refresh_from_db()
        self.assertTrue(user.is_locked)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        # After lock expires user can login again
        user.locked_until = timezone.now() - timedelta(minutes=1)
        user.save(update_fields=["locked_until"])
        response = self.client.post(url, {"login": user.email, "password": "CorrectPassword1"})
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIn("access", response.data["tokens"])

    def test_login_by_phone(self) -> None:
        User.objects.create_user(email="phone@example.com", phone="+919800000002", password="Secret123!")
        response = self.client.post(
            reverse("auth:login"),
            {"login": "+919800000002", "password": "Secret123!"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)


class ProfileAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email="me@example.com", password="Secret123!")
        self.url = reverse("user-me")

    def test_me_requires_authentication(self) -> None:
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_update_preferences(self) -> None:
        self.client.force_authenticate(self.user)
        response = self.client.patch(
            self.url,
            {
                "preferred_categories": ["tractors"],
                "preferred_locations": ["Nashik"],
                "price_range_min": 100000,
                "price_range_max": 500000,
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.user.refresh_from_db()
        self.assertEqual(self.user.preferred_categories, ["tractors"])
        self.assertTrue(self.user.price_in_range(300000))
        self.assertFalse(self.user.price_in_range(600000))

    def test_inverted_price_range_rejected(self) -> None:
        self.client.force_authenticate(self.user)
        response = self.client.patch(
            self.url, {"price_range_min": 500000, "price_range_max": 1000}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_category_rejected(self) -> None:
        self.client.force_authenticate(self.user)
        response = self.client.patch(self.url, {"preferred_categories": ["hovercraft"]}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("preferred_categories", response.data)

    def test_user_list_is_admin_only(self) -> None:
        self.client.force_authenticate(self.user)
        response = self.client.get(reverse("user-list"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
