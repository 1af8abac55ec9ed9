"""API views for the booking domain."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.payments.serializers import ReceiptSerializer
from apps.payments.services import generate_receipt

from . import services
from .models import Booking
from .serializers import BookingCreateSerializer, BookingSerializer, PaymentVerificationSerializer


class IsBookingStakeholder(permissions.BasePermission):
    """Арендатор и администраторы платформы имеют доступ к бронированию."""

    def has_object_permission(self, request, view, obj: Booking):  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        if user.is_platform_admin():
            return True
        return obj.renter_id == user.id


class BookingViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Viewset для создания бронирований и подтверждения оплаты."""

    queryset = Booking.objects.select_related("equipment", "renter").all()
    permission_classes = [permissions.IsAuthenticated, IsBookingStakeholder]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        if self.action == "verify_payment":
            return PaymentVerificationSerializer
        return BookingSerializer

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if not user.is_authenticated:
            return qs.none()
        if user.is_platform_admin():
            renter_id = self.request.query_params.get("user")
            if renter_id and renter_id.isdigit():
                return qs.filter(renter_id=int(renter_id))
            return qs
        return qs.filter(renter=user)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = services.create_booking(
            request.user,
            serializer.validated_data["equipment"],
            serializer.validated_data["start_date"],
            serializer.validated_data["end_date"],
        )
        data = {
            "booking": BookingSerializer(booking, context=self.get_serializer_context()).data,
            "payment": services.payment_config(booking),
        }
        return Response(data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"], url_path="verify-payment")
    def verify_payment(self, request):  # type: ignore
        """Client-submitted payment proof after checkout."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = services.verify_and_confirm(
            data["booking_id"],
            data["gateway_order_id"],
            data["gateway_payment_id"],
            data["signature"],
            user=request.user,
        )
        return Response(
            {
                "booking": BookingSerializer(booking, context=self.get_serializer_context()).data,
                "receipt": ReceiptSerializer(booking.receipt).data,
            }
        )

    @action(detail=True, methods=["get"], url_path="payment-config")
    def payment_config(self, request, pk=None):  # type: ignore
        booking = self.get_object()
        return Response(services.payment_config(booking))

    @action(detail=True, methods=["get"])
    def receipt(self, request, pk=None):  # type: ignore
        booking = self.get_object()
        return Response(ReceiptSerializer(generate_receipt(booking)).data)
