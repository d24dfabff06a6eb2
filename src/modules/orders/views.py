"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes. The view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.filters import OrderingFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import ConcurrentModification, StorageError, error_response
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import (
    CustomerNotFound,
    InsufficientStock,
    OrderNotFound,
    ProductNotFound,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CreateOrderSerializer,
    OrderListSerializer,
    OrderSerializer,
)
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository


class OrderViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for Order operations (create, retrieve, list).

    Uses ``OrderService`` with injected repositories (DIP).
    Orders are immutable once created: no update or delete actions.
    """

    queryset = Order.objects.all()
    serializer_class = OrderListSerializer
    filterset_class = OrderFilter
    ordering_fields = ["created_at", "total_amount"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._repository = OrderDjangoRepository()
        self._service = OrderService(
            order_repository=self._repository,
            customer_repository=CustomerDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )

    def get_queryset(self):
        if self.action == "list":
            return self._repository.summary_queryset()
        return self._repository.queryset()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Returns 201 with the created order; 404 for an unknown customer or
        product; 409 for insufficient stock or a concurrent stock change;
        503 when the database could not commit.
        """
        create_serializer = CreateOrderSerializer(data=request.data)
        create_serializer.is_valid(raise_exception=True)

        data = create_serializer.validated_data
        dto = CreateOrderDTO(
            customer_id=data["customer_id"],
            items=[
                CreateOrderItemDTO(
                    product_id=item["product_id"],
                    quantity=item["quantity"],
                )
                for item in data["items"]
            ],
        )

        try:
            order = self._service.create_order(dto)
        except CustomerNotFound as exc:
            return error_response(
                status.HTTP_404_NOT_FOUND, "customer_not_found", str(exc), "customer_id"
            )
        except ProductNotFound as exc:
            return error_response(
                status.HTTP_404_NOT_FOUND, "product_not_found", str(exc), "items"
            )
        except InsufficientStock as exc:
            return error_response(
                status.HTTP_409_CONFLICT, "insufficient_stock", str(exc), "items"
            )
        except ConcurrentModification as exc:
            return error_response(
                status.HTTP_409_CONFLICT, "concurrent_modification", str(exc)
            )
        except StorageError as exc:
            return error_response(
                status.HTTP_503_SERVICE_UNAVAILABLE, "storage_error", str(exc)
            )

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # Retrieve
    # ------------------------------------------------------------------

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(pk or "")
        except OrderNotFound:
            return error_response(
                status.HTTP_404_NOT_FOUND, "order_not_found", "Order not found."
            )
        return Response(OrderSerializer(order).data)
