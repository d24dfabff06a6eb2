from __future__ import annotations

import random
from decimal import Decimal

from django.core.management.base import BaseCommand

from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import InsufficientStock
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

SEED_CUSTOMERS = [
    ("Ana Souza", "ana@example.com"),
    ("Bruno Lima", "bruno@example.com"),
    ("Carla Mendes", "carla@example.com"),
    ("Daniel Costa", "daniel@example.com"),
    ("Eduardo Alves", "eduardo@example.com"),
]

SEED_PRODUCTS = [
    ("Mechanical Keyboard", Decimal("349.90"), 40),
    ("Wireless Mouse", Decimal("129.90"), 80),
    ('Monitor 27"', Decimal("1899.00"), 15),
    ("USB-C Hub", Decimal("219.50"), 60),
    ("Laptop Stand", Decimal("159.00"), 35),
    ("Webcam Full HD", Decimal("289.90"), 25),
    ("Headset", Decimal("399.00"), 30),
    ("Desk Lamp", Decimal("89.90"), 0),
]


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def add_arguments(self, parser):
        parser.add_argument("--orders", type=int, default=20)

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        customers = self._seed_customers()
        products = self._seed_products()
        orders_created, rejected = self._seed_orders(
            customers, products, options["orders"]
        )

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"customers={len(customers)}, "
                f"products={len(products)}, "
                f"orders={orders_created}, "
                f"rejected={rejected}"
            )
        )

    def _seed_customers(self) -> list[Customer]:
        customers: list[Customer] = []
        for name, email in SEED_CUSTOMERS:
            customer, _ = Customer.objects.get_or_create(
                email=email, defaults={"name": name}
            )
            customers.append(customer)
        return customers

    def _seed_products(self) -> list[Product]:
        products: list[Product] = []
        for name, price, stock in SEED_PRODUCTS:
            product, _ = Product.objects.get_or_create(
                name=name, defaults={"price": price, "stock_quantity": stock}
            )
            products.append(product)
        return products

    def _seed_orders(
        self, customers: list[Customer], products: list[Product], count: int
    ) -> tuple[int, int]:
        """Place orders through ``OrderService`` so stock rules apply."""
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        created = 0
        rejected = 0
        for _ in range(count):
            picked = random.sample(products, k=random.randint(1, 3))
            dto = CreateOrderDTO(
                customer_id=random.choice(customers).id,
                items=[
                    CreateOrderItemDTO(
                        product_id=product.id, quantity=random.randint(1, 4)
                    )
                    for product in picked
                ],
            )
            try:
                service.create_order(dto)
            except InsufficientStock as exc:
                self.stdout.write(self.style.WARNING(f"Skipped order: {exc}"))
                rejected += 1
                continue
            created += 1
        return created, rejected
