from __future__ import annotations

import random
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

from modules.artisans.models import Artisan
from modules.manufacturing.constants import STAGE_SEQUENCE, Priority
from modules.manufacturing.dtos import AdvanceStageDTO, CreateWorkOrderDTO
from modules.manufacturing.models import WorkOrder
from modules.manufacturing.repositories.django_repository import (
    WorkOrderDjangoRepository,
)
from modules.manufacturing.services import WorkOrderService

RUG_DESIGNS = [
    ("Custom Moroccan", "MOR"),
    ("Persian Heritage", "PER"),
    ("Nordic Minimal", "NOR"),
    ("Kilim Geometric", "KIL"),
    ("Abstract Wave", "ABS"),
    ("Vintage Medallion", "VIN"),
]
RUG_SIZES = ["3x5", "4x6", "5x7", "6x9", "8x10", "9x12"]


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def add_arguments(self, parser):
        parser.add_argument(
            "--work-orders",
            type=int,
            default=30,
            help="Number of work orders to create.",
        )

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users_created = self._seed_users()
        artisans = self._seed_artisans()
        work_orders_created = self._seed_work_orders(artisans, options["work_orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"artisans={len(artisans)}, "
                f"work_orders={work_orders_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="floor").exists():
            User.objects.create_user("floor", password="floor123")
            created += 1
        return created

    def _seed_artisans(self) -> list[Artisan]:
        self.stdout.write("Creating artisans...")
        artisans: list[Artisan] = []
        directory = [
            ("Ahmed Khan", "ahmed@example.com", "Master Weaver", ["tufting", "trimming"], True, "4.80"),
            ("Fatima Hassan", "fatima@example.com", "QC Specialist", ["qc", "finishing"], True, "4.90"),
            ("Ali Raza", "ali@example.com", "Yarn Specialist", ["yarn_planning"], True, "4.60"),
            ("Zara Malik", "zara@example.com", "Finishing Expert", ["finishing", "washing", "drying"], False, "4.70"),
        ]
        for name, email, role, specialties, active, rating in directory:
            artisan, _ = Artisan.all_objects.get_or_create(
                email=email,
                defaults={
                    "name": name,
                    "role": role,
                    "specialties": specialties,
                    "active": active,
                    "average_rating": Decimal(rating),
                },
            )
            artisans.append(artisan)
        self.stdout.write(self.style.SUCCESS("Creating artisans... Done!"))
        return artisans

    def _seed_work_orders(self, artisans: list[Artisan], count: int) -> int:
        self.stdout.write("Creating work orders...")
        service = WorkOrderService(work_order_repository=WorkOrderDjangoRepository())
        active_artisans = [a for a in artisans if a.active]
        created = 0

        for i in range(count):
            order_item_id = f"SEED-ITEM-{i + 1:04d}"
            if WorkOrder.all_objects.filter(order_item_id=order_item_id).exists():
                continue

            design, code = random.choice(RUG_DESIGNS)
            size = random.choice(RUG_SIZES)
            assignee = random.choice(active_artisans) if active_artisans else None
            work_order = service.create_work_order(
                CreateWorkOrderDTO(
                    order_id=f"SEED-ORDER-{i // 2 + 1:04d}",
                    order_item_id=order_item_id,
                    title=f"{design} {size}",
                    size=size,
                    sku=f"RUG-{code}-{size.replace('x', '')}",
                    priority=random.choice(Priority.values),
                    assigned_to=str(assignee.id) if assignee else None,
                    due_date=timezone.now() + timedelta(days=random.randint(3, 45)),
                )
            )

            # Walk the pipeline through the engine so the history is real.
            for _ in range(random.randint(0, len(STAGE_SEQUENCE) - 1)):
                service.advance_stage(
                    str(work_order.id),
                    AdvanceStageDTO(assigned_to=work_order.assigned_to),
                )
            created += 1

        self.stdout.write(self.style.SUCCESS("Creating work orders... Done!"))
        return created
