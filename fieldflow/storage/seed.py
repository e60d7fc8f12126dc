"""Demo data for a fresh in-memory store.

Loads one company, an admin and a client account, two active projects for
that client, and a little history on the first project (two cost
categories, a pending change order awaiting the client's approval and a
daily log).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

import structlog

from fieldflow.auth.passwords import hash_password
from fieldflow.config import SeedConfig
from fieldflow.models import (
    ChangeOrder,
    Company,
    CompanyCreate,
    CostCategory,
    CostCategoryCreate,
    CostCategoryTag,
    DailyLog,
    DailyLogCreate,
    Project,
    ProjectCreate,
    ProjectStatus,
    Role,
    User,
    UserCreate,
)
from fieldflow.services.change_orders import create_change_order
from fieldflow.storage.base import Storage

logger = structlog.get_logger(__name__)


@dataclass
class DemoData:
    company: Company
    admin: User
    client: User
    projects: list[Project]
    cost_categories: list[CostCategory]
    change_order: ChangeOrder
    daily_log: DailyLog


def seed_demo_data(
    storage: Storage,
    seed: SeedConfig | None = None,
    bcrypt_rounds: int = 12,
) -> DemoData:
    """Populate ``storage`` with the demo company and its records.

    Args:
        storage: Empty entity store to fill
        seed: Seed passwords (defaults to the demo passwords)
        bcrypt_rounds: Cost factor for the seeded password hashes

    Returns:
        DemoData: The created records, for callers that need their handles
    """
    seed = seed or SeedConfig()

    company = storage.create_company(
        CompanyCreate(
            name="ABC Construction",
            address="123 Main St, Springfield",
            phone="(555) 123-4567",
            email="info@abcconstruction.com",
            license_number="LIC123456",
        )
    )

    admin = storage.create_user(
        UserCreate(
            username="admin",
            email="admin@abcconstruction.com",
            password_hash=hash_password(seed.admin_password, bcrypt_rounds),
            first_name="John",
            last_name="Doe",
            role=Role.ADMIN,
            company_id=company.id,
            phone="(555) 123-4567",
        )
    )
    client = storage.create_user(
        UserCreate(
            username="maria.johnson",
            email="maria@email.com",
            password_hash=hash_password(seed.client_password, bcrypt_rounds),
            first_name="Maria",
            last_name="Johnson",
            role=Role.CLIENT,
            company_id=None,
            phone="(555) 234-5678",
        )
    )

    kitchen = storage.create_project(
        ProjectCreate(
            name="Kitchen Remodel - Johnson Residence",
            description="Complete kitchen renovation including cabinets, countertops, and appliances",
            address="1234 Oak Street, Springfield",
            client_id=client.id,
            company_id=company.id,
            status=ProjectStatus.ACTIVE,
            budget_total=Decimal("25000.00"),
            start_date=date(2024, 3, 15),
            due_date=date(2024, 4, 30),
        )
    )
    bathroom = storage.create_project(
        ProjectCreate(
            name="Bathroom Addition - Smith House",
            description="New bathroom addition with modern fixtures",
            address="567 Pine Avenue, Springfield",
            client_id=client.id,
            company_id=company.id,
            status=ProjectStatus.ACTIVE,
            budget_total=Decimal("20000.00"),
            start_date=date(2024, 2, 28),
            due_date=date(2024, 3, 31),
        )
    )

    costs = [
        storage.create_cost_category(
            CostCategoryCreate(
                project_id=kitchen.id,
                name="Materials",
                category=CostCategoryTag.MATERIALS,
                budget_amount=Decimal("18000.00"),
                actual_amount=Decimal("17450.00"),
            )
        ),
        storage.create_cost_category(
            CostCategoryCreate(
                project_id=kitchen.id,
                name="Labor",
                category=CostCategoryTag.LABOR,
                budget_amount=Decimal("15000.00"),
                actual_amount=Decimal("16200.00"),
            )
        ),
    ]

    change_order = create_change_order(
        storage,
        kitchen,
        title="CO-001: Kitchen Island Addition",
        description="Add kitchen island with granite countertop and electrical outlets",
        amount=Decimal("3200.00"),
        created_by=admin.id,
    )

    daily_log = storage.create_daily_log(
        DailyLogCreate(
            project_id=kitchen.id,
            date=date.today(),
            weather="Clear",
            temperature="72°F",
            crew=["Mike", "Steve", "Tom"],
            notes="Completed electrical rough-in for kitchen outlets. All work passed inspection.",
            created_by=admin.id,
        )
    )

    logger.info("demo_data_seeded", company_id=company.id, projects=2)

    return DemoData(
        company=company,
        admin=admin,
        client=client,
        projects=[kitchen, bathroom],
        cost_categories=costs,
        change_order=change_order,
        daily_log=daily_log,
    )
