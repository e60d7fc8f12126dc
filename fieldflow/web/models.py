"""Request bodies for the FieldFlowPM API.

Handles, parent ids taken from the path, and actor ids taken from the
session are not part of these bodies; routes fill them in before handing
``*Create`` models to the store.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Annotated

from pydantic import AfterValidator, Field

from fieldflow.auth.passwords import PASSWORD_TOO_LONG, password_fits
from fieldflow.models import (
    CamelModel,
    ContactType,
    CostCategoryTag,
    DocumentCategory,
    Money,
    NonNegativeMoney,
    ProjectStatus,
    PublicUser,
    Role,
    TaskStatus,
)

# ============================================================================
# Auth & Users
# ============================================================================


def _fits_bcrypt(value: str) -> str:
    if not password_fits(value):
        raise ValueError(PASSWORD_TOO_LONG)
    return value


NewPassword = Annotated[str, Field(min_length=6), AfterValidator(_fits_bcrypt)]


class LoginRequest(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class LoginResponse(CamelModel):
    user: PublicUser


class MessageResponse(CamelModel):
    message: str


class UserCreateRequest(CamelModel):
    username: str = Field(min_length=1)
    email: str = Field(min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    password: NewPassword
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    role: Role
    company_id: int | None = None
    phone: str | None = None
    is_active: bool = True


class UserUpdateRequest(CamelModel):
    """Profile changes. Role, company, username and active flag are admin-only."""

    username: str | None = Field(default=None, min_length=1)
    email: str | None = Field(default=None, min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    password: NewPassword | None = None
    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    role: Role | None = None
    company_id: int | None = None
    phone: str | None = None
    is_active: bool | None = None


ADMIN_ONLY_USER_FIELDS = frozenset({"username", "role", "company_id", "is_active"})


# ============================================================================
# Projects & Schedule
# ============================================================================


class ProjectCreateRequest(CamelModel):
    name: str = Field(min_length=1)
    description: str | None = None
    address: str = Field(min_length=1)
    client_id: int
    company_id: int | None = None  # defaults to the caller's company
    status: ProjectStatus = ProjectStatus.PLANNING
    budget_total: NonNegativeMoney | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    due_date: dt.date | None = None


class TaskCreateRequest(CamelModel):
    name: str = Field(min_length=1)
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    assigned_to: int | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    duration: int | None = Field(default=None, ge=0)
    dependencies: list[int] = Field(default_factory=list)
    category: str | None = None


# ============================================================================
# Costs & Change Orders
# ============================================================================


class CostCategoryCreateRequest(CamelModel):
    name: str = Field(min_length=1)
    category: CostCategoryTag | None = None
    budget_amount: NonNegativeMoney | None = None
    actual_amount: NonNegativeMoney = Decimal("0.00")


class ChangeOrderCreateRequest(CamelModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    amount: Money


# ============================================================================
# Field records
# ============================================================================


class DailyLogCreateRequest(CamelModel):
    date: dt.date | None = None  # defaults to today
    weather: str | None = None
    temperature: str | None = None
    crew: list[str] = Field(default_factory=list)
    notes: str = Field(min_length=1)


class DocumentCreateRequest(CamelModel):
    name: str = Field(min_length=1)
    original_name: str = Field(min_length=1)
    file_path: str = Field(min_length=1)
    file_size: int | None = Field(default=None, ge=0)
    mime_type: str | None = None
    category: DocumentCategory | None = None


class ContactCreateRequest(CamelModel):
    company_id: int | None = None  # defaults to the caller's company
    type: ContactType
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    company: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None


class ReadAllResponse(CamelModel):
    updated: int
