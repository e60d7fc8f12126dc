"""FieldFlowPM Pydantic models for type-safe data validation.

Entity records are what the store keeps; ``*Create`` models are the insert
shapes (everything but the server-stamped handle and timestamps); ``*Update``
models carry partial changes and only their explicitly set fields are merged.

Currency amounts are ``Decimal`` quantised to cents on the way in, so sums
and differences stay exact and serialise as two-decimal strings.
"""

from __future__ import annotations

import datetime as dt
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

CENTS = Decimal("0.01")


def quantize_money(value: Decimal) -> Decimal:
    """Round a currency value to two decimal places (half-up)."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


Money = Annotated[Decimal, Field(max_digits=12), AfterValidator(quantize_money)]
NonNegativeMoney = Annotated[Decimal, Field(ge=0, max_digits=12), AfterValidator(quantize_money)]


class Role(str, Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"
    SUBCONTRACTOR = "subcontractor"
    CLIENT = "client"


class ProjectStatus(str, Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on-hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class ChangeOrderStatus(str, Enum):
    """Change order lifecycle. Approval is one-way: pending -> approved."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SIGNED = "signed"


class CostCategoryTag(str, Enum):
    MATERIALS = "materials"
    LABOR = "labor"
    EQUIPMENT = "equipment"
    PERMITS = "permits"
    OTHER = "other"


class DocumentCategory(str, Enum):
    PERMIT = "permit"
    CONTRACT = "contract"
    PHOTO = "photo"
    PLAN = "plan"
    OTHER = "other"


class ContactType(str, Enum):
    CLIENT = "client"
    SUBCONTRACTOR = "subcontractor"
    VENDOR = "vendor"
    LEAD = "lead"


class NotificationType(str, Enum):
    SCHEDULE_CHANGE = "schedule_change"
    APPROVAL_NEEDED = "approval_needed"
    BUDGET_ALERT = "budget_alert"
    GENERAL = "general"


class CamelModel(BaseModel):
    """Base for every wire-visible model: camelCase JSON, snake_case Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )


class Record(CamelModel):
    """Stored entity: a process-unique handle plus its creation stamp."""

    model_config = ConfigDict(frozen=True)

    id: int
    created_at: datetime


# ============================================================================
# Users & Companies
# ============================================================================


class UserCreate(CamelModel):
    username: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password_hash: str
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    role: Role
    company_id: int | None = None
    phone: str | None = None
    is_active: bool = True


class UserUpdate(CamelModel):
    username: str | None = Field(default=None, min_length=1)
    email: str | None = Field(default=None, min_length=3)
    password_hash: str | None = None
    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    role: Role | None = None
    company_id: int | None = None
    phone: str | None = None
    is_active: bool | None = None


class User(Record, UserCreate):
    """Internal user record. Holds the credential hash; never serialise it."""


class PublicUser(Record):
    """User projection safe to return to clients (no credential)."""

    username: str
    email: str
    first_name: str
    last_name: str
    role: Role
    company_id: int | None = None
    phone: str | None = None
    is_active: bool = True

    @classmethod
    def from_user(cls, user: User) -> PublicUser:
        return cls.model_validate(user.model_dump(exclude={"password_hash"}))


class CompanyCreate(CamelModel):
    name: str = Field(min_length=1)
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    license_number: str | None = None


class CompanyUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    license_number: str | None = None


class Company(Record, CompanyCreate):
    pass


# ============================================================================
# Projects & Schedule
# ============================================================================


class ProjectCreate(CamelModel):
    name: str = Field(min_length=1)
    description: str | None = None
    address: str = Field(min_length=1)
    client_id: int
    company_id: int
    status: ProjectStatus = ProjectStatus.PLANNING
    budget_total: NonNegativeMoney | None = None
    start_date: date | None = None
    end_date: date | None = None
    due_date: date | None = None


class ProjectUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    address: str | None = Field(default=None, min_length=1)
    client_id: int | None = None
    status: ProjectStatus | None = None
    budget_total: NonNegativeMoney | None = None
    start_date: date | None = None
    end_date: date | None = None
    due_date: date | None = None


class Project(Record, ProjectCreate):
    updated_at: datetime


class ProjectTaskCreate(CamelModel):
    project_id: int
    name: str = Field(min_length=1)
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    assigned_to: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    duration: int | None = Field(default=None, ge=0)  # days
    dependencies: list[int] = Field(default_factory=list)
    category: str | None = None


class ProjectTaskUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    status: TaskStatus | None = None
    assigned_to: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    duration: int | None = Field(default=None, ge=0)
    dependencies: list[int] | None = None
    category: str | None = None


class ProjectTask(Record, ProjectTaskCreate):
    pass


# ============================================================================
# Costs & Change Orders
# ============================================================================


class CostCategoryCreate(CamelModel):
    project_id: int
    name: str = Field(min_length=1)
    category: CostCategoryTag | None = None
    budget_amount: NonNegativeMoney | None = None
    actual_amount: NonNegativeMoney = Decimal("0.00")


class CostCategoryUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    category: CostCategoryTag | None = None
    budget_amount: NonNegativeMoney | None = None
    actual_amount: NonNegativeMoney | None = None


class CostCategory(Record, CostCategoryCreate):
    @computed_field  # type: ignore[prop-decorator]
    @property
    def variance(self) -> Decimal | None:
        """Budget minus actual; positive means under budget."""
        if self.budget_amount is None:
            return None
        return self.budget_amount - self.actual_amount


class ChangeOrderCreate(CamelModel):
    project_id: int
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    amount: Money
    status: ChangeOrderStatus = ChangeOrderStatus.PENDING
    created_by: int


class ChangeOrderUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, min_length=1)
    amount: Money | None = None
    status: ChangeOrderStatus | None = None
    approved_by: int | None = None
    approved_at: datetime | None = None
    signed_at: datetime | None = None


class ChangeOrder(Record, ChangeOrderCreate):
    approved_by: int | None = None
    approved_at: datetime | None = None
    signed_at: datetime | None = None


# ============================================================================
# Field records
# ============================================================================


class DailyLogCreate(CamelModel):
    project_id: int
    date: dt.date
    weather: str | None = None
    temperature: str | None = None
    crew: list[str] = Field(default_factory=list)
    notes: str = Field(min_length=1)
    created_by: int


class DailyLogUpdate(CamelModel):
    date: dt.date | None = None
    weather: str | None = None
    temperature: str | None = None
    crew: list[str] | None = None
    notes: str | None = Field(default=None, min_length=1)


class DailyLog(Record, DailyLogCreate):
    pass


class DocumentCreate(CamelModel):
    project_id: int
    name: str = Field(min_length=1)
    original_name: str = Field(min_length=1)
    file_path: str = Field(min_length=1)
    file_size: int | None = Field(default=None, ge=0)
    mime_type: str | None = None
    category: DocumentCategory | None = None
    uploaded_by: int


class DocumentUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    category: DocumentCategory | None = None


class Document(Record, DocumentCreate):
    pass


class ContactCreate(CamelModel):
    company_id: int
    type: ContactType
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    company: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None


class ContactUpdate(CamelModel):
    type: ContactType | None = None
    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    company: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None


class Contact(Record, ContactCreate):
    pass


class NotificationCreate(CamelModel):
    user_id: int
    title: str = Field(min_length=1)
    message: str = Field(min_length=1)
    type: NotificationType = NotificationType.GENERAL
    read: bool = False
    related_id: int | None = None
    related_type: str | None = None


class Notification(Record, NotificationCreate):
    pass


def changes_of(partial: BaseModel | dict[str, Any]) -> dict[str, Any]:
    """Return only the fields a partial update explicitly set."""
    if isinstance(partial, BaseModel):
        return partial.model_dump(exclude_unset=True)
    return dict(partial)
