"""In-memory entity store.

One dict per entity type keyed by handle. Python dicts keep insertion
order and replacing a key's value keeps its slot, so scoped listings come
back in creation order even after updates. Handles come from a single
counter shared by every table.
"""

from __future__ import annotations

import itertools
import threading
from collections.abc import Callable, Iterator
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

import structlog
from pydantic import BaseModel

from fieldflow.models import (
    ChangeOrder,
    ChangeOrderCreate,
    ChangeOrderUpdate,
    Company,
    CompanyCreate,
    CompanyUpdate,
    Contact,
    ContactCreate,
    ContactType,
    ContactUpdate,
    CostCategory,
    CostCategoryCreate,
    CostCategoryUpdate,
    DailyLog,
    DailyLogCreate,
    DailyLogUpdate,
    Document,
    DocumentCreate,
    DocumentUpdate,
    Notification,
    NotificationCreate,
    Project,
    ProjectCreate,
    ProjectTask,
    ProjectTaskCreate,
    ProjectTaskUpdate,
    ProjectUpdate,
    Record,
    User,
    UserCreate,
    UserUpdate,
    changes_of,
)
from fieldflow.storage.base import Storage

logger = structlog.get_logger(__name__)

R = TypeVar("R", bound=Record)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _Table(Generic[R]):
    """Keyed collection for one entity type."""

    def __init__(self, record_type: type[R]):
        self.record_type = record_type
        self.rows: dict[int, R] = {}

    def __iter__(self) -> Iterator[R]:
        # Snapshot so callers can't observe concurrent inserts mid-iteration
        return iter(list(self.rows.values()))

    def where(self, predicate: Callable[[R], bool]) -> list[R]:
        return [row for row in self if predicate(row)]

    def first(self, predicate: Callable[[R], bool]) -> R | None:
        return next((row for row in self if predicate(row)), None)


class MemStorage(Storage):
    """Process-local implementation of :class:`Storage`.

    Every public method runs under one re-entrant lock, so a read always
    sees a consistent snapshot and each write is atomic even when the ASGI
    server dispatches sync handlers onto a thread pool.
    """

    def __init__(self, clock: Clock = utcnow):
        self._clock = clock
        self._lock = threading.RLock()
        self._ids = itertools.count(1)

        self._users = _Table(User)
        self._companies = _Table(Company)
        self._projects = _Table(Project)
        self._tasks = _Table(ProjectTask)
        self._costs = _Table(CostCategory)
        self._change_orders = _Table(ChangeOrder)
        self._daily_logs = _Table(DailyLog)
        self._documents = _Table(Document)
        self._contacts = _Table(Contact)
        self._notifications = _Table(Notification)

    # ------------------------------------------------------------------
    # Generic table operations
    # ------------------------------------------------------------------

    def _insert(self, table: _Table[R], data: BaseModel) -> R:
        with self._lock:
            now = self._clock()
            values: dict[str, Any] = data.model_dump()
            values["id"] = next(self._ids)
            values["created_at"] = now
            if "updated_at" in table.record_type.model_fields:
                values["updated_at"] = now
            record = table.record_type.model_validate(values)
            table.rows[record.id] = record
            logger.debug("record_created", kind=table.record_type.__name__, id=record.id)
            return record

    def _get(self, table: _Table[R], record_id: int) -> R | None:
        with self._lock:
            return table.rows.get(record_id)

    def _update(self, table: _Table[R], record_id: int, changes: BaseModel | dict) -> R | None:
        with self._lock:
            current = table.rows.get(record_id)
            if current is None:
                return None
            values = current.model_dump()
            values.update(changes_of(changes))
            # Handle and creation stamp are server-owned
            values["id"] = current.id
            values["created_at"] = current.created_at
            if "updated_at" in table.record_type.model_fields:
                values["updated_at"] = self._clock()
            record = table.record_type.model_validate(values)
            table.rows[record_id] = record
            return record

    def _delete(self, table: _Table[R], record_id: int) -> bool:
        with self._lock:
            return table.rows.pop(record_id, None) is not None

    def _where(self, table: _Table[R], predicate: Callable[[R], bool]) -> list[R]:
        with self._lock:
            return table.where(predicate)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def get_user(self, user_id: int) -> User | None:
        return self._get(self._users, user_id)

    def get_user_by_username(self, username: str) -> User | None:
        with self._lock:
            return self._users.first(lambda u: u.username == username)

    def get_user_by_email(self, email: str) -> User | None:
        with self._lock:
            return self._users.first(lambda u: u.email == email)

    def create_user(self, data: UserCreate) -> User:
        return self._insert(self._users, data)

    def update_user(self, user_id: int, changes: UserUpdate) -> User | None:
        return self._update(self._users, user_id, changes)

    def get_users_by_company(self, company_id: int) -> list[User]:
        return self._where(self._users, lambda u: u.company_id == company_id)

    # ------------------------------------------------------------------
    # Companies
    # ------------------------------------------------------------------

    def get_company(self, company_id: int) -> Company | None:
        return self._get(self._companies, company_id)

    def list_companies(self) -> list[Company]:
        return self._where(self._companies, lambda c: True)

    def create_company(self, data: CompanyCreate) -> Company:
        return self._insert(self._companies, data)

    def update_company(self, company_id: int, changes: CompanyUpdate) -> Company | None:
        return self._update(self._companies, company_id, changes)

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def get_project(self, project_id: int) -> Project | None:
        return self._get(self._projects, project_id)

    def list_projects(self) -> list[Project]:
        return self._where(self._projects, lambda p: True)

    def get_projects_by_company(self, company_id: int) -> list[Project]:
        return self._where(self._projects, lambda p: p.company_id == company_id)

    def get_projects_by_client(self, client_id: int) -> list[Project]:
        return self._where(self._projects, lambda p: p.client_id == client_id)

    def create_project(self, data: ProjectCreate) -> Project:
        return self._insert(self._projects, data)

    def update_project(self, project_id: int, changes: ProjectUpdate) -> Project | None:
        return self._update(self._projects, project_id, changes)

    def delete_project(self, project_id: int) -> bool:
        return self._delete(self._projects, project_id)

    # ------------------------------------------------------------------
    # Project-scoped records
    # ------------------------------------------------------------------

    def get_project_task(self, task_id: int) -> ProjectTask | None:
        return self._get(self._tasks, task_id)

    def get_tasks_by_project(self, project_id: int) -> list[ProjectTask]:
        return self._where(self._tasks, lambda t: t.project_id == project_id)

    def create_project_task(self, data: ProjectTaskCreate) -> ProjectTask:
        return self._insert(self._tasks, data)

    def update_project_task(
        self, task_id: int, changes: ProjectTaskUpdate
    ) -> ProjectTask | None:
        return self._update(self._tasks, task_id, changes)

    def delete_project_task(self, task_id: int) -> bool:
        return self._delete(self._tasks, task_id)

    def get_cost_category(self, category_id: int) -> CostCategory | None:
        return self._get(self._costs, category_id)

    def get_cost_categories_by_project(self, project_id: int) -> list[CostCategory]:
        return self._where(self._costs, lambda c: c.project_id == project_id)

    def create_cost_category(self, data: CostCategoryCreate) -> CostCategory:
        return self._insert(self._costs, data)

    def update_cost_category(
        self, category_id: int, changes: CostCategoryUpdate
    ) -> CostCategory | None:
        return self._update(self._costs, category_id, changes)

    def delete_cost_category(self, category_id: int) -> bool:
        return self._delete(self._costs, category_id)

    def get_change_order(self, order_id: int) -> ChangeOrder | None:
        return self._get(self._change_orders, order_id)

    def get_change_orders_by_project(self, project_id: int) -> list[ChangeOrder]:
        return self._where(self._change_orders, lambda c: c.project_id == project_id)

    def create_change_order(self, data: ChangeOrderCreate) -> ChangeOrder:
        return self._insert(self._change_orders, data)

    def update_change_order(
        self, order_id: int, changes: ChangeOrderUpdate
    ) -> ChangeOrder | None:
        return self._update(self._change_orders, order_id, changes)

    def delete_change_order(self, order_id: int) -> bool:
        return self._delete(self._change_orders, order_id)

    def get_daily_log(self, log_id: int) -> DailyLog | None:
        return self._get(self._daily_logs, log_id)

    def get_daily_logs_by_project(self, project_id: int) -> list[DailyLog]:
        return self._where(self._daily_logs, lambda d: d.project_id == project_id)

    def create_daily_log(self, data: DailyLogCreate) -> DailyLog:
        return self._insert(self._daily_logs, data)

    def update_daily_log(self, log_id: int, changes: DailyLogUpdate) -> DailyLog | None:
        return self._update(self._daily_logs, log_id, changes)

    def delete_daily_log(self, log_id: int) -> bool:
        return self._delete(self._daily_logs, log_id)

    def get_document(self, document_id: int) -> Document | None:
        return self._get(self._documents, document_id)

    def get_documents_by_project(self, project_id: int) -> list[Document]:
        return self._where(self._documents, lambda d: d.project_id == project_id)

    def create_document(self, data: DocumentCreate) -> Document:
        return self._insert(self._documents, data)

    def update_document(
        self, document_id: int, changes: DocumentUpdate
    ) -> Document | None:
        return self._update(self._documents, document_id, changes)

    def delete_document(self, document_id: int) -> bool:
        return self._delete(self._documents, document_id)

    # ------------------------------------------------------------------
    # Contacts
    # ------------------------------------------------------------------

    def get_contact(self, contact_id: int) -> Contact | None:
        return self._get(self._contacts, contact_id)

    def get_contacts_by_company(self, company_id: int) -> list[Contact]:
        return self._where(self._contacts, lambda c: c.company_id == company_id)

    def get_contacts_by_type(
        self, company_id: int, contact_type: ContactType | str
    ) -> list[Contact]:
        try:
            wanted = ContactType(contact_type)
        except ValueError:
            return []
        return self._where(
            self._contacts, lambda c: c.company_id == company_id and c.type == wanted
        )

    def create_contact(self, data: ContactCreate) -> Contact:
        return self._insert(self._contacts, data)

    def update_contact(self, contact_id: int, changes: ContactUpdate) -> Contact | None:
        return self._update(self._contacts, contact_id, changes)

    def delete_contact(self, contact_id: int) -> bool:
        return self._delete(self._contacts, contact_id)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def get_notification(self, notification_id: int) -> Notification | None:
        return self._get(self._notifications, notification_id)

    def get_notifications_by_user(self, user_id: int) -> list[Notification]:
        return self._where(self._notifications, lambda n: n.user_id == user_id)

    def get_unread_notifications_by_user(self, user_id: int) -> list[Notification]:
        return self._where(
            self._notifications, lambda n: n.user_id == user_id and not n.read
        )

    def create_notification(self, data: NotificationCreate) -> Notification:
        return self._insert(self._notifications, data)

    def mark_notification_as_read(self, notification_id: int) -> bool:
        return self._update(self._notifications, notification_id, {"read": True}) is not None

    def mark_all_notifications_as_read(self, user_id: int) -> int:
        with self._lock:
            unread = self.get_unread_notifications_by_user(user_id)
            for notification in unread:
                self._update(self._notifications, notification.id, {"read": True})
            return len(unread)
