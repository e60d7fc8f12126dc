"""Entity store contract.

Every backend (the in-memory engine today, a relational one later) exposes
the same surface so callers never depend on how records are kept.

Contract:
- ``create_*`` assigns the next process-unique handle, stamps ``created_at``
  (and ``updated_at`` where the entity has one) and returns the full record.
- ``get_*`` returns the record or ``None``; a missing id is never an error.
- ``update_*`` merges only the fields the partial explicitly sets, returns
  the new record or ``None``; it never creates on a missing id.
- ``delete_*`` returns whether a record existed to remove.
- Scoped queries return matches in insertion order and an empty list when
  nothing matches or the parent is unknown. They never mutate.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

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
    User,
    UserCreate,
    UserUpdate,
)


class Storage(ABC):
    """Abstract entity store (see module docstring for the contract)."""

    # Users
    @abstractmethod
    def get_user(self, user_id: int) -> User | None: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> User | None: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> User | None: ...

    @abstractmethod
    def create_user(self, data: UserCreate) -> User: ...

    @abstractmethod
    def update_user(self, user_id: int, changes: UserUpdate) -> User | None: ...

    @abstractmethod
    def get_users_by_company(self, company_id: int) -> list[User]: ...

    # Companies
    @abstractmethod
    def get_company(self, company_id: int) -> Company | None: ...

    @abstractmethod
    def list_companies(self) -> list[Company]: ...

    @abstractmethod
    def create_company(self, data: CompanyCreate) -> Company: ...

    @abstractmethod
    def update_company(self, company_id: int, changes: CompanyUpdate) -> Company | None: ...

    # Projects
    @abstractmethod
    def get_project(self, project_id: int) -> Project | None: ...

    @abstractmethod
    def list_projects(self) -> list[Project]: ...

    @abstractmethod
    def get_projects_by_company(self, company_id: int) -> list[Project]: ...

    @abstractmethod
    def get_projects_by_client(self, client_id: int) -> list[Project]: ...

    @abstractmethod
    def create_project(self, data: ProjectCreate) -> Project: ...

    @abstractmethod
    def update_project(self, project_id: int, changes: ProjectUpdate) -> Project | None: ...

    @abstractmethod
    def delete_project(self, project_id: int) -> bool: ...

    # Project tasks
    @abstractmethod
    def get_project_task(self, task_id: int) -> ProjectTask | None: ...

    @abstractmethod
    def get_tasks_by_project(self, project_id: int) -> list[ProjectTask]: ...

    @abstractmethod
    def create_project_task(self, data: ProjectTaskCreate) -> ProjectTask: ...

    @abstractmethod
    def update_project_task(
        self, task_id: int, changes: ProjectTaskUpdate
    ) -> ProjectTask | None: ...

    @abstractmethod
    def delete_project_task(self, task_id: int) -> bool: ...

    # Cost categories
    @abstractmethod
    def get_cost_category(self, category_id: int) -> CostCategory | None: ...

    @abstractmethod
    def get_cost_categories_by_project(self, project_id: int) -> list[CostCategory]: ...

    @abstractmethod
    def create_cost_category(self, data: CostCategoryCreate) -> CostCategory: ...

    @abstractmethod
    def update_cost_category(
        self, category_id: int, changes: CostCategoryUpdate
    ) -> CostCategory | None: ...

    @abstractmethod
    def delete_cost_category(self, category_id: int) -> bool: ...

    # Change orders
    @abstractmethod
    def get_change_order(self, order_id: int) -> ChangeOrder | None: ...

    @abstractmethod
    def get_change_orders_by_project(self, project_id: int) -> list[ChangeOrder]: ...

    @abstractmethod
    def create_change_order(self, data: ChangeOrderCreate) -> ChangeOrder: ...

    @abstractmethod
    def update_change_order(
        self, order_id: int, changes: ChangeOrderUpdate
    ) -> ChangeOrder | None: ...

    @abstractmethod
    def delete_change_order(self, order_id: int) -> bool: ...

    # Daily logs
    @abstractmethod
    def get_daily_log(self, log_id: int) -> DailyLog | None: ...

    @abstractmethod
    def get_daily_logs_by_project(self, project_id: int) -> list[DailyLog]: ...

    @abstractmethod
    def create_daily_log(self, data: DailyLogCreate) -> DailyLog: ...

    @abstractmethod
    def update_daily_log(self, log_id: int, changes: DailyLogUpdate) -> DailyLog | None: ...

    @abstractmethod
    def delete_daily_log(self, log_id: int) -> bool: ...

    # Documents
    @abstractmethod
    def get_document(self, document_id: int) -> Document | None: ...

    @abstractmethod
    def get_documents_by_project(self, project_id: int) -> list[Document]: ...

    @abstractmethod
    def create_document(self, data: DocumentCreate) -> Document: ...

    @abstractmethod
    def update_document(
        self, document_id: int, changes: DocumentUpdate
    ) -> Document | None: ...

    @abstractmethod
    def delete_document(self, document_id: int) -> bool: ...

    # Contacts
    @abstractmethod
    def get_contact(self, contact_id: int) -> Contact | None: ...

    @abstractmethod
    def get_contacts_by_company(self, company_id: int) -> list[Contact]: ...

    @abstractmethod
    def get_contacts_by_type(
        self, company_id: int, contact_type: ContactType | str
    ) -> list[Contact]: ...

    @abstractmethod
    def create_contact(self, data: ContactCreate) -> Contact: ...

    @abstractmethod
    def update_contact(self, contact_id: int, changes: ContactUpdate) -> Contact | None: ...

    @abstractmethod
    def delete_contact(self, contact_id: int) -> bool: ...

    # Notifications
    @abstractmethod
    def get_notification(self, notification_id: int) -> Notification | None: ...

    @abstractmethod
    def get_notifications_by_user(self, user_id: int) -> list[Notification]: ...

    @abstractmethod
    def get_unread_notifications_by_user(self, user_id: int) -> list[Notification]: ...

    @abstractmethod
    def create_notification(self, data: NotificationCreate) -> Notification: ...

    @abstractmethod
    def mark_notification_as_read(self, notification_id: int) -> bool: ...

    @abstractmethod
    def mark_all_notifications_as_read(self, user_id: int) -> int: ...
