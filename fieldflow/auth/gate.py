"""Authorization gate: one declarative policy table consulted by every route.

A caller asks ``authorize(user, action, resource)`` where ``resource`` is a
:class:`ResourceDescriptor` holding the ownership facts of the concrete
record (its company, its project's client, its owning user). The policy
table maps each role and resource kind to rules; a rule grants a set of
actions when the resource falls inside the rule's scope.

Denials come in two kinds. ``UNAUTHENTICATED`` means there is no caller at
all and maps to 401; ``FORBIDDEN`` means a known caller lacks the role or
ownership and maps to 403.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from fieldflow.core.errors import AuthenticationError, AuthorizationError
from fieldflow.models import (
    Company,
    Contact,
    Notification,
    Project,
    PublicUser,
    Role,
    User,
)

T = TypeVar("T")


class Action(str, Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    APPROVE = "approve"


class ResourceKind(str, Enum):
    USER = "user"
    COMPANY = "company"
    PROJECT = "project"
    TASK = "task"
    COST = "cost"
    CHANGE_ORDER = "change_order"
    DAILY_LOG = "daily_log"
    DOCUMENT = "document"
    CONTACT = "contact"
    NOTIFICATION = "notification"


PROJECT_SCOPED = (
    ResourceKind.PROJECT,
    ResourceKind.TASK,
    ResourceKind.COST,
    ResourceKind.CHANGE_ORDER,
    ResourceKind.DAILY_LOG,
    ResourceKind.DOCUMENT,
)


class Scope(str, Enum):
    ANY = "any"
    COMPANY = "company"  # resource belongs to the caller's company
    CLIENT = "client"  # caller is the project's client
    OWNER = "owner"  # resource belongs to the caller personally
    SELF_OR_COMPANY = "self_or_company"


class DenyReason(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True, slots=True)
class ResourceDescriptor:
    """Kind and ownership facts of the resource being acted on."""

    kind: ResourceKind
    company_id: int | None = None
    client_id: int | None = None
    owner_id: int | None = None

    @classmethod
    def of_project(
        cls, project: Project, kind: ResourceKind = ResourceKind.PROJECT
    ) -> ResourceDescriptor:
        """Describe a project, or a record of ``kind`` that hangs off it."""
        return cls(kind, company_id=project.company_id, client_id=project.client_id)

    @classmethod
    def of_user(cls, user: User | PublicUser) -> ResourceDescriptor:
        return cls(ResourceKind.USER, company_id=user.company_id, owner_id=user.id)

    @classmethod
    def of_company(cls, company: Company) -> ResourceDescriptor:
        return cls(ResourceKind.COMPANY, company_id=company.id)

    @classmethod
    def of_contact(cls, contact: Contact) -> ResourceDescriptor:
        return cls(ResourceKind.CONTACT, company_id=contact.company_id)

    @classmethod
    def of_notification(cls, notification: Notification) -> ResourceDescriptor:
        return cls(ResourceKind.NOTIFICATION, owner_id=notification.user_id)


@dataclass(frozen=True, slots=True)
class Decision:
    allowed: bool
    reason: DenyReason | None = None
    message: str | None = None

    @classmethod
    def allow(cls) -> Decision:
        return cls(True)

    @classmethod
    def deny(cls, reason: DenyReason, message: str) -> Decision:
        return cls(False, reason, message)


@dataclass(frozen=True, slots=True)
class Rule:
    actions: frozenset[Action]
    scope: Scope


def _rule(scope: Scope, *actions: Action) -> Rule:
    return Rule(frozenset(actions), scope)


READ = Action.READ
CREATE = Action.CREATE
UPDATE = Action.UPDATE
DELETE = Action.DELETE
APPROVE = Action.APPROVE

_ALL_ACTIONS = tuple(Action)
_WRITE = (READ, CREATE, UPDATE, DELETE)

# Rules every role gets on its own account and inbox
_PERSONAL: dict[ResourceKind, list[Rule]] = {
    ResourceKind.USER: [_rule(Scope.OWNER, READ, UPDATE)],
    ResourceKind.NOTIFICATION: [_rule(Scope.OWNER, READ, UPDATE)],
}


def _staff_policy(*, can_write: bool) -> dict[ResourceKind, list[Rule]]:
    actions = _WRITE if can_write else (READ,)
    policy: dict[ResourceKind, list[Rule]] = {
        kind: [_rule(Scope.COMPANY, *actions)] for kind in PROJECT_SCOPED
    }
    policy[ResourceKind.CONTACT] = [_rule(Scope.COMPANY, *actions)]
    policy[ResourceKind.COMPANY] = [_rule(Scope.COMPANY, READ)]
    policy[ResourceKind.USER] = [
        _rule(Scope.SELF_OR_COMPANY, READ),
        _rule(Scope.OWNER, UPDATE),
    ]
    policy[ResourceKind.NOTIFICATION] = _PERSONAL[ResourceKind.NOTIFICATION]
    if can_write:
        # Deleting a whole project is reserved for admins
        policy[ResourceKind.PROJECT] = [_rule(Scope.COMPANY, READ, CREATE, UPDATE)]
        policy[ResourceKind.CHANGE_ORDER].append(_rule(Scope.COMPANY, APPROVE))
    return policy


def _client_policy() -> dict[ResourceKind, list[Rule]]:
    policy: dict[ResourceKind, list[Rule]] = {
        kind: [_rule(Scope.CLIENT, READ)] for kind in PROJECT_SCOPED
    }
    policy[ResourceKind.CHANGE_ORDER].append(_rule(Scope.CLIENT, APPROVE))
    policy.update(_PERSONAL)
    return policy


POLICY: dict[Role, dict[ResourceKind, list[Rule]]] = {
    Role.ADMIN: {kind: [_rule(Scope.ANY, *_ALL_ACTIONS)] for kind in ResourceKind},
    Role.EMPLOYEE: _staff_policy(can_write=True),
    Role.SUBCONTRACTOR: _staff_policy(can_write=False),
    Role.CLIENT: _client_policy(),
}


def _in_scope(scope: Scope, user: PublicUser, resource: ResourceDescriptor) -> bool:
    same_company = user.company_id is not None and resource.company_id == user.company_id
    owner = resource.owner_id is not None and resource.owner_id == user.id
    if scope is Scope.ANY:
        return True
    if scope is Scope.COMPANY:
        return same_company
    if scope is Scope.CLIENT:
        return resource.client_id is not None and resource.client_id == user.id
    if scope is Scope.OWNER:
        return owner
    if scope is Scope.SELF_OR_COMPANY:
        return owner or same_company
    return False


class AuthorizationGate:
    """Evaluates the policy table for a caller, action and resource."""

    def __init__(self, policy: dict[Role, dict[ResourceKind, list[Rule]]] | None = None):
        self.policy = policy if policy is not None else POLICY

    def authorize(
        self,
        user: PublicUser | None,
        action: Action,
        resource: ResourceDescriptor,
    ) -> Decision:
        if user is None:
            return Decision.deny(DenyReason.UNAUTHENTICATED, "Authentication required")

        rules = self.policy.get(user.role, {}).get(resource.kind, [])
        granting = [rule for rule in rules if action in rule.actions]
        if not granting:
            return Decision.deny(DenyReason.FORBIDDEN, "Insufficient permissions")
        if any(_in_scope(rule.scope, user, resource) for rule in granting):
            return Decision.allow()
        return Decision.deny(DenyReason.FORBIDDEN, "Access denied")

    def can(
        self,
        user: PublicUser | None,
        action: Action,
        resource: ResourceDescriptor,
    ) -> bool:
        return self.authorize(user, action, resource).allowed

    def enforce(
        self,
        user: PublicUser | None,
        action: Action,
        resource: ResourceDescriptor,
    ) -> None:
        """Raise unless ``user`` may perform ``action`` on ``resource``.

        Raises:
            AuthenticationError: No caller.
            AuthorizationError: Caller lacks role or ownership.
        """
        decision = self.authorize(user, action, resource)
        if decision.allowed:
            return
        if decision.reason is DenyReason.UNAUTHENTICATED:
            raise AuthenticationError(decision.message)
        raise AuthorizationError(decision.message)

    def filter_visible(
        self,
        user: PublicUser | None,
        kind: ResourceKind,
        records: Iterable[T],
        describe: Callable[[T], ResourceDescriptor],
    ) -> list[T]:
        """Keep the records ``user`` may read, preserving order."""
        visible = []
        for record in records:
            descriptor = describe(record)
            if descriptor.kind is not kind:
                descriptor = ResourceDescriptor(
                    kind, descriptor.company_id, descriptor.client_id, descriptor.owner_id
                )
            if self.can(user, Action.READ, descriptor):
                visible.append(record)
        return visible
