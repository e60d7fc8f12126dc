"""Unit tests for the change order workflow and cost summaries."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from fieldflow.core.errors import NotFoundError, ValidationError
from fieldflow.models import (
    ChangeOrderStatus,
    ChangeOrderUpdate,
    CostCategoryCreate,
    NotificationType,
)
from fieldflow.services import (
    approve_change_order,
    create_change_order,
    summarize_costs,
)


class TestCreateChangeOrder:
    def test_creates_pending_and_notifies_client(self, storage, demo):
        project = demo.projects[1]

        order = create_change_order(
            storage,
            project,
            title="CO-002: Heated floor",
            description="Add electric underfloor heating",
            amount=Decimal("1450.5"),
            created_by=demo.admin.id,
        )

        assert order.status is ChangeOrderStatus.PENDING
        assert order.amount == Decimal("1450.50")
        assert order.approved_by is None and order.approved_at is None
        assert storage.get_change_orders_by_project(project.id) == [order]

        seeded, notification = storage.get_notifications_by_user(demo.client.id)
        assert seeded.related_id == demo.change_order.id
        assert notification.type is NotificationType.APPROVAL_NEEDED
        assert notification.related_id == order.id
        assert notification.related_type == "change_order"
        assert notification.read is False


class TestApproveChangeOrder:
    def test_approve_pending(self, storage, demo):
        order = demo.change_order

        approved = approve_change_order(storage, order.id, approver_id=demo.client.id)

        assert approved.status is ChangeOrderStatus.APPROVED
        assert approved.approved_by == demo.client.id
        assert approved.approved_at >= order.created_at
        assert storage.get_change_order(order.id) == approved

    def test_uses_injected_clock(self, storage, demo):
        stamp = datetime(2030, 5, 1, 12, 0, tzinfo=timezone.utc)

        approved = approve_change_order(
            storage, demo.change_order.id, approver_id=demo.admin.id, now=lambda: stamp
        )

        assert approved.approved_at == stamp

    def test_approval_is_one_way(self, storage, demo):
        approve_change_order(storage, demo.change_order.id, approver_id=demo.client.id)

        with pytest.raises(ValidationError) as exc_info:
            approve_change_order(storage, demo.change_order.id, approver_id=demo.client.id)

        assert exc_info.value.errors[0].field == "status"

    def test_rejected_cannot_be_approved(self, storage, demo):
        storage.update_change_order(
            demo.change_order.id, ChangeOrderUpdate(status=ChangeOrderStatus.REJECTED)
        )

        with pytest.raises(ValidationError):
            approve_change_order(storage, demo.change_order.id, approver_id=demo.admin.id)

    def test_missing_change_order(self, storage, demo):
        with pytest.raises(NotFoundError, match="Change order not found"):
            approve_change_order(storage, 999, approver_id=demo.admin.id)


class TestCostSummary:
    def test_totals_for_demo_kitchen(self, storage, demo):
        summary = summarize_costs(storage, demo.projects[0].id)

        assert summary.total_budget == Decimal("33000.00")
        assert summary.total_actual == Decimal("33650.00")
        assert summary.total_variance == Decimal("-650.00")
        assert summary.over_budget is True
        assert [c.name for c in summary.categories] == ["Materials", "Labor"]

    def test_unbudgeted_category_counts_toward_actual(self, storage, demo):
        project = demo.projects[1]
        storage.create_cost_category(
            CostCategoryCreate(project_id=project.id, name="Permits", budget_amount=Decimal("500"))
        )
        storage.create_cost_category(
            CostCategoryCreate(project_id=project.id, name="Misc", actual_amount=Decimal("120.10"))
        )

        summary = summarize_costs(storage, project.id)

        assert summary.total_budget == Decimal("500.00")
        assert summary.total_actual == Decimal("120.10")
        assert summary.total_variance == Decimal("379.90")
        assert summary.over_budget is False

    def test_empty_project(self, storage, demo):
        summary = summarize_costs(storage, 12345)

        assert summary.total_budget == Decimal("0.00")
        assert summary.categories == []

    def test_serialises_amounts_as_strings(self, storage, demo):
        payload = summarize_costs(storage, demo.projects[0].id).model_dump(mode="json", by_alias=True)

        assert payload["totalVariance"] == "-650.00"
        assert payload["categories"][0]["variance"] == "550.00"
