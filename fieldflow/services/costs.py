"""Project cost roll-ups."""

from __future__ import annotations

from decimal import Decimal

from pydantic import Field

from fieldflow.models import CamelModel, CostCategory
from fieldflow.storage.base import Storage

ZERO = Decimal("0.00")


class CostSummary(CamelModel):
    project_id: int
    total_budget: Decimal = ZERO
    total_actual: Decimal = ZERO
    total_variance: Decimal = ZERO
    over_budget: bool = False
    categories: list[CostCategory] = Field(default_factory=list)


def summarize_costs(storage: Storage, project_id: int) -> CostSummary:
    """Sum budget, actual and variance across a project's cost categories.

    Categories without a budget add to the actual total only. Variance is
    budget minus actual, so a negative total means the project is over.
    """
    categories = storage.get_cost_categories_by_project(project_id)
    total_budget = sum((c.budget_amount for c in categories if c.budget_amount is not None), ZERO)
    total_actual = sum((c.actual_amount for c in categories), ZERO)
    total_variance = total_budget - total_actual
    return CostSummary(
        project_id=project_id,
        total_budget=total_budget,
        total_actual=total_actual,
        total_variance=total_variance,
        over_budget=total_variance < 0,
        categories=categories,
    )
