"""Domain workflows layered over the entity store."""

from fieldflow.services.change_orders import approve_change_order, create_change_order
from fieldflow.services.costs import CostSummary, summarize_costs

__all__ = [
    "CostSummary",
    "approve_change_order",
    "create_change_order",
    "summarize_costs",
]
