"""Bill list views."""

from bill_tracker.queries.view import compute_view, matches_query, matches_status

__all__ = ["compute_view", "matches_query", "matches_status"]
