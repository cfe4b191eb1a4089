"""Feature reconciliation: collect, compare and persist generated features."""
