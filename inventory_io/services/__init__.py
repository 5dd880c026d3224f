"""Import reconciliation, orchestration and label services."""
