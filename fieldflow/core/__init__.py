"""Cross-cutting concerns: logging, error taxonomy, audit trail."""
