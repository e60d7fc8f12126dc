"""HTTP API for FieldFlowPM (FastAPI)."""
