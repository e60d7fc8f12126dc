"""Unit tests for FieldFlowPM API route modules.

One test module per router under ``fieldflow.web.routes``. Each test talks
to the full app through FastAPI's TestClient, with a seeded in-memory
store and a session registry on a fake clock (see tests/conftest.py).
"""
