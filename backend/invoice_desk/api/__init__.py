"""API Layer - FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses (PDF export excepted)

Design Decisions:
    - Thin routes delegate to core functions and services
"""
