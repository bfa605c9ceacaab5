"""Pydantic Schemas: request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)

Design Decisions:
    - Separate from core: schemas are API contracts, core records are domain state (ADR: DDD boundary)
"""
