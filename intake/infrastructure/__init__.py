"""Infrastructure Layer: cross-cutting concerns (logging, request tracing).

Invariants:
    - Infrastructure never imports from core/ domain logic

Design Decisions:
    - Thin wrappers over stdlib logging and Starlette middleware (ADR: ExMA single responsibility)
"""
