"""Intake: two-phase submission service (register metadata, then stream one file).

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""

__version__ = "1.0.0"
