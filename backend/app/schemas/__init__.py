"""Pydantic Schemas: request/response validation at service boundaries.

Invariants:
    - Schemas validate at system boundary (send requests, transport messages)
"""
