"""Infrastructure Layer: external service clients and cross-cutting concerns.

Invariants:
    - External calls wrapped with timeout and error mapping (EmailDeliveryError)
    - Logging configured here, once, from settings
"""
