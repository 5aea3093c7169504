"""GraphQL Error Gateway: error formatting pipeline and guarded email sending.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
