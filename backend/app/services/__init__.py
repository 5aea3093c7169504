"""Services Layer: email sending and the GraphQL schema resolvers.

Invariants:
    - Services depend on core/ and on injected infrastructure, never on api/
"""
