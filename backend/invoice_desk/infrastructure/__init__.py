"""Infrastructure Layer - persistence backends, external clients, cross-cutting concerns.

Invariants:
    - Backend failures are mapped to core/errors.py types before leaving this layer
    - External calls wrapped with retry/timeout/error mapping
"""
