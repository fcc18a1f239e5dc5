"""Services Layer - orchestration between the pure core and the IO shell.

Invariants:
    - Services own the async side of every operation; core stays synchronous
    - Failures from collaborators are reported, never allowed to corrupt the store
"""
