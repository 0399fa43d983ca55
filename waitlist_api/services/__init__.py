"""Services Layer — orchestrates pure core logic around infrastructure calls.

Invariants:
    - Services depend on core protocols, not on concrete infrastructure classes
"""
