"""
ShuttleTrack: live position tracking for shuttle buses.

Application package root. This is a small service using
hexagonal architecture (ports & adapters).

Bounded contexts:
    - fleet: Bus records, their storage and their wire format.

Layers:
    - domain: Entities, errors, storage port (ABC) and the repository
      that enforces record invariants.
    - infrastructure: Storage adapters implementing the domain port.
    - interfaces: JSON:API codec, FastAPI router.
    - shared: Cross-cutting concerns (errors, middleware, logging).
"""

__version__ = "0.1.0"
