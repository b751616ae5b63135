"""Domain layer - Pure cache-aside vocabulary.

This layer contains value objects, protocols (ports) and errors of the
cache layer. It has NO dependencies on Redis or any framework - it is
pure Python.

Structure:
- value_objects/: Cache entries, lock leases, rebuild tasks (immutable)
- protocols/: Store, lock, scheduler, serializer and logger interfaces
- enums/: Query strategies
- errors/: Query-level failures (load, lock contention, rejection)
"""
