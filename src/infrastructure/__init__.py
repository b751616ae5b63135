"""Infrastructure layer - Adapters and external integrations.

This layer contains implementations of domain protocols (ports):
- cache/: Redis store, distributed lock, cache-aside client, metrics
- jobs/: Background rebuild scheduler
- logging/: structlog adapter

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
