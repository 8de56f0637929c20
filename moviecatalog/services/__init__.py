"""
Application services layer (use cases).

Services orchestrate the domain logic to fulfill application use cases.
They coordinate between entities, ports, and external systems.

This layer contains:
- CatalogService: cache-first orchestration of the TMDB catalog

Services depend on ports (interfaces) from core/ and receive their
adapters by injection (see container.py).
"""
