"""
Application services layer (use cases).

Services orchestrate the ingestion pipeline and the catalog queries.
They coordinate between entities, ports, and external systems.

This layer contains:
- Anime and episode ingestion
- Title similarity matching
- Catalog reconciliation
- Library update orchestration and progress

Services depend on ports (interfaces) from core/, never on concrete
implementations from adapters/.
"""
