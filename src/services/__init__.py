"""
Application services layer (use cases).

Services orchestrate the domain logic to fulfill application use cases.
They coordinate between entities, ports, and external systems.

This layer contains:
- The organizer pipeline (filter, parse, deduplicate, resolve, place)
- Metadata resolution across the provider chain
- The deduplication gate over the processing history
- The cron job scheduler and the background worker

Services depend on ports (interfaces) from core/, never on concrete
implementations from adapters/.
"""
