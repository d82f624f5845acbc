"""Application layer: catalog lifecycle, definition providers and services.

Depends on the domain layer and on ports in application.interfaces; never
imports infrastructure.
"""
