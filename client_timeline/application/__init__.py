"""
Application layer - timeline use cases.

Coordinates the domain with the store and change feed through the ports
in ``interfaces``.
"""
