"""
Core layer: domain models, interfaces, exceptions and the upload services.

Nothing in this layer talks to the network; transports are injected through
the interfaces in ``core.interfaces``.
"""
