"""Infrastructure layer — project discovery, location checks, file I/O.

This layer depends on the stdlib and the domain layer.
It must never import from services, commands, or output.
"""
