"""Domain layer — path flattening and reference rewriting.

This layer depends only on the stdlib.
It must never import from services, infrastructure, commands, or config.
"""
