"""Service layer — the container registry and the command facade over it.

Services may import from the domain layer.
They must never import from commands or output.
"""
