"""Domain layer — taxonomy, selection, and URL state.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
