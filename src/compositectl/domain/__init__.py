"""Domain layer: identifiers, plan model, metadata parsing, and errors.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
