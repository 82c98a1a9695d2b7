"""Domain layer — site references, snapshot artifacts, sync codes.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
