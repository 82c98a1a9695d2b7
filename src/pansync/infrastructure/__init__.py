"""Infrastructure layer — terminus, HTTP download, local database, dispatch.

This layer depends on stdlib and third-party libs (SQLAlchemy, httpx).
It must never import from services, commands, or output.
The service layer bridges between domain models and infrastructure.
"""
