"""Configuration layer — pydantic models, TOML discovery, structlog setup."""
