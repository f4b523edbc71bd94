"""Configuration — pydantic models, unified settings, discovery, logging."""
