"""
Domain layer - Business entities, models, schemas, enums and the meal catalog.
"""

from domain import enums, models, schemas, catalog

__all__ = ["enums", "models", "schemas", "catalog"]
