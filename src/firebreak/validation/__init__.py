"""Equipment configuration checks."""

from .equipment import validate_equipment

__all__ = ["validate_equipment"]
