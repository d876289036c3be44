"""
app/validators package marker.
"""

from app.validators.resource_validator import ResourceValidator

__all__ = [
    "ResourceValidator",
]
