"""Module containing the schemas for the mercator package."""

from mercator.schemas.cloning import CloneConfig, CloneOptions

__all__ = ["CloneConfig", "CloneOptions"]
