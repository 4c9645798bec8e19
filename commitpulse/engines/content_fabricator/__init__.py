"""Content fabricator engine — working-tree edits backing each synthetic commit."""

from commitpulse.engines.content_fabricator.fabricator import (
    Fabricator,
    RotatingFabricator,
    apply_mutations,
)
from commitpulse.engines.content_fabricator.models import FileMutation

__all__ = ["Fabricator", "FileMutation", "RotatingFabricator", "apply_mutations"]
