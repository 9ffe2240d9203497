"""
Database entity models.

Each module groups the entities of one pitfall, problem and solution side by
side:

- read_only_fields: write-once attribute vs. plain attribute
- immutable_collections: read-only, mutable and frozen collection annotations
- data_classes: dataclass entities vs. identity-equality entities
- model_classes: SQLModel table models
"""

from . import data_classes, immutable_collections, model_classes, read_only_fields

__all__ = [
    "data_classes",
    "immutable_collections",
    "model_classes",
    "read_only_fields",
]
