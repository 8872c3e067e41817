"""
Data models for extracted TypeORM entities.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, Tuple

from extraction.config import RELATION, UNKNOWN


class RelationType(str, Enum):
    """Cardinality of a relation field, named after its decorator."""

    MANY_TO_ONE = "ManyToOne"
    ONE_TO_ONE = "OneToOne"
    ONE_TO_MANY = "OneToMany"
    MANY_TO_MANY = "ManyToMany"


@dataclass(frozen=True)
class FieldDescriptor:
    """Normalized metadata for one decorated entity member.

    Scalar columns carry ``is_primary``/``is_required``; relations carry
    ``type == "relation"`` plus ``relation_type``/``target_entity``. A member
    decorated with both a column and a relation decorator keeps the flags set
    by the column and the relation attributes, in decorator order.

    Attributes:
        name: Member identifier.
        type: Declared column type, ``"unknown"`` or ``"relation"``.
        is_primary: Whether the member carries ``@PrimaryGeneratedColumn``.
        is_required: Whether ``nullable: false`` was declared explicitly.
        relation_type: Relation cardinality, or None for scalar columns.
        target_entity: Referenced entity name, ``"unknown"``, or None.
        is_unique: Uniqueness marker read by the Markdown export. Never set
            by the extractor.
    """

    name: str
    type: str = UNKNOWN
    is_primary: Optional[bool] = None
    is_required: Optional[bool] = None
    relation_type: Optional[RelationType] = None
    target_entity: Optional[str] = None
    is_unique: bool = False

    @property
    def is_relation(self) -> bool:
        return self.type == RELATION

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase shape used by the JSON export.

        Keys for attributes that were never set are omitted.
        """
        result: Dict[str, Any] = {"name": self.name, "type": self.type}
        if self.is_primary is not None:
            result["isPrimary"] = self.is_primary
        if self.is_required is not None:
            result["isRequired"] = self.is_required
        if self.relation_type is not None:
            result["relationType"] = self.relation_type.value
        if self.target_entity is not None:
            result["targetEntity"] = self.target_entity
        if self.is_unique:
            result["isUnique"] = True
        return result


@dataclass(frozen=True)
class EntityRecord:
    """A decorated entity class and its fields in declaration order."""

    name: str
    fields: Tuple[FieldDescriptor, ...] = field(default_factory=tuple)
    source_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the entity to a dictionary suitable for JSON serialization."""
        return {
            "name": self.name,
            "fields": [f.to_dict() for f in self.fields],
        }
