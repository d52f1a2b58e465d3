# ============================================================================
# FILE CONTEXT - GAZETTEER MODELS
# ============================================================================
# STATUS: Standalone Models - Gazetteer relation graph
# PURPOSE: Relation types, directions and the RelationEdge model
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: RelationType, Direction, RelationEdge, ALL_TYPES, BOTH_DIRECTIONS
# INTERFACES: Pydantic BaseModel
# DEPENDENCIES: pydantic, enum
# ============================================================================

"""
Gazetteer Relation Models

An MRGID (Marine Regions Global Identifier) is an opaque positive integer.
Relations are directed: `upper` points to a broader place (Belgian EEZ ->
Belgium), `lower` to a narrower one.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

ALL_TYPES = "all"
BOTH_DIRECTIONS = "both"


class RelationType(str, Enum):
    """Relation types reported by the gazetteer."""
    PARTOF = "partof"
    PARTLYPARTOF = "partlypartof"
    ADJACENTTO = "adjacentto"
    SIMILARTO = "similarto"
    ADMINISTRATIVEPARTOF = "administrativepartof"
    INFLUENCEDBY = "influencedby"


class Direction(str, Enum):
    """Direction of a relation relative to the queried MRGID."""
    UPPER = "upper"
    LOWER = "lower"


class RelationEdge(BaseModel):
    """One directed edge of the place-relation graph."""
    model_config = ConfigDict(frozen=True)

    source_id: int = Field(gt=0, description="Queried MRGID")
    target_id: int = Field(gt=0, description="Related MRGID")
    relation_type: RelationType
    direction: Direction
    target_name: Optional[str] = Field(
        default=None,
        description="Preferred gazetteer name of the related place"
    )

    @property
    def key(self):
        """Identity used for deduplication."""
        return (self.target_id, self.relation_type, self.direction)
