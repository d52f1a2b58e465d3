# ============================================================================
# FILE CONTEXT - GAZETTEER MODULE
# ============================================================================
# STATUS: Standalone Module - Marine Regions gazetteer access
# PURPOSE: Gazetteer records and the place-relation graph
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: GazetteerService, RelationGraphResolver, RelationEdge, RelationType, Direction, get_gazetteer_triggers
# DEPENDENCIES: httpx, pydantic, rdflib, azure-functions
# ENTRY_POINTS: from gazetteer import get_gazetteer_triggers
# ============================================================================

"""
Gazetteer - Standalone Module

    gazetteer/
    ├── models.py      # RelationType, Direction, RelationEdge
    ├── relations.py   # RelationGraphResolver
    ├── service.py     # GazetteerService (records + relations)
    └── triggers.py    # Azure Functions HTTP handlers
"""

from .models import Direction, RelationEdge, RelationType
from .relations import RelationGraphResolver
from .service import GazetteerService
from .triggers import get_gazetteer_triggers

__version__ = "1.0.0"
__all__ = [
    "Direction",
    "RelationEdge",
    "RelationType",
    "RelationGraphResolver",
    "GazetteerService",
    "get_gazetteer_triggers"
]
