"""
Row context handed between the query interpreter and the resolvers.

The resolvers only ever read `active_vertex`; any object exposing that attribute
can stand in for a DataContext.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from models import Entity


@dataclass
class DataContext:
    """One interpreter row carrying zero or one active vertex"""

    active_vertex: Optional[Entity] = None
    values: Dict[str, Any] = field(default_factory=dict)
