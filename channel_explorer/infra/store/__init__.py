"""Document store adapters for channel records."""

from channel_explorer.infra.store.base import (
    BoundaryMode,
    ChannelStore,
    Constraint,
    ConstraintOp,
    validate_constraints,
)
from channel_explorer.infra.store.factory import create_channel_store
from channel_explorer.infra.store.memory import MemoryChannelStore
from channel_explorer.infra.store.sql import SQLChannelStore

__all__ = [
    "BoundaryMode",
    "ChannelStore",
    "Constraint",
    "ConstraintOp",
    "MemoryChannelStore",
    "SQLChannelStore",
    "create_channel_store",
    "validate_constraints",
]
