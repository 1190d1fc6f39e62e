"""Operation kinds carried by CQ events.

The same vocabulary describes both the base operation (the cache mutation
that triggered an event) and the query operation (how that mutation changed
the query's result set). A member's classification predicates decide which
bucket a listener records it in.
"""

from enum import Enum


class Operation(str, Enum):
    """Cache and query operation kinds."""

    # Entry creates
    CREATE = "create"
    PUTALL_CREATE = "putall.create"
    LOCAL_LOAD_CREATE = "local.load.create"

    # Entry updates
    UPDATE = "update"
    PUTALL_UPDATE = "putall.update"
    LOCAL_LOAD_UPDATE = "local.load.update"

    # Entry destroys
    DESTROY = "destroy"
    EXPIRE_DESTROY = "expire.destroy"
    EVICT_DESTROY = "evict.destroy"
    REMOVEALL_DESTROY = "removeall.destroy"

    # Entry invalidates
    INVALIDATE = "invalidate"
    LOCAL_INVALIDATE = "local.invalidate"
    EXPIRE_INVALIDATE = "expire.invalidate"

    # Region-wide operations
    REGION_CLEAR = "region.clear"
    REGION_INVALIDATE = "region.invalidate"
    REGION_DESTROY = "region.destroy"

    # Queue marker, never classified
    MARKER = "marker"

    def is_create(self) -> bool:
        return self in _CREATES

    def is_update(self) -> bool:
        return self in _UPDATES

    def is_destroy(self) -> bool:
        return self in _DESTROYS

    def is_invalidate(self) -> bool:
        return self in _INVALIDATES

    def is_clear(self) -> bool:
        return self is Operation.REGION_CLEAR

    def is_region_invalidate(self) -> bool:
        return self is Operation.REGION_INVALIDATE

    def is_entry(self) -> bool:
        """True for operations that affect a single entry."""
        return self.is_create() or self.is_update() or self.is_destroy() or self.is_invalidate()


_CREATES = frozenset(
    {Operation.CREATE, Operation.PUTALL_CREATE, Operation.LOCAL_LOAD_CREATE}
)
_UPDATES = frozenset(
    {Operation.UPDATE, Operation.PUTALL_UPDATE, Operation.LOCAL_LOAD_UPDATE}
)
_DESTROYS = frozenset(
    {
        Operation.DESTROY,
        Operation.EXPIRE_DESTROY,
        Operation.EVICT_DESTROY,
        Operation.REMOVEALL_DESTROY,
    }
)
_INVALIDATES = frozenset(
    {Operation.INVALIDATE, Operation.LOCAL_INVALIDATE, Operation.EXPIRE_INVALIDATE}
)
