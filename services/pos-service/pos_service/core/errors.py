"""
POS Service — Domain errors

Raised inside the order/stock/table operations and translated to HTTP
responses by the routers. Any of them aborts the enclosing transaction.
"""


class PosError(Exception):
    """Base class for every error the order lifecycle can surface."""


class NotFoundError(PosError):
    """Referenced order, table, product or order item does not exist."""


class TableReservedError(PosError):
    """Target table is already occupied by an open order."""


class InsufficientStockError(PosError):
    """A stock adjustment would drive a product's stock below zero."""


class CodeParseError(PosError):
    """The last order code could not be parsed into a sequence number."""


class ValidationError(PosError):
    """Request rejected by a business rule before any side effect."""


class InvalidStateError(PosError):
    """Operation not allowed for the order's current payment status."""


class DuplicateError(PosError):
    """A unique attribute (product name/code or order code) is already taken."""
