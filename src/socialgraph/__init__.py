"""Interactive force-directed viewer for social networks."""
from socialgraph.errors import (
    InvalidActionError, InvalidArgumentError, MissingColumnError, NetworkError, NotFoundError
)

__version__ = "0.1.0"

__all__ = [
    "InvalidActionError",
    "InvalidArgumentError",
    "MissingColumnError",
    "NetworkError",
    "NotFoundError",
]
