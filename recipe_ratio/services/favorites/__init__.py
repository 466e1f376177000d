"""Favorites domain components split by responsibility.

``FavoritesPersistence`` owns the store queries, ``FavoritesPager`` drives the
paginated favorites list, and ``FavoriteController`` reconciles a single recipe
snapshot with its favorite row.
"""

from .controller import FavoriteController, FavoriteStatus, Notifier
from .pager import FavoritesPager
from .persistence import FavoritesPersistence

__all__ = [
    "FavoriteController",
    "FavoriteStatus",
    "FavoritesPager",
    "FavoritesPersistence",
    "Notifier",
]
