"""User-facing collections derived from definition requests."""
from .favorites import FavoritesSet, QuizList
from .history import HistoryLedger
from .models import (
    FavoriteItem,
    HistoryItem,
    HistoryOutcome,
    IdentityTuple,
    QuizItem,
    SortOrder,
    decode_list,
    encode_list,
    sort_view,
)

__all__ = [
    "FavoriteItem",
    "FavoritesSet",
    "HistoryItem",
    "HistoryLedger",
    "HistoryOutcome",
    "IdentityTuple",
    "QuizItem",
    "QuizList",
    "SortOrder",
    "decode_list",
    "encode_list",
    "sort_view",
]
