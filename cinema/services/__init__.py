from . import actors, movies, relations
from .transaction import run_in_transaction

__all__ = [
    "actors",
    "movies",
    "relations",
    "run_in_transaction",
]
