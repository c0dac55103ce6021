from .actor import actor
from .movie import movie

__all__ = [
    "actor",
    "movie",
]
