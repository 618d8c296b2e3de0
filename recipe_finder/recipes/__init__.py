"""Recipe service client."""

from .fetcher import RecipeFetcher

__all__ = ["RecipeFetcher"]
