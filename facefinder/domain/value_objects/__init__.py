"""Value objects package."""
from .matching import MatchResult, PhotoMatch

__all__ = ["MatchResult", "PhotoMatch"]
