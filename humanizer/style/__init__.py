"""Stylometric profiling: extraction, comparison, composition and caching."""

from .profile import (
    StylometricProfile,
    Deviation,
    ProfileComparison,
    EMPTY_PROFILE,
)
from .cache import ProfileCache, default_cache
from .analyzer import StylometricAnalyzer, analyze_text
from .comparator import ProfileComparator, compare_profiles
from .composite import CompositeProfileBuilder, create_composite_profile

__all__ = [
    "StylometricProfile",
    "Deviation",
    "ProfileComparison",
    "EMPTY_PROFILE",
    "ProfileCache",
    "default_cache",
    "StylometricAnalyzer",
    "analyze_text",
    "ProfileComparator",
    "compare_profiles",
    "CompositeProfileBuilder",
    "create_composite_profile",
]
