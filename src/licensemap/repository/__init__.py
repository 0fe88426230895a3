"""Knowledge source storage backends."""

from .base import (
    FeatureNotFoundError,
    SourceNotFoundError,
    SourceRepository,
    TaxonomyValidationError,
    with_feature_link,
)
from .json_store import JsonDirectorySourceRepository, load_documents
from .memory import InMemorySourceRepository

__all__ = [
    "SourceRepository",
    "SourceNotFoundError",
    "FeatureNotFoundError",
    "TaxonomyValidationError",
    "InMemorySourceRepository",
    "JsonDirectorySourceRepository",
    "load_documents",
    "with_feature_link",
]
