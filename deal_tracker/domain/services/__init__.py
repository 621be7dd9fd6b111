"""Serviços puros do domínio."""

from . import field_normalizer, query_builder, record_sanitizer
from .query_builder import SearchCriteria, QueryFilter
from .record_sanitizer import sanitize

__all__ = [
    "field_normalizer",
    "query_builder",
    "record_sanitizer",
    "SearchCriteria",
    "QueryFilter",
    "sanitize",
]
