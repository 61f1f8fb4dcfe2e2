"""
Transforms Package

RESPONSIBILITY: Produce new encoded records with redacted or enriched
context. The input record is never modified.
"""

from .sanitizer import ContextSanitizer, redact
from .injector import ContextInjector, InjectionOptions, METADATA_KEY, RAW_CONTEXT_KEY

__all__ = [
    'ContextSanitizer', 'redact',
    'ContextInjector', 'InjectionOptions', 'METADATA_KEY', 'RAW_CONTEXT_KEY',
]
