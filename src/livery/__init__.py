"""livery - Type-safe, runtime-resolvable design-token theming for Python."""

# Context
from livery.context import ContextStatus, ThemeContext, ThemeSnapshot, ThemeStorage

# CSS serialization
from livery.css import (
    CssVariableOptions,
    create_css_var_helper,
    css_var,
    escape_css_value,
    needs_css_escaping,
    to_css_string,
    to_css_string_all,
    to_css_variables,
)

# Duration parsing
from livery.duration import parse_duration

# Errors
from livery.errors import (
    FetchError,
    LiveryError,
    SchemaDefinitionError,
    ValidationError,
    ValidationIssue,
)

# Request-boundary extraction
from livery.extraction import (
    ThemeExtraction,
    create_theme_extractor,
    extract_from_header,
    extract_from_path,
    extract_from_query,
    extract_from_subdomain,
)

# HTTP helpers
from livery.fetchers import create_http_fetcher
from livery.headers import get_cache_headers, get_theme_from_headers
from livery.paths import get_at_path

# Resolver
from livery.resolver import ThemeResolver, create_resolver

# Schema
from livery.schema import Schema, TokenDefinition, create_schema, t

# Core types
from livery.types import (
    CacheEntry,
    CacheState,
    Duration,
    ResolveStatus,
    Theme,
    TokenType,
)

# Validation
from livery.validation import merge, validate_partial
from livery.validators import coerce_value, validate_value

__version__ = "0.1.0"

__all__ = [
    "CacheEntry",
    "CacheState",
    "ContextStatus",
    "CssVariableOptions",
    "Duration",
    "FetchError",
    "LiveryError",
    "ResolveStatus",
    "Schema",
    "SchemaDefinitionError",
    "Theme",
    "ThemeContext",
    "ThemeExtraction",
    "ThemeResolver",
    "ThemeSnapshot",
    "ThemeStorage",
    "TokenDefinition",
    "TokenType",
    "ValidationError",
    "ValidationIssue",
    "coerce_value",
    "create_css_var_helper",
    "create_http_fetcher",
    "create_resolver",
    "create_schema",
    "create_theme_extractor",
    "css_var",
    "escape_css_value",
    "extract_from_header",
    "extract_from_path",
    "extract_from_query",
    "extract_from_subdomain",
    "get_at_path",
    "get_cache_headers",
    "get_theme_from_headers",
    "merge",
    "needs_css_escaping",
    "parse_duration",
    "t",
    "to_css_string",
    "to_css_string_all",
    "to_css_variables",
    "validate_partial",
    "validate_value",
]
