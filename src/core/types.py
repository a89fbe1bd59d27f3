"""Type aliases for dynamic data structures throughout the application.

This module centralizes type definitions for data that cannot be statically
typed, providing clear semantic meaning for these types. All types defined
here should be JSON-serializable to support logging and response envelopes.
"""

from typing import Any

# Context dictionary for error details and debugging information
type ErrorContext = dict[str, Any]  # flexible error context

# Identifier of the tenant (store) that owns a configuration
type StoreId = str

# Natural key of a record inside an aggregate collection
type NaturalKey = str | int | tuple[str, str]
