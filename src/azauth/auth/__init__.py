"""Authorizer resolution components.

This module provides:
- Resource-scoped authorizers usable as httpx auth
- Ordered multi-source resolution (file → CLI → environment)
- A single-slot cache for the management authorizer

Example:
    ```python
    from azauth.auth import AuthorizerResolver, NoAuthorizerError

    resolver = AuthorizerResolver(sources)
    try:
        authorizer = resolver.resolve("https://management.azure.com/")
    except NoAuthorizerError:
        ...
    ```
"""

from azauth.auth.authorizer import Authorizer, resource_to_scope
from azauth.auth.cache import AuthorizerCache
from azauth.auth.exceptions import (
    AuthError,
    NoAuthorizerError,
    SettingsUnavailableError,
    SourceUnavailableError,
)
from azauth.auth.resolver import AuthorizerResolver, ResolutionAttempt, ResolutionResult

__all__ = [
    "AuthError",
    "Authorizer",
    "AuthorizerCache",
    "AuthorizerResolver",
    "NoAuthorizerError",
    "ResolutionAttempt",
    "ResolutionResult",
    "SettingsUnavailableError",
    "SourceUnavailableError",
    "resource_to_scope",
]
