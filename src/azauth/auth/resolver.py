"""Ordered, multi-source authorizer resolution.

Sources are tried in order (by default: file, CLI, environment). The first
source to produce an authorizer wins and no further source is called. When
every source fails the caller gets a single `NoAuthorizerError`; the reason
each source failed is only logged.

Example:
    ```python
    from azauth.auth import AuthorizerResolver
    from azauth.sources import default_sources

    resolver = AuthorizerResolver(default_sources(settings))
    authorizer = resolver.resolve("https://vault.azure.net")

    # Inspect every attempt without raising
    result = resolver.attempt("https://vault.azure.net")
    for attempt in result.attempts:
        print(attempt.source, attempt.outcome)
    ```
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from azauth.auth.authorizer import Authorizer
from azauth.auth.exceptions import NoAuthorizerError, SourceUnavailableError

if TYPE_CHECKING:
    from azauth.sources.base import CredentialSource


@dataclass(frozen=True)
class ResolutionAttempt:
    """Outcome of asking one source for an authorizer."""

    source: str
    error: SourceUnavailableError | None = None

    @property
    def outcome(self) -> str:
        return "ok" if self.error is None else "failed"


@dataclass
class ResolutionResult:
    """Result of one resolution: the authorizer (if any) and every attempt made."""

    resource: str
    authorizer: Authorizer | None = None
    attempts: list[ResolutionAttempt] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.authorizer is not None


class AuthorizerResolver:
    """Resolve authorizers by trying credential sources in priority order.

    Args:
        sources: Credential sources, highest priority first.
        logger: Logger for per-source diagnostics (default: this module's logger).
    """

    def __init__(self, sources: Sequence["CredentialSource"], logger: logging.Logger | None = None):
        self.sources = tuple(sources)
        self._logger = logger or logging.getLogger(__name__)

    def attempt(self, resource: str) -> ResolutionResult:
        """Try each source once, stopping at the first success.

        Args:
            resource: Resource to authorize. Passed unmodified to every source.

        Returns:
            The result, with the attempt log of every source that was called.
        """
        result = ResolutionResult(resource=resource)
        for source in self.sources:
            try:
                authorizer = source.resolve(resource)
            except SourceUnavailableError as e:
                result.attempts.append(ResolutionAttempt(source=source.name, error=e))
                self._logger.warning(
                    f"No authorizer from {source.name} for {resource}: {e}",
                    extra={"method": source.name, "resource": resource},
                )
                continue

            result.attempts.append(ResolutionAttempt(source=source.name))
            result.authorizer = authorizer
            self._logger.info(
                f"Resolved authorizer for {resource} from {source.name}",
                extra={"method": source.name, "resource": resource},
            )
            break
        return result

    def resolve(self, resource: str) -> Authorizer:
        """Return an authorizer for ``resource`` from the first working source.

        Raises:
            NoAuthorizerError: If every source failed.
        """
        result = self.attempt(resource)
        if result.authorizer is None:
            tried = ", ".join(a.source for a in result.attempts) or "none"
            self._logger.error(f"No authorizer available for {resource} (tried: {tried})", extra={"resource": resource})
            raise NoAuthorizerError()
        return result.authorizer
