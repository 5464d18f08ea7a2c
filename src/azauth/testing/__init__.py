"""Testing utilities for code using azauth.

Fake credentials and scripted sources, so resolution can be tested without
Azure, the CLI, or the network.

Example:
    ```python
    from azauth import AzureAuth
    from azauth.testing import StaticTokenCredential, StubSource

    file_source = StubSource("file", credential=StaticTokenCredential("tok"))
    cli_source = StubSource("cli", error="not logged in")

    auth = AzureAuth(sources=[file_source, cli_source], environ={})
    auth.resolve_for_resource("https://management.azure.com/")
    assert file_source.calls == ["https://management.azure.com/"]
    assert cli_source.calls == []
    ```
"""

import time
from typing import Any

from azure.core.credentials import AccessToken, TokenCredential
from azure.identity import CredentialUnavailableError

from azauth.auth.exceptions import SourceUnavailableError
from azauth.sources.base import CredentialSource


class StaticTokenCredential:
    """Token credential that always returns the same token.

    Attributes:
        scopes: Scopes of every ``get_token`` call, in order.
        closed: Whether ``close`` was called.
    """

    def __init__(self, token: str = "test-token", expires_in: int = 3600) -> None:
        self.token = token
        self.expires_in = expires_in
        self.scopes: list[tuple[str, ...]] = []
        self.closed = False

    def get_token(self, *scopes: str, **kwargs: Any) -> AccessToken:
        self.scopes.append(scopes)
        return AccessToken(self.token, int(time.time()) + self.expires_in)

    def close(self) -> None:
        self.closed = True


class UnavailableCredential:
    """Token credential whose ``get_token`` always raises CredentialUnavailableError."""

    def __init__(self, message: str = "credential unavailable") -> None:
        self.message = message
        self.calls = 0

    def get_token(self, *scopes: str, **kwargs: Any) -> AccessToken:
        self.calls += 1
        raise CredentialUnavailableError(message=self.message)

    def close(self) -> None:
        pass


class StubSource(CredentialSource):
    """Credential source with scripted behaviour, recording every call.

    Args:
        name: Source name reported in logs and attempts.
        credential: Credential to hand out. Ignored when ``error`` is set.
        error: If set, every call raises SourceUnavailableError with this message.
        validate: Whether to validate the credential, as real sources do.

    Attributes:
        calls: Resources passed to ``build_credential``, in order.
    """

    def __init__(
        self,
        name: str,
        *,
        credential: TokenCredential | None = None,
        error: str | None = None,
        validate: bool = False,
    ) -> None:
        super().__init__(validate=validate)
        self.name = name
        self.credential = credential if credential is not None else StaticTokenCredential(f"{name}-token")
        self.error = error
        self.calls: list[str] = []

    def build_credential(self, resource: str) -> TokenCredential:
        self.calls.append(resource)
        if self.error is not None:
            raise SourceUnavailableError(self.name, self.error)
        return self.credential


__all__ = ["StaticTokenCredential", "StubSource", "UnavailableCredential"]
