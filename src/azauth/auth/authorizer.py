"""Resource-scoped authorizer handles.

An `Authorizer` pairs an azure-identity credential with the resource it was
resolved for. It is an ``httpx.Auth``, so binding it to a client is just
``client.auth = authorizer``.

Token caching and refresh belong to the underlying credential.
"""

import logging
from collections.abc import Generator

import httpx
from azure.core.credentials import AccessToken, TokenCredential
from azure.core.exceptions import ClientAuthenticationError

from azauth.auth.exceptions import SourceUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_SCOPE_SUFFIX = "/.default"


def resource_to_scope(resource: str) -> str:
    """Convert a resource (audience) to the ``/.default`` scope azure-identity expects.

    Args:
        resource: Resource URI, e.g. "https://management.azure.com/".

    Returns:
        The scope, e.g. "https://management.azure.com/.default". A resource that
        already ends in "/.default" is returned unchanged.
    """
    if resource.endswith(DEFAULT_SCOPE_SUFFIX):
        return resource
    return resource.rstrip("/") + DEFAULT_SCOPE_SUFFIX


class Authorizer(httpx.Auth):
    """Bearer-token authorizer for a single resource.

    Attributes:
        credential: The azure-identity credential producing tokens.
        resource: The resource this authorizer was resolved for, unmodified.
        source: Name of the credential source that produced it.

    Example:
        ```python
        authorizer = auth.resolve_for_resource("https://management.azure.com/")

        with httpx.Client(auth=authorizer) as client:
            client.get("https://management.azure.com/subscriptions?api-version=2022-12-01")
        ```
    """

    requires_request_body = False
    requires_response_body = False

    def __init__(self, credential: TokenCredential, resource: str, source: str):
        self.credential = credential
        self.resource = resource
        self.source = source

    def __repr__(self) -> str:
        return f"Authorizer(source={self.source!r}, resource={self.resource!r})"

    @property
    def scope(self) -> str:
        return resource_to_scope(self.resource)

    def get_token(self) -> AccessToken:
        """Fetch an access token for the resource from the credential."""
        return self.credential.get_token(self.scope)

    def validate(self) -> None:
        """Prove the credential works by requesting one token.

        Raises:
            SourceUnavailableError: If the identity provider (or local tool)
                refuses to issue a token.
        """
        try:
            self.get_token()
        except (ClientAuthenticationError, ValueError) as e:
            raise SourceUnavailableError(self.source, f"token request for {self.scope} failed: {e}", e) from e
        logger.debug(f"Validated {self.source} credential for {self.scope}")

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self.get_token().token}"
        yield request

    def close(self) -> None:
        """Close the underlying credential, if it holds resources."""
        close = getattr(self.credential, "close", None)
        if close is not None:
            close()
