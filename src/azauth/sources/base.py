"""Base class for credential sources."""

from abc import ABC, abstractmethod

from azure.core.credentials import TokenCredential

from azauth.auth.authorizer import Authorizer
from azauth.auth.exceptions import SourceUnavailableError


class CredentialSource(ABC):
    """A strategy producing an `Authorizer` for a resource.

    Subclasses implement `build_credential`; `resolve` wraps the credential in an
    `Authorizer` and, when ``validate`` is set, proves it by fetching a token.

    Example:
        ```python
        class StaticSource(CredentialSource):
            name = "static"

            def build_credential(self, resource: str) -> TokenCredential:
                return MyCredential()
        ```
    """

    name: str = "base"

    def __init__(self, *, validate: bool = True) -> None:
        self.validate = validate

    def __repr__(self) -> str:
        return f"{type(self).__name__}(validate={self.validate})"

    @abstractmethod
    def build_credential(self, resource: str) -> TokenCredential:
        """Build the credential for ``resource``.

        Raises:
            SourceUnavailableError: If the source is not configured.
        """
        raise NotImplementedError

    def resolve(self, resource: str) -> Authorizer:
        """Return an authorizer for ``resource`` from this source.

        Args:
            resource: Resource to authorize, passed through unmodified.

        Raises:
            SourceUnavailableError: If the source cannot produce a working credential.
        """
        try:
            credential = self.build_credential(resource)
        except (ValueError, TypeError) as e:
            # azure-identity rejects malformed ids at construction
            raise SourceUnavailableError(self.name, f"invalid configuration: {e}", e) from e
        except OSError as e:
            # certificate credentials read their file at construction
            raise SourceUnavailableError(self.name, f"unreadable credential file: {e}", e) from e

        authorizer = Authorizer(credential, resource, source=self.name)
        if self.validate:
            try:
                authorizer.validate()
            except SourceUnavailableError:
                authorizer.close()
                raise
        return authorizer
