"""Azure CLI session credential source."""

from azure.core.credentials import TokenCredential
from azure.identity import AzureCliCredential

from azauth.sources.base import CredentialSource


class CliSource(CredentialSource):
    """Authorize with the account logged in through ``az login``.

    Tokens are fetched by running ``az account get-access-token``, so this fails
    when the CLI is missing, nobody is logged in, or the session has no access
    to the resource.
    """

    name = "cli"

    def __init__(self, *, process_timeout: int = 10, validate: bool = True) -> None:
        super().__init__(validate=validate)
        self.process_timeout = process_timeout

    def build_credential(self, resource: str) -> TokenCredential:
        return AzureCliCredential(process_timeout=self.process_timeout)
