"""azauth - Authorizers for Azure resources from the ambient environment.

Many projects build a layer like this on top of the Azure SDKs. This library
provides:
- Ordered credential resolution: SDK auth file → Azure CLI → environment
- A cached Resource Manager authorizer
- Binding of authorizers to httpx clients
- A stable error contract (`NoAuthorizerError`), with per-source detail in logs

Example:
    ```python
    import httpx

    from azauth import AuthConfig, AzureAuth

    auth = AzureAuth(AuthConfig(user_agent="my-tool/0.3"))

    client = httpx.Client(base_url="https://management.azure.com")
    auth.authorize_client(client)
    ```
"""

from azauth.auth import (
    AuthError,
    Authorizer,
    NoAuthorizerError,
    SettingsUnavailableError,
    SourceUnavailableError,
)
from azauth.client import AzureAuth
from azauth.config import AuthConfig

__version__ = "0.1.0"

__all__ = [
    "AuthConfig",
    "AuthError",
    "Authorizer",
    "AzureAuth",
    "NoAuthorizerError",
    "SettingsUnavailableError",
    "SourceUnavailableError",
    "__version__",
]
