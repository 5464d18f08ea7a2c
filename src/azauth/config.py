"""Construction-time options for `AzureAuth`."""

from dataclasses import dataclass

DEFAULT_USER_AGENT = "azauth"


@dataclass(frozen=True)
class AuthConfig:
    """Options for `AzureAuth`, fixed at construction.

    Attributes:
        user_agent: Appended to the User-Agent header of authorized clients.
        cloud_name: Azure cloud name, overriding AZURE_ENVIRONMENT.
        require_cloud_name: Fail construction when no cloud name is set instead
            of defaulting to AzurePublicCloud.
        auth_file_path: SDK auth file, overriding AZURE_AUTH_LOCATION.
        load_dotenv: Load a .env file into the environment before reading settings.
        dotenv_path: Path of the .env file; searched for when None.
        validate_tokens: Have each source fetch one token before reporting success.
        managed_identity_fallback: Let the environment source fall back to a
            managed identity when no client credentials are set.
        cli_process_timeout: Seconds allowed for the ``az`` subprocess.

    Example:
        ```python
        auth = AzureAuth(AuthConfig(user_agent="my-operator/1.2", cloud_name="AzureChinaCloud"))
        ```
    """

    user_agent: str = DEFAULT_USER_AGENT
    cloud_name: str | None = None
    require_cloud_name: bool = False
    auth_file_path: str | None = None
    load_dotenv: bool = True
    dotenv_path: str | None = None
    validate_tokens: bool = True
    managed_identity_fallback: bool = True
    cli_process_timeout: int = 10
