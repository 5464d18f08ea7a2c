"""Custom exceptions for authorizer resolution.

Only two of these ever reach callers: `NoAuthorizerError` when every credential
source failed, and `SettingsUnavailableError` when the ambient Azure settings
cannot be loaded. Per-source failures (`SourceUnavailableError`) are caught by
the resolver and logged.

Example:
    ```python
    from azauth import AzureAuth
    from azauth.auth.exceptions import NoAuthorizerError

    try:
        authorizer = AzureAuth().resolve_for_resource("https://vault.azure.net")
    except NoAuthorizerError:
        # Details for each source are in the logs
        raise
    ```
"""

NO_AUTHORIZER_MESSAGE = "no authorizer available"


class AuthError(Exception):
    """Base exception for authorization errors.

    All azauth exceptions inherit from this class,
    making it easy to catch any azauth-related error.
    """

    pass


class SourceUnavailableError(AuthError):
    """Raised by a credential source that could not produce an authorizer.

    Attributes:
        source: Name of the credential source (e.g. "file", "cli", "environment").
        cause: The underlying error, if any.
    """

    def __init__(self, source: str, message: str, cause: BaseException | None = None):
        super().__init__(f"{source}: {message}")
        self.source = source
        self.cause = cause


class NoAuthorizerError(AuthError):
    """Raised when no credential source could produce an authorizer.

    The message is always "no authorizer available". The specific error of each
    source is logged, not carried here, since all but one source will usually fail.
    """

    def __init__(self) -> None:
        super().__init__(NO_AUTHORIZER_MESSAGE)


class SettingsUnavailableError(AuthError):
    """Raised when Azure environment settings cannot be loaded.

    Example:
        ```python
        try:
            auth = AzureAuth(AuthConfig(cloud_name="AzureMoonCloud"))
        except SettingsUnavailableError as e:
            print(f"Cannot load settings: {e}")
        ```
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name
