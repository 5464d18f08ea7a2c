"""Authorize httpx clients for Azure resources.

`AzureAuth` ties the pieces together: it loads the ambient Azure settings once,
resolves authorizers through the file → CLI → environment chain, caches the
Resource Manager authorizer, and binds authorizers to clients.

Example:
    ```python
    import httpx

    from azauth import AuthConfig, AzureAuth

    auth = AzureAuth(AuthConfig(user_agent="my-tool/0.3"))

    with httpx.Client(base_url="https://management.azure.com") as client:
        auth.authorize_client(client)  # cached management authorizer
        client.get("/subscriptions", params={"api-version": "2022-12-01"})

    with httpx.Client(base_url="https://myvault.vault.azure.net") as client:
        auth.bind_resource("https://vault.azure.net", client)
    ```
"""

import logging
from collections.abc import Mapping, Sequence

import httpx

from azauth.auth.authorizer import Authorizer
from azauth.auth.cache import AuthorizerCache
from azauth.auth.resolver import AuthorizerResolver
from azauth.config import AuthConfig
from azauth.settings import EnvironmentSettings, SettingsLoader
from azauth.sources import CredentialSource, default_sources

LOGGER_NAME = "azauth"


class AzureAuth:
    """Resolve, cache, and bind Azure authorizers.

    Construction loads the environment settings; if that fails no instance is
    produced. The user agent and all other options are fixed by `AuthConfig`.

    Args:
        config: Options (default: ``AuthConfig()``).
        logger: Logger receiving resolution diagnostics (default: "azauth").
        sources: Credential sources in priority order. Defaults to file, CLI,
            environment, built from the loaded settings.
        environ: Mapping to read settings from instead of ``os.environ``.

    Raises:
        SettingsUnavailableError: If the Azure settings cannot be loaded.
    """

    def __init__(
        self,
        config: AuthConfig | None = None,
        *,
        logger: logging.Logger | None = None,
        sources: Sequence[CredentialSource] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.config = config or AuthConfig()
        self.log = logger or logging.getLogger(LOGGER_NAME)

        loader = SettingsLoader(
            environ=environ,
            dotenv_path=self.config.dotenv_path,
            load_dotenv=self.config.load_dotenv,
        )
        self.settings: EnvironmentSettings = loader.load(
            cloud_name=self.config.cloud_name,
            require_cloud_name=self.config.require_cloud_name,
        )

        if sources is None:
            sources = default_sources(
                self.settings,
                auth_file_path=self.config.auth_file_path,
                cli_process_timeout=self.config.cli_process_timeout,
                managed_identity_fallback=self.config.managed_identity_fallback,
                validate=self.config.validate_tokens,
            )
        self.resolver = AuthorizerResolver(sources, logger=self.log)
        self._cache = AuthorizerCache(self.resolve_default, logger=self.log)

    def __enter__(self) -> "AzureAuth":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def user_agent(self) -> str:
        return self.config.user_agent

    @property
    def management_resource(self) -> str:
        """Default resource for management operations."""
        return self.settings.resource

    def resolve_for_resource(self, resource: str) -> Authorizer:
        """Return an authorizer for ``resource`` from the first working source.

        Raises:
            NoAuthorizerError: If every source failed (details are logged).
        """
        return self.resolver.resolve(resource)

    def resolve_default(self) -> Authorizer:
        """Resolve an authorizer for the management resource, bypassing the cache."""
        return self.resolve_for_resource(self.management_resource)

    def get_management_authorizer(self) -> Authorizer:
        """Return the cached management authorizer, resolving it on first use.

        Failures are not cached; the next call resolves again.
        """
        return self._cache.get()

    def clear_cache(self) -> None:
        self._cache.clear()

    def bind_resource(
        self,
        resource: str,
        client: httpx.Client | httpx.AsyncClient,
        user_agent: str | None = None,
    ) -> Authorizer:
        """Resolve an authorizer for ``resource`` and install it on ``client``.

        Sets ``client.auth`` and appends ``user_agent`` to the client's User-Agent.
        Either both happen or, on any error, neither does.

        Args:
            resource: Resource to authorize.
            client: httpx client to authorize.
            user_agent: User agent to append (default: the configured one).

        Returns:
            The authorizer now installed as ``client.auth``.

        Raises:
            ValueError: If the user agent is empty.
            NoAuthorizerError: If no authorizer could be resolved.
        """
        user_agent = self._user_agent(user_agent)
        authorizer = self.resolve_for_resource(resource)
        self._bind(client, authorizer, user_agent)
        return authorizer

    def authorize_client(self, client: httpx.Client | httpx.AsyncClient, user_agent: str | None = None) -> Authorizer:
        """Install the cached management authorizer on ``client``."""
        user_agent = self._user_agent(user_agent)
        authorizer = self.get_management_authorizer()
        self._bind(client, authorizer, user_agent)
        return authorizer

    def get_file_authorizer(self, resource: str | None = None) -> Authorizer:
        """Resolve using only the file source (default resource: management)."""
        return self._resolve_from("file", resource)

    def get_cli_authorizer(self, resource: str | None = None) -> Authorizer:
        """Resolve using only the CLI source (default resource: management)."""
        return self._resolve_from("cli", resource)

    def get_environment_authorizer(self, resource: str | None = None) -> Authorizer:
        """Resolve using only the environment source (default resource: management)."""
        return self._resolve_from("environment", resource)

    def authorize_client_from_file(
        self,
        client: httpx.Client | httpx.AsyncClient,
        resource: str | None = None,
        user_agent: str | None = None,
    ) -> Authorizer:
        """Install a file-based authorizer for ``resource`` on ``client``."""
        user_agent = self._user_agent(user_agent)
        authorizer = self.get_file_authorizer(resource)
        self._bind(client, authorizer, user_agent)
        return authorizer

    def close(self) -> None:
        """Close the cached authorizer's credential and empty the cache."""
        authorizer = self._cache.peek()
        self._cache.clear()
        if authorizer is not None:
            authorizer.close()

    def _user_agent(self, user_agent: str | None) -> str:
        user_agent = self.config.user_agent if user_agent is None else user_agent
        if not user_agent:
            raise ValueError("User agent extension was empty")
        if not user_agent.isascii():
            raise ValueError(f"User agent extension must be ASCII: {user_agent!r}")
        return user_agent

    def _resolve_from(self, name: str, resource: str | None) -> Authorizer:
        matching = [source for source in self.resolver.sources if source.name == name]
        if not matching:
            raise ValueError(f"No {name!r} credential source configured")
        resolver = AuthorizerResolver(matching, logger=self.log)
        return resolver.resolve(self.management_resource if resource is None else resource)

    @staticmethod
    def _bind(client: httpx.Client | httpx.AsyncClient, authorizer: Authorizer, user_agent: str) -> None:
        current = client.headers.get("User-Agent", "")
        client.headers["User-Agent"] = f"{current} {user_agent}" if current else user_agent
        client.auth = authorizer
