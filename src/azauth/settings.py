"""Azure environment settings for authorizer resolution.

This module reads the ambient Azure configuration (which cloud, which tenant,
which client credentials) from the process environment, the same variables
the Azure SDKs read.

Resolution of each value (first match wins):
1. Explicit override (e.g. ``cloud_name``)
2. Environment variable (``os.environ`` or an explicit mapping)
3. .env file (python-dotenv), loaded into ``os.environ`` once
4. Default value (e.g. ``AzurePublicCloud``)

Example:
    ```python
    from azauth.settings import SettingsLoader

    settings = SettingsLoader().load()
    print(settings.cloud.name, settings.resource)
    ```

Security Considerations:
    - Secrets are excluded from ``repr`` of the settings object
    - Only variable names are logged, never values
    - Variables already in the environment are never overridden by .env
"""

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from azure.identity import AzureAuthorityHosts
from dotenv import load_dotenv

from azauth.auth.exceptions import SettingsUnavailableError

logger = logging.getLogger(__name__)

ENVIRONMENT_NAME = "AZURE_ENVIRONMENT"
ENVIRONMENT_FILEPATH = "AZURE_ENVIRONMENT_FILEPATH"
TENANT_ID = "AZURE_TENANT_ID"
SUBSCRIPTION_ID = "AZURE_SUBSCRIPTION_ID"
CLIENT_ID = "AZURE_CLIENT_ID"
CLIENT_SECRET = "AZURE_CLIENT_SECRET"
CERTIFICATE_PATH = "AZURE_CERTIFICATE_PATH"
CERTIFICATE_PASSWORD = "AZURE_CERTIFICATE_PASSWORD"
USERNAME = "AZURE_USERNAME"
PASSWORD = "AZURE_PASSWORD"
RESOURCE = "AZURE_AD_RESOURCE"
AUTH_LOCATION = "AZURE_AUTH_LOCATION"

# Cloud name that requires its endpoints from AZURE_ENVIRONMENT_FILEPATH
STACK_CLOUD_NAME = "AzureStackCloud"


@dataclass(frozen=True)
class CloudEnvironment:
    """Endpoints of one Azure cloud.

    Attributes:
        name: Cloud name, e.g. "AzurePublicCloud".
        resource_manager_endpoint: Azure Resource Manager endpoint, the default
            resource for management operations.
        authority_host: Microsoft Entra authority host used to acquire tokens.
    """

    name: str
    resource_manager_endpoint: str
    authority_host: str


PUBLIC_CLOUD = CloudEnvironment(
    name="AzurePublicCloud",
    resource_manager_endpoint="https://management.azure.com/",
    authority_host=AzureAuthorityHosts.AZURE_PUBLIC_CLOUD,
)
US_GOVERNMENT_CLOUD = CloudEnvironment(
    name="AzureUSGovernmentCloud",
    resource_manager_endpoint="https://management.usgovcloudapi.net/",
    authority_host=AzureAuthorityHosts.AZURE_GOVERNMENT,
)
CHINA_CLOUD = CloudEnvironment(
    name="AzureChinaCloud",
    resource_manager_endpoint="https://management.chinacloudapi.cn/",
    authority_host=AzureAuthorityHosts.AZURE_CHINA,
)

KNOWN_CLOUDS: dict[str, CloudEnvironment] = {
    cloud.name.upper(): cloud for cloud in (PUBLIC_CLOUD, US_GOVERNMENT_CLOUD, CHINA_CLOUD)
}


@dataclass(frozen=True)
class EnvironmentSettings:
    """Azure settings loaded from the environment.

    Secret values are kept out of ``repr`` so settings can be logged safely.
    """

    cloud: CloudEnvironment = PUBLIC_CLOUD
    tenant_id: str | None = None
    subscription_id: str | None = None
    client_id: str | None = None
    client_secret: str | None = field(default=None, repr=False)
    certificate_path: str | None = None
    certificate_password: str | None = field(default=None, repr=False)
    username: str | None = None
    password: str | None = field(default=None, repr=False)
    auth_location: str | None = None
    resource_override: str | None = None

    @property
    def resource(self) -> str:
        """Default resource: AZURE_AD_RESOURCE, else the Resource Manager endpoint."""
        return self.resource_override or self.cloud.resource_manager_endpoint

    @property
    def resource_manager_endpoint(self) -> str:
        return self.cloud.resource_manager_endpoint


class SettingsLoader:
    """Load `EnvironmentSettings` from the process environment.

    Attributes:
        _dotenv_loaded: Whether .env file has been loaded.

    Example:
        ```python
        # Read os.environ (after loading .env)
        settings = SettingsLoader().load()

        # Read an explicit mapping; os.environ and .env are not consulted
        settings = SettingsLoader(environ={"AZURE_ENVIRONMENT": "AzureChinaCloud"}).load()
        ```
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        dotenv_path: str | None = None,
        load_dotenv: bool = True,
    ):
        """Initialize settings loader.

        Args:
            environ: Mapping to read variables from. If None, reads ``os.environ``.
            dotenv_path: Path to .env file. If None, python-dotenv searches
                parent directories for one.
            load_dotenv: Whether to load the .env file into ``os.environ``.
                Ignored when an explicit ``environ`` mapping is given.
        """
        self._environ = environ
        self._dotenv_path = dotenv_path
        self._dotenv_loaded = False

        if load_dotenv and environ is None:
            self._load_dotenv()

    def _load_dotenv(self) -> None:
        """Load the .env file into ``os.environ``; existing variables win."""
        found = load_dotenv(dotenv_path=self._dotenv_path)
        self._dotenv_loaded = True
        logger.debug(f"Loaded .env file for Azure settings (variables set: {found})")

    def get(self, name: str) -> str | None:
        """Return the variable ``name``, treating empty values as unset."""
        environ = os.environ if self._environ is None else self._environ
        value = environ.get(name)
        return value or None

    def load(self, cloud_name: str | None = None, require_cloud_name: bool = False) -> EnvironmentSettings:
        """Load settings from the environment.

        Args:
            cloud_name: Cloud name overriding AZURE_ENVIRONMENT.
            require_cloud_name: If True, a missing cloud name is an error instead
                of defaulting to AzurePublicCloud.

        Returns:
            The loaded settings.

        Raises:
            SettingsUnavailableError: If the cloud name is missing (when required)
                or unknown, or a custom cloud file cannot be read.
        """
        name = cloud_name or self.get(ENVIRONMENT_NAME)
        if name is None:
            if require_cloud_name:
                raise SettingsUnavailableError(
                    f"Azure cloud name not set (checked env var: {ENVIRONMENT_NAME})",
                    env_var_name=ENVIRONMENT_NAME,
                )
            cloud = PUBLIC_CLOUD
        else:
            cloud = self._cloud_from_name(name)

        settings = EnvironmentSettings(
            cloud=cloud,
            tenant_id=self.get(TENANT_ID),
            subscription_id=self.get(SUBSCRIPTION_ID),
            client_id=self.get(CLIENT_ID),
            client_secret=self.get(CLIENT_SECRET),
            certificate_path=self.get(CERTIFICATE_PATH),
            certificate_password=self.get(CERTIFICATE_PASSWORD),
            username=self.get(USERNAME),
            password=self.get(PASSWORD),
            auth_location=self.get(AUTH_LOCATION),
            resource_override=self.get(RESOURCE),
        )
        logger.debug(f"Loaded Azure settings for cloud {cloud.name}")
        return settings

    def _cloud_from_name(self, name: str) -> CloudEnvironment:
        key = name.strip().upper()
        if key == STACK_CLOUD_NAME.upper():
            return self._cloud_from_file()
        try:
            return KNOWN_CLOUDS[key]
        except KeyError:
            raise SettingsUnavailableError(
                f"Unknown Azure cloud name: {name!r}", env_var_name=ENVIRONMENT_NAME
            ) from None

    def _cloud_from_file(self) -> CloudEnvironment:
        """Read custom cloud endpoints from AZURE_ENVIRONMENT_FILEPATH."""
        path = self.get(ENVIRONMENT_FILEPATH)
        if path is None:
            raise SettingsUnavailableError(
                f"{STACK_CLOUD_NAME} requires a cloud file (env var '{ENVIRONMENT_FILEPATH}' not set)",
                env_var_name=ENVIRONMENT_FILEPATH,
            )

        path_obj = Path(os.path.expanduser(path))
        try:
            data = json.loads(path_obj.read_text(encoding="utf-8-sig"))
            return CloudEnvironment(
                name=data.get("name") or STACK_CLOUD_NAME,
                resource_manager_endpoint=data["resourceManagerEndpoint"],
                authority_host=data["activeDirectoryEndpoint"],
            )
        except OSError as e:
            raise SettingsUnavailableError(f"Error reading cloud file {path_obj}: {e}") from e
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise SettingsUnavailableError(f"Invalid cloud file {path_obj}: {e}") from e
