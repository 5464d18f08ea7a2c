"""File-based credential source.

Reads the JSON SDK auth file written by ``az ad sp create-for-rbac --sdk-auth``:

```json
{
  "clientId": "...",
  "clientSecret": "...",
  "subscriptionId": "...",
  "tenantId": "...",
  "activeDirectoryEndpointUrl": "https://login.microsoftonline.com",
  "resourceManagerEndpointUrl": "https://management.azure.com/"
}
```

A ``clientCertificate`` path (plus optional ``clientCertificatePassword``) may be
given instead of ``clientSecret``.
"""

import codecs
import json
import logging
import os
from pathlib import Path
from typing import Any

from azure.core.credentials import TokenCredential
from azure.identity import CertificateCredential, ClientSecretCredential

from azauth.auth.exceptions import SourceUnavailableError
from azauth.settings import AUTH_LOCATION, EnvironmentSettings
from azauth.sources.base import CredentialSource

logger = logging.getLogger(__name__)


def decode_auth_file(content: bytes) -> str:
    """Decode auth file bytes, honouring UTF-8 and UTF-16 byte order marks."""
    if content.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return content.decode("utf-16")
    return content.decode("utf-8-sig")


class FileSource(CredentialSource):
    """Authorize with the service principal described in an SDK auth file."""

    name = "file"

    def __init__(
        self,
        settings: EnvironmentSettings,
        *,
        file_path: str | Path | None = None,
        validate: bool = True,
    ) -> None:
        super().__init__(validate=validate)
        self._settings = settings
        self._file_path = file_path

    @property
    def file_path(self) -> Path | None:
        """Auth file path: the explicit path, else AZURE_AUTH_LOCATION."""
        path = self._file_path if self._file_path is not None else self._settings.auth_location
        if not path:
            return None
        return Path(os.path.expanduser(os.path.expandvars(str(path))))

    def read(self) -> dict[str, Any]:
        """Read and parse the auth file.

        Raises:
            SourceUnavailableError: If no path is configured, or the file cannot
                be read or parsed.
        """
        path = self.file_path
        if path is None:
            raise SourceUnavailableError(self.name, f"no auth file path provided (env var '{AUTH_LOCATION}' not set)")

        try:
            data = json.loads(decode_auth_file(path.read_bytes()))
        except FileNotFoundError:
            raise SourceUnavailableError(self.name, f"auth file not found: {path}") from None
        except PermissionError:
            raise SourceUnavailableError(self.name, f"permission denied reading auth file: {path}") from None
        except OSError as e:
            raise SourceUnavailableError(self.name, f"error reading auth file {path}: {e}", e) from e
        except ValueError as e:
            raise SourceUnavailableError(self.name, f"malformed auth file {path}: {e}", e) from e

        if not isinstance(data, dict):
            raise SourceUnavailableError(self.name, f"malformed auth file {path}: expected a JSON object")
        return data

    def build_credential(self, resource: str) -> TokenCredential:
        data = self.read()

        missing = [key for key in ("clientId", "tenantId") if not data.get(key)]
        if missing:
            raise SourceUnavailableError(self.name, f"auth file is missing {', '.join(missing)}")

        not_strings = [
            key
            for key in ("clientId", "tenantId", "clientSecret", "clientCertificate", "clientCertificatePassword")
            if data.get(key) is not None and not isinstance(data[key], str)
        ]
        if not_strings:
            raise SourceUnavailableError(
                self.name, f"malformed auth file {self.file_path}: {', '.join(not_strings)} must be strings"
            )

        authority = data.get("activeDirectoryEndpointUrl") or self._settings.cloud.authority_host
        if data.get("clientSecret"):
            logger.debug(f"Using client secret from {self.file_path}")
            return ClientSecretCredential(
                tenant_id=data["tenantId"],
                client_id=data["clientId"],
                client_secret=data["clientSecret"],
                authority=authority,
            )
        if data.get("clientCertificate"):
            logger.debug(f"Using client certificate from {self.file_path}")
            return CertificateCredential(
                tenant_id=data["tenantId"],
                client_id=data["clientId"],
                certificate_path=data["clientCertificate"],
                password=data.get("clientCertificatePassword"),
                authority=authority,
            )
        raise SourceUnavailableError(self.name, "auth file has neither clientSecret nor clientCertificate")
