"""Environment-variable credential source.

Credentials are picked from the loaded settings in this order (first match wins):
1. Client secret: AZURE_TENANT_ID, AZURE_CLIENT_ID, AZURE_CLIENT_SECRET
2. Client certificate: AZURE_CERTIFICATE_PATH (+ AZURE_CERTIFICATE_PASSWORD)
3. Username/password: AZURE_USERNAME, AZURE_PASSWORD
4. Managed identity (AZURE_CLIENT_ID selects a user-assigned identity), if enabled
"""

import logging

from azure.core.credentials import TokenCredential
from azure.identity import (
    CertificateCredential,
    ClientSecretCredential,
    ManagedIdentityCredential,
    UsernamePasswordCredential,
)

from azauth.auth.exceptions import SourceUnavailableError
from azauth.settings import CLIENT_ID, TENANT_ID, EnvironmentSettings
from azauth.sources.base import CredentialSource

logger = logging.getLogger(__name__)


class EnvironmentSource(CredentialSource):
    """Authorize with credentials taken from environment variables."""

    name = "environment"

    def __init__(
        self,
        settings: EnvironmentSettings,
        *,
        managed_identity_fallback: bool = True,
        validate: bool = True,
    ) -> None:
        super().__init__(validate=validate)
        self._settings = settings
        self.managed_identity_fallback = managed_identity_fallback

    def build_credential(self, resource: str) -> TokenCredential:
        s = self._settings
        authority = s.cloud.authority_host
        has_identity = bool(s.tenant_id and s.client_id)

        if has_identity and s.client_secret:
            logger.debug("Using client secret from environment")
            return ClientSecretCredential(
                tenant_id=s.tenant_id, client_id=s.client_id, client_secret=s.client_secret, authority=authority
            )

        if has_identity and s.certificate_path:
            logger.debug("Using client certificate from environment")
            return CertificateCredential(
                tenant_id=s.tenant_id,
                client_id=s.client_id,
                certificate_path=s.certificate_path,
                password=s.certificate_password,
                authority=authority,
            )

        if has_identity and s.username and s.password:
            logger.debug("Using username/password from environment")
            return UsernamePasswordCredential(
                client_id=s.client_id,
                username=s.username,
                password=s.password,
                tenant_id=s.tenant_id,
                authority=authority,
            )

        if self.managed_identity_fallback:
            logger.debug("No client credentials in environment, using managed identity")
            return ManagedIdentityCredential(client_id=s.client_id)

        raise SourceUnavailableError(
            self.name, f"no credentials configured (checked env vars: {TENANT_ID}, {CLIENT_ID}, and secrets)"
        )
