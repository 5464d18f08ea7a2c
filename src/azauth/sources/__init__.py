"""Credential sources producing authorizers.

Sources, in default resolution order:
- FileSource: SDK auth file (AZURE_AUTH_LOCATION)
- CliSource: Azure CLI login session
- EnvironmentSource: environment variables, falling back to managed identity
"""

from azauth.settings import EnvironmentSettings
from azauth.sources.base import CredentialSource
from azauth.sources.cli import CliSource
from azauth.sources.environment import EnvironmentSource
from azauth.sources.file import FileSource


def default_sources(
    settings: EnvironmentSettings,
    *,
    auth_file_path: str | None = None,
    cli_process_timeout: int = 10,
    managed_identity_fallback: bool = True,
    validate: bool = True,
) -> tuple[CredentialSource, ...]:
    """Build the default source chain: file, then CLI, then environment."""
    return (
        FileSource(settings, file_path=auth_file_path, validate=validate),
        CliSource(process_timeout=cli_process_timeout, validate=validate),
        EnvironmentSource(settings, managed_identity_fallback=managed_identity_fallback, validate=validate),
    )


__all__ = [
    "CliSource",
    "CredentialSource",
    "EnvironmentSource",
    "FileSource",
    "default_sources",
]
