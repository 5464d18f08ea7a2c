"""Tests for the SDK auth file credential source."""

import json

import pytest

from azauth.auth.exceptions import SourceUnavailableError
from azauth.auth.resolver import AuthorizerResolver
from azauth.settings import EnvironmentSettings
from azauth.sources.file import FileSource, decode_auth_file
from azauth.testing import StubSource, UnavailableCredential

RESOURCE = "https://management.azure.com/"

SDK_AUTH = {
    "clientId": "11111111-1111-1111-1111-111111111111",
    "clientSecret": "file-secret",
    "subscriptionId": "22222222-2222-2222-2222-222222222222",
    "tenantId": "33333333-3333-3333-3333-333333333333",
    "activeDirectoryEndpointUrl": "https://login.microsoftonline.com",
    "resourceManagerEndpointUrl": "https://management.azure.com/",
}


@pytest.fixture
def auth_file(tmp_path):
    path = tmp_path / "sdk-auth.json"
    path.write_text(json.dumps(SDK_AUTH))
    return path


class TestFileSourcePath:
    """Test auth file path selection."""

    def test_explicit_path(self, settings, auth_file):
        assert FileSource(settings, file_path=auth_file).file_path == auth_file

    def test_path_from_settings(self, auth_file):
        settings = EnvironmentSettings(auth_location=str(auth_file))
        assert FileSource(settings).file_path == auth_file

    def test_explicit_path_beats_settings(self, auth_file):
        settings = EnvironmentSettings(auth_location="/elsewhere/auth.json")
        assert FileSource(settings, file_path=str(auth_file)).file_path == auth_file

    def test_tilde_expansion(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        source = FileSource(EnvironmentSettings(), file_path="~/sdk-auth.json")
        assert source.file_path == tmp_path / "sdk-auth.json"

    def test_no_path(self, settings):
        with pytest.raises(SourceUnavailableError) as exc_info:
            FileSource(settings).resolve(RESOURCE)

        assert "AZURE_AUTH_LOCATION" in str(exc_info.value)
        assert exc_info.value.source == "file"


class TestFileSourceRead:
    """Test reading and parsing the auth file."""

    def test_missing_file(self, settings, tmp_path):
        with pytest.raises(SourceUnavailableError, match="not found"):
            FileSource(settings, file_path=tmp_path / "nope.json").read()

    def test_malformed_json(self, settings, tmp_path):
        path = tmp_path / "sdk-auth.json"
        path.write_text("{not json")

        with pytest.raises(SourceUnavailableError, match="malformed") as exc_info:
            FileSource(settings, file_path=path).read()

        assert isinstance(exc_info.value.cause, ValueError)

    def test_not_an_object(self, settings, tmp_path):
        path = tmp_path / "sdk-auth.json"
        path.write_text("[1, 2]")

        with pytest.raises(SourceUnavailableError, match="JSON object"):
            FileSource(settings, file_path=path).read()

    def test_directory_instead_of_file(self, settings, tmp_path):
        with pytest.raises(SourceUnavailableError):
            FileSource(settings, file_path=tmp_path).read()

    def test_utf16_file(self, settings, tmp_path):
        """Test that UTF-16 files (as written by PowerShell redirection) are accepted."""
        path = tmp_path / "sdk-auth.json"
        path.write_bytes(json.dumps(SDK_AUTH).encode("utf-16"))

        assert FileSource(settings, file_path=path).read() == SDK_AUTH

    def test_utf8_bom(self):
        assert decode_auth_file(b"\xef\xbb\xbf{}") == "{}"


class TestFileSourceResolve:
    """Test building authorizers from the auth file."""

    def test_client_secret(self, settings, auth_file, recording_credential, monkeypatch):
        monkeypatch.setattr("azauth.sources.file.ClientSecretCredential", recording_credential)

        authorizer = FileSource(settings, file_path=auth_file).resolve(RESOURCE)

        created = recording_credential.instances[0]
        assert authorizer.credential is created
        assert authorizer.source == "file"
        assert authorizer.resource == RESOURCE
        assert created.kwargs == {
            "tenant_id": SDK_AUTH["tenantId"],
            "client_id": SDK_AUTH["clientId"],
            "client_secret": "file-secret",
            "authority": "https://login.microsoftonline.com",
        }
        assert created.scopes == [("https://management.azure.com/.default",)]

    def test_uses_requested_resource(self, settings, auth_file, recording_credential, monkeypatch):
        """Test that the caller's resource is used, not the management endpoint."""
        monkeypatch.setattr("azauth.sources.file.ClientSecretCredential", recording_credential)

        authorizer = FileSource(settings, file_path=auth_file).resolve("https://vault.azure.net")

        assert authorizer.resource == "https://vault.azure.net"
        assert recording_credential.instances[0].scopes == [("https://vault.azure.net/.default",)]

    def test_client_certificate(self, settings, tmp_path, recording_credential, monkeypatch):
        monkeypatch.setattr("azauth.sources.file.CertificateCredential", recording_credential)
        data = {k: v for k, v in SDK_AUTH.items() if k != "clientSecret"}
        data["clientCertificate"] = "/certs/sp.pfx"
        data["clientCertificatePassword"] = "pfx-pass"
        path = tmp_path / "sdk-auth.json"
        path.write_text(json.dumps(data))

        FileSource(settings, file_path=path).resolve(RESOURCE)

        kwargs = recording_credential.instances[0].kwargs
        assert kwargs["certificate_path"] == "/certs/sp.pfx"
        assert kwargs["password"] == "pfx-pass"

    def test_authority_defaults_to_cloud(self, settings, tmp_path, recording_credential, monkeypatch):
        monkeypatch.setattr("azauth.sources.file.ClientSecretCredential", recording_credential)
        data = {k: v for k, v in SDK_AUTH.items() if k != "activeDirectoryEndpointUrl"}
        path = tmp_path / "sdk-auth.json"
        path.write_text(json.dumps(data))

        FileSource(settings, file_path=path).resolve(RESOURCE)

        assert recording_credential.instances[0].kwargs["authority"] == settings.cloud.authority_host

    def test_missing_ids(self, settings, tmp_path):
        path = tmp_path / "sdk-auth.json"
        path.write_text(json.dumps({"clientSecret": "s"}))

        with pytest.raises(SourceUnavailableError, match="clientId, tenantId"):
            FileSource(settings, file_path=path).resolve(RESOURCE)

    def test_no_secret_or_certificate(self, settings, tmp_path):
        path = tmp_path / "sdk-auth.json"
        path.write_text(json.dumps({"clientId": "c", "tenantId": "t"}))

        with pytest.raises(SourceUnavailableError, match="neither clientSecret nor clientCertificate"):
            FileSource(settings, file_path=path).resolve(RESOURCE)

    def test_rejected_credential(self, settings, auth_file, monkeypatch):
        """Test that credentials rejected by the identity provider fail the source."""
        monkeypatch.setattr("azauth.sources.file.ClientSecretCredential", lambda **kwargs: UnavailableCredential())

        with pytest.raises(SourceUnavailableError, match="token request"):
            FileSource(settings, file_path=auth_file).resolve(RESOURCE)

    def test_skip_validation(self, settings, auth_file, monkeypatch):
        credential = UnavailableCredential()
        monkeypatch.setattr("azauth.sources.file.ClientSecretCredential", lambda **kwargs: credential)

        authorizer = FileSource(settings, file_path=auth_file, validate=False).resolve(RESOURCE)

        assert authorizer.credential is credential
        assert credential.calls == 0

    def test_invalid_tenant_rejected_by_sdk(self, settings, tmp_path):
        """Test that azure-identity's own validation of the tenant id fails the source."""
        data = dict(SDK_AUTH, tenantId="not a tenant!")
        path = tmp_path / "sdk-auth.json"
        path.write_text(json.dumps(data))

        with pytest.raises(SourceUnavailableError, match="invalid configuration"):
            FileSource(settings, file_path=path).resolve(RESOURCE)

    def test_non_string_tenant(self, settings, tmp_path):
        path = tmp_path / "sdk-auth.json"
        path.write_text(json.dumps({"clientId": "c", "tenantId": 12345, "clientSecret": "s"}))

        with pytest.raises(SourceUnavailableError, match="malformed auth file .*tenantId must be strings"):
            FileSource(settings, file_path=path).resolve(RESOURCE)

    def test_missing_certificate_file(self, settings, tmp_path):
        """Test that a certificate path that does not exist fails the source."""
        data = {
            "clientId": SDK_AUTH["clientId"],
            "tenantId": SDK_AUTH["tenantId"],
            "clientCertificate": str(tmp_path / "nope.pem"),
        }
        path = tmp_path / "sdk-auth.json"
        path.write_text(json.dumps(data))

        with pytest.raises(SourceUnavailableError, match="unreadable credential file") as exc_info:
            FileSource(settings, file_path=path).resolve(RESOURCE)

        assert exc_info.value.source == "file"
        assert isinstance(exc_info.value.__cause__, OSError)


class TestFileSourceInChain:
    """Test that a broken auth file hands over to the next source."""

    @pytest.mark.parametrize(
        "data",
        [
            {"clientId": "c", "tenantId": 12345, "clientSecret": "s"},
            {"clientId": SDK_AUTH["clientId"], "tenantId": SDK_AUTH["tenantId"], "clientCertificate": "nope.pem"},
        ],
        ids=["non-string-tenant", "missing-certificate"],
    )
    def test_falls_through_to_cli(self, settings, tmp_path, monkeypatch, data):
        monkeypatch.chdir(tmp_path)
        path = tmp_path / "sdk-auth.json"
        path.write_text(json.dumps(data))
        resolver = AuthorizerResolver([FileSource(settings, file_path=path), StubSource("cli")])

        result = resolver.attempt(RESOURCE)

        assert result.authorizer.source == "cli"
        assert [attempt.outcome for attempt in result.attempts] == ["failed", "ok"]
