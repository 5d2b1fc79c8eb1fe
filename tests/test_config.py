"""
Tests for environment and settings configuration
"""

import json

import pytest

from snws2_sdk.config import Environment, SigningSettings
from snws2_sdk.exceptions import ConfigurationError
from snws2_sdk.signing import AuthorizationV2Builder, HttpHeaders, SNWS2Auth


class TestEnvironment:
    """Test environment configuration"""

    def test_defaults(self):
        """Test default environment values"""
        env = Environment()
        assert env.host == "data.solarnetwork.net"
        assert env.protocol == "https"
        assert env.port == 443
        assert env.use_tls()
        assert env.host_header_value() == "data.solarnetwork.net"

    def test_http_default_port(self):
        """Test http implies port 80"""
        env = Environment(host="localhost", protocol="http")
        assert env.port == 80
        assert not env.use_tls()
        assert env.is_default_port()

    def test_protocol_trailing_colon(self):
        """Test a location-style protocol is normalized"""
        assert Environment(protocol="HTTP:").protocol == "http"

    def test_string_port(self):
        """Test a string port is converted"""
        assert Environment(port="8443").port == 8443

    def test_invalid_port(self):
        """Test an invalid port falls back to the implied port"""
        assert Environment(port="abc").port == 443

    def test_host_header_value(self):
        """Test Host values with and without ports"""
        assert Environment(host="localhost", port=8080).host_header_value() == "localhost:8080"
        assert Environment(host="localhost").host_header_value(force_port=True) == "localhost:443"

    def test_from_url(self):
        """Test creating an environment from a URL"""
        env = Environment.from_url("http://localhost:8080", proxy_url_prefix="http://proxy/1m")
        assert env.host == "localhost"
        assert env.protocol == "http"
        assert env.port == 8080
        assert env.proxy_url_prefix == "http://proxy/1m"


class TestSigningSettings:
    """Test settings loading"""

    def test_defaults(self):
        """Test default settings"""
        settings = SigningSettings()
        assert settings.token_id is None
        assert settings.host == "data.solarnetwork.net"
        assert settings.use_sn_date is True
        assert settings.force_host_port is False
        assert settings.log_level == "WARNING"

    def test_from_env(self):
        """Test loading settings from environment variables"""
        settings = SigningSettings.from_env({
            "SNWS2_TOKEN": "token",
            "SNWS2_TOKEN_SECRET": "secret",
            "SNWS2_HOST": "localhost",
            "SNWS2_PROTOCOL": "http",
            "SNWS2_PORT": "8080",
            "SNWS2_FORCE_HOST_PORT": "true",
            "SNWS2_USE_SN_DATE": "0",
            "SNWS2_LOG_LEVEL": "debug",
        })
        assert settings.token_id == "token"
        assert settings.token_secret == "secret"
        assert settings.port == 8080
        assert settings.force_host_port is True
        assert settings.use_sn_date is False
        assert settings.log_level == "DEBUG"
        assert settings.to_environment().host_header_value() == "localhost:8080"

    def test_from_env_os_environ(self, monkeypatch):
        """Test loading settings from the process environment"""
        monkeypatch.setenv("SNWS2_TOKEN", "from-env")
        assert SigningSettings.from_env().token_id == "from-env"

    def test_invalid_port(self):
        """Test an invalid port is rejected"""
        with pytest.raises(ConfigurationError):
            SigningSettings.from_env({"SNWS2_PORT": "http"})
        with pytest.raises(ConfigurationError):
            SigningSettings(port=70000)

    def test_invalid_boolean(self):
        """Test an invalid boolean is rejected"""
        with pytest.raises(ConfigurationError):
            SigningSettings.from_env({"SNWS2_USE_SN_DATE": "maybe"})

    def test_invalid_log_level(self):
        """Test an invalid log level is rejected"""
        with pytest.raises(ConfigurationError):
            SigningSettings(log_level="LOUD")

    def test_from_json(self):
        """Test loading settings from JSON"""
        settings = SigningSettings.from_json(json.dumps({"token_id": "token", "port": 8443}))
        assert settings.token_id == "token"
        assert settings.port == 8443

    def test_from_json_invalid(self):
        """Test invalid JSON is rejected"""
        with pytest.raises(ConfigurationError) as exc_info:
            SigningSettings.from_json("{")
        assert exc_info.value.error_code == "PARSE_ERROR"

        with pytest.raises(ConfigurationError):
            SigningSettings.from_json("[]")

        with pytest.raises(ConfigurationError) as exc_info:
            SigningSettings.from_json('{"unknown": 1}')
        assert exc_info.value.error_code == "INVALID_FORMAT"

    def test_from_file(self, tmp_path):
        """Test loading settings from a file"""
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"token_id": "token", "host": "localhost"}), encoding="utf-8")

        settings = SigningSettings.from_file(path)
        assert settings.host == "localhost"

    def test_from_missing_file(self, tmp_path):
        """Test a missing file is rejected"""
        with pytest.raises(ConfigurationError) as exc_info:
            SigningSettings.from_file(tmp_path / "missing.json")
        assert exc_info.value.error_code == "FILE_ERROR"

    def test_create_builder(self):
        """Test creating a builder from settings"""
        settings = SigningSettings(token_id="token", host="localhost", protocol="http", port=8080)
        builder = settings.create_builder()

        assert isinstance(builder, AuthorizationV2Builder)
        assert builder.token_id == "token"
        assert builder.use_sn_date is True
        assert builder.http_headers.first_value(HttpHeaders.HOST) == "localhost:8080"

    def test_create_builder_requires_token(self):
        """Test a token is required for a builder"""
        with pytest.raises(ConfigurationError):
            SigningSettings().create_builder()

    def test_create_auth(self):
        """Test creating a requests authentication hook"""
        auth = SigningSettings(token_id="token", token_secret="secret").create_auth()
        assert isinstance(auth, SNWS2Auth)
        assert auth.token_secret == "secret"

    def test_create_auth_requires_secret(self):
        """Test a secret is required for an authentication hook"""
        with pytest.raises(ConfigurationError):
            SigningSettings(token_id="token").create_auth()
