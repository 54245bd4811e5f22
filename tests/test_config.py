"""
Configuration tests
config.yaml round trip, template bootstrap and startup checks
"""

import pytest
import yaml

from pwv_gateway.core.config import (
    Settings,
    VaultConfiguration,
    bootstrap_config,
    default_config,
    load_config,
    save_config,
)
from pwv_gateway.core.constants import SafeSelector
from pwv_gateway.core.exceptions import ConfigurationError


class TestConfigFile:
    
    def test_default_config_round_trip(self, tmp_path):
        path = tmp_path / "config.yaml"
        
        save_config(default_config(), path)
        
        assert load_config(path) == default_config()
    
    def test_template_defaults(self):
        config = default_config()
        
        assert config.clipasswordsdk_cmd_timeout == 20000
        assert config.bind_address == "127.0.0.1"
        assert config.bind_port == 3000
        assert config.clipasswordsdk_cmd == ""
        assert config.app_id == ""
        assert config.managed_safe == ""
        assert config.unmanaged_safe == ""
    
    def test_file_uses_service_keys(self, tmp_path, vault_config):
        path = tmp_path / "config.yaml"
        
        save_config(vault_config, path)
        document = yaml.safe_load(path.read_text())
        
        assert document["password_vault_clipasswordsdk_cmd"] == "/opt/CARKaim/sdk/clipasswordsdk"
        assert document["password_vault_clipasswordsdk_cmd_timeout"] == 20000
        assert document["password_vault_app_id"] == "PWV_Gateway"
        assert document["password_vault_pwv_managed_safe"] == "PWV-Managed"
        assert document["password_vault_pwv_unmanaged_safe"] == "PWV-Unmanaged"
        assert document["service_bind_address"] == "127.0.0.1"
        assert document["service_bind_socket"] == 3000
    
    def test_blank_values_fall_back_to_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("password_vault_app_id:\nservice_bind_socket: 8080\n")
        
        config = load_config(path)
        
        assert config.app_id == ""
        assert config.bind_port == 8080
        assert config.clipasswordsdk_cmd_timeout == 20000
    
    def test_malformed_yaml_is_configuration_error(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("service_bind_socket: [3000\n")
        
        with pytest.raises(ConfigurationError):
            load_config(path)
    
    def test_non_mapping_is_configuration_error(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        
        with pytest.raises(ConfigurationError):
            load_config(path)
    
    def test_wrong_type_is_configuration_error(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("password_vault_clipasswordsdk_cmd_timeout: soon\n")
        
        with pytest.raises(ConfigurationError):
            load_config(path)
    
    def test_config_is_immutable(self, vault_config):
        with pytest.raises(Exception):
            vault_config.managed_safe = "Other"
    
    def test_safe_name_for_selector(self, vault_config):
        assert vault_config.safe_name_for(SafeSelector.MANAGED) == "PWV-Managed"
        assert vault_config.safe_name_for(SafeSelector.UNMANAGED) == "PWV-Unmanaged"


class TestBootstrapConfig:
    
    def test_missing_file_writes_template_and_stops(self, tmp_path):
        path = tmp_path / "config.yaml"
        
        with pytest.raises(ConfigurationError, match="Please enter details"):
            bootstrap_config(path)
        
        assert path.exists()
        assert load_config(path) == default_config()
    
    def test_existing_file_is_loaded(self, tmp_path, vault_config):
        path = tmp_path / "config.yaml"
        save_config(vault_config, path)
        
        assert bootstrap_config(path) == vault_config
    
    def test_malformed_file_is_not_overwritten(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("service_bind_socket: [3000\n")
        
        with pytest.raises(ConfigurationError):
            bootstrap_config(path)
        
        assert path.read_text() == "service_bind_socket: [3000\n"
    
    def test_zero_timeout_is_fatal(self, tmp_path):
        path = tmp_path / "config.yaml"
        save_config(VaultConfiguration(clipasswordsdk_cmd_timeout=0), path)
        
        with pytest.raises(ConfigurationError, match="time-out"):
            bootstrap_config(path)
    
    def test_zero_port_is_fatal(self, tmp_path):
        path = tmp_path / "config.yaml"
        save_config(VaultConfiguration(bind_port=0), path)
        
        with pytest.raises(ConfigurationError, match="socket"):
            bootstrap_config(path)


class TestSettings:
    
    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("PWV_CONFIG_FILE", "/etc/pwv/config.yaml")
        monkeypatch.setenv("PWV_MAX_CONCURRENT_REQUESTS", "5")
        
        settings = Settings()
        
        assert settings.CONFIG_FILE == "/etc/pwv/config.yaml"
        assert settings.MAX_CONCURRENT_REQUESTS == 5
