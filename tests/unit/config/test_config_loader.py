"""
Configuration Loader Unit Tests
"""

import pytest
from loguru import logger

from cacheaside.config.config_loader import (
    Config,
    ConfigLoader,
    LoggingSettings,
    StoreSettings,
    get_config,
)
from cacheaside.utils.logging import setup_logging


@pytest.fixture(autouse=True)
def fresh_loader(monkeypatch):
    monkeypatch.delenv("CACHEASIDE_CONFIG_PATH", raising=False)
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()


class TestConfigLoader:
    """ConfigLoader"""
    
    def test_load_yaml(self, tmp_path):
        path = tmp_path / "cacheaside.yaml"
        path.write_text(
            "store:\n"
            "  type: memory\n"
            "  key_prefix: 'app:'\n"
            "cache:\n"
            "  pattern_batch_size: 25\n",
            encoding="utf-8",
        )
        
        loader = ConfigLoader(str(path))
        
        assert loader.config.store.type == "memory"
        assert loader.config.store.key_prefix == "app:"
        assert loader.config.cache.pattern_batch_size == 25
        assert loader.config.logging.level == "INFO"
    
    def test_env_path(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("store:\n  port: 6390\n", encoding="utf-8")
        monkeypatch.setenv("CACHEASIDE_CONFIG_PATH", str(path))
        
        assert get_config().store.port == 6390
    
    def test_packaged_defaults(self):
        config = ConfigLoader().config
        
        assert config.store.type == "redis"
        assert config.cache.pattern_batch_size == 100
    
    def test_invalid_file_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("cache:\n  pattern_batch_size: 0\n", encoding="utf-8")
        
        loader = ConfigLoader(str(path))
        
        assert loader.config == Config()
    
    def test_missing_file_falls_back_to_defaults(self, tmp_path):
        loader = ConfigLoader(str(tmp_path / "missing.yaml"))
        
        assert loader.config == Config()
    
    def test_singleton(self, tmp_path):
        assert ConfigLoader() is ConfigLoader()
    
    def test_get_dotted_key(self):
        loader = ConfigLoader()
        
        assert loader.get("store.port") == 6379
        assert loader.get("store.nope", "fallback") == "fallback"
    
    def test_reload(self, tmp_path):
        path = tmp_path / "cacheaside.yaml"
        path.write_text("store:\n  db: 1\n", encoding="utf-8")
        loader = ConfigLoader(str(path))
        
        path.write_text("store:\n  db: 2\n", encoding="utf-8")
        loader.reload()
        
        assert loader.config.store.db == 2


class TestStoreSettings:
    """StoreSettings"""
    
    def test_to_store_dict(self):
        data = StoreSettings(type="Redis", url="redis://h:1/0", key_prefix="k:").to_store_dict()
        
        assert data["store_type"] == "redis"
        assert data["connection_string"] == "redis://h:1/0"
        assert data["key_prefix"] == "k:"
        assert "type" not in data and "url" not in data


class TestSetupLogging:
    """setup_logging"""
    
    def test_file_sink(self, tmp_path):
        sink = tmp_path / "cache.log"
        
        handler_id = setup_logging(LoggingSettings(level="debug", sink=str(sink)))
        try:
            logger.debug("cache warmed")
        finally:
            logger.remove(handler_id)
        
        assert "cache warmed" in sink.read_text(encoding="utf-8")
    
    def test_level_filters(self, tmp_path):
        sink = tmp_path / "cache.log"
        
        handler_id = setup_logging(LoggingSettings(level="WARNING", sink=str(sink)))
        try:
            logger.info("hidden")
            logger.warning("shown")
        finally:
            logger.remove(handler_id)
        
        content = sink.read_text(encoding="utf-8")
        assert "shown" in content
        assert "hidden" not in content
