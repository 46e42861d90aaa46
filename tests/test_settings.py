"""Tests for Settings service."""
import json


class TestSettings:
    def test_get_singleton(self):
        from linguabundle.services.settings import Settings
        s1 = Settings.get()
        s2 = Settings.get()
        assert s1 is s2

    def test_defaults(self):
        from linguabundle.services.settings import Settings, DEFAULTS
        s = Settings.get()
        for key, default_val in DEFAULTS.items():
            val = s.get_value(key)
            assert val == default_val, f"Default mismatch for {key}: {val} != {default_val}"

    def test_get_value(self):
        from linguabundle.services.settings import Settings
        s = Settings.get()
        assert s.get_value("max_json_depth") == 64
        assert s.get_value("nonexistent", "fallback") == "fallback"

    def test_bracket_access(self):
        from linguabundle.services.settings import Settings
        s = Settings.get()
        assert s["store_backend"] == "json"
        s["store_backend"] = "sqlite"
        assert s["store_backend"] == "sqlite"

    def test_save_and_load(self, isolate_settings):
        from linguabundle.services.settings import Settings
        s = Settings.get()
        s.set_value("remote_url", "http://localhost:5000")
        s.save()
        assert isolate_settings.exists()
        # Reset and reload
        Settings.reset_instance()
        s2 = Settings.get()
        assert s2.get_value("remote_url") == "http://localhost:5000"

    def test_corrupt_file_uses_defaults(self, isolate_settings):
        from linguabundle.services.settings import Settings
        isolate_settings.write_text("{ not json", "utf-8")
        s = Settings.get()
        assert s["max_retries"] == 3

    def test_non_object_file_ignored(self, isolate_settings):
        from linguabundle.services.settings import Settings
        isolate_settings.write_text(json.dumps(["a"]), "utf-8")
        assert Settings.get()["store_backend"] == "json"

    def test_service_from_settings(self):
        from linguabundle.services.bundle import BundleService
        from linguabundle.services.settings import Settings
        from linguabundle.services.store import MemoryStore
        s = Settings.get()
        s["max_json_depth"] = 7
        s["default_project_name"] = "Import {timestamp}"
        service = BundleService.from_settings(MemoryStore(), s)
        assert service.max_depth == 7
        assert service.max_entry_bytes == 16 * 1024 * 1024
        assert service.name_template == "Import {timestamp}"
