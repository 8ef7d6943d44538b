"""
Unit tests for configuration and path resolution.
  python -m pytest backend/tests/test_core_paths.py -v
"""
import pytest
from unittest.mock import patch


def test_backend_is_current_or_on_path():
    """Ensure tests run with backend on path so 'core' resolves."""
    try:
        from core import config
    except ImportError:
        pytest.skip("Run tests with backend on sys.path (see pyproject pytest config)")
        return
    assert config._BACKEND_DIR.is_dir()
    assert (config._BACKEND_DIR / "core").is_dir()
    assert config._REPO_ROOT.is_dir()
    assert config._REPO_ROOT.name != "core"


def test_schema_path_resolution():
    """Schema path is backend/sql/ingredients.sql and ships with the repo."""
    from core.config import get_schema_path, _BACKEND_DIR
    path = get_schema_path()
    assert path == _BACKEND_DIR / "sql" / "ingredients.sql"
    assert path.exists()
    sql = path.read_text()
    assert "unique" in sql
    assert "health_rating between 1 and 5" in sql


def test_env_overrides():
    from core import config
    env = {
        "INGREDIENTS_TABLE": "ingredients_test",
        "SUPABASE_URL": " https://example.supabase.co ",
        "SUPABASE_SERVICE_ROLE_KEY": "",
        "SUPABASE_ANON_KEY": "anon",
        "CORS_ALLOW_ORIGINS": "http://a.test, http://b.test",
    }
    with patch.dict("os.environ", env):
        assert config.get_ingredients_table() == "ingredients_test"
        assert config.get_supabase_url() == "https://example.supabase.co"
        assert config.get_supabase_key() == "anon"
        assert config.get_cors_allow_origins() == ["http://a.test", "http://b.test"]


def test_missing_credentials_raise_storage_error():
    from core.errors import StorageError
    from core.storage.client import create_supabase_client
    with patch.dict("os.environ", {"SUPABASE_URL": "", "SUPABASE_SERVICE_ROLE_KEY": "", "SUPABASE_ANON_KEY": ""}):
        with pytest.raises(StorageError):
            create_supabase_client()


def test_client_built_from_env():
    from core.storage import client as client_module
    with patch.dict("os.environ", {"SUPABASE_URL": "https://example.supabase.co", "SUPABASE_SERVICE_ROLE_KEY": "k"}):
        with patch.object(client_module, "create_client") as mock_create:
            client_module.create_supabase_client()
    mock_create.assert_called_once_with("https://example.supabase.co", "k")


def test_env_example_ships_beside_app():
    """app.py and scripts/ load backend/.env; the template lives next to it."""
    from core import config
    assert (config._BACKEND_DIR / ".env.example").is_file()
    assert (config._BACKEND_DIR / "app.py").is_file()
    assert not hasattr(config, "get_env_path")
