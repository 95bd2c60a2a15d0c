import pytest

from photo_search.config import DEFAULT_BASE_URL, Settings, load_settings


@pytest.fixture
def clean_env(monkeypatch):
    for var in ("UNSPLASH_ACCESS_KEY", "UNSPLASH_BASE_URL", "UNSPLASH_TIMEOUT", "UNSPLASH_PAGE_SIZE"):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = load_settings(dotenv=False)
    assert settings == Settings()
    assert settings.base_url == DEFAULT_BASE_URL
    assert not settings.is_configured


def test_reads_environment(clean_env):
    clean_env.setenv("UNSPLASH_ACCESS_KEY", "abc")
    clean_env.setenv("UNSPLASH_BASE_URL", "https://proxy.example.com/")
    clean_env.setenv("UNSPLASH_TIMEOUT", "2.5")
    clean_env.setenv("UNSPLASH_PAGE_SIZE", "30")

    settings = load_settings(dotenv=False)

    assert settings.access_key == "abc"
    assert settings.base_url == "https://proxy.example.com"
    assert settings.timeout == 2.5
    assert settings.page_size == 30
    assert settings.is_configured


@pytest.mark.parametrize("var, value", [
    ("UNSPLASH_TIMEOUT", "soon"),
    ("UNSPLASH_PAGE_SIZE", "ten"),
    ("UNSPLASH_PAGE_SIZE", "0"),
])
def test_invalid_numbers(clean_env, var, value):
    clean_env.setenv(var, value)
    with pytest.raises(ValueError):
        load_settings(dotenv=False)


def test_dotenv_file(clean_env, tmp_path):
    # Register the variable so the value loaded from the file is undone afterwards
    clean_env.setenv("UNSPLASH_ACCESS_KEY", "placeholder")
    clean_env.delenv("UNSPLASH_ACCESS_KEY")
    (tmp_path / ".env").write_text("UNSPLASH_ACCESS_KEY=from-file\n")
    clean_env.chdir(tmp_path)

    settings = load_settings()

    assert settings.access_key == "from-file"
