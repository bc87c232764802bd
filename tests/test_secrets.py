"""Tests for ntfy token resolution."""

from core.secrets import CredentialProvider, SecretFileCredentialProvider, get_token


class StaticProvider:
    def __init__(self, value):
        self.value = value

    async def get(self):
        return self.value


class BrokenProvider:
    async def get(self):
        raise RuntimeError("secret store unavailable")


class TestSecretFileCredentialProvider:
    async def test_reads_and_strips(self, tmp_path):
        path = tmp_path / "ntfy_token"
        path.write_text("  tk_secret\n", encoding="utf-8")
        assert await SecretFileCredentialProvider(path).get() == "tk_secret"

    async def test_empty_file(self, tmp_path):
        path = tmp_path / "ntfy_token"
        path.write_text("\n", encoding="utf-8")
        assert await SecretFileCredentialProvider(path).get() is None

    def test_satisfies_protocol(self, tmp_path):
        assert isinstance(SecretFileCredentialProvider(tmp_path / "x"), CredentialProvider)


class TestGetToken:
    async def test_provider_preferred(self):
        assert await get_token(StaticProvider("from-store"), "plain") == "from-store"

    async def test_blank_provider_falls_back(self):
        assert await get_token(StaticProvider("  "), " plain ") == "plain"

    async def test_provider_error_falls_back(self):
        assert await get_token(BrokenProvider(), "plain") == "plain"

    async def test_missing_file_falls_back(self, tmp_path):
        provider = SecretFileCredentialProvider(tmp_path / "missing")
        assert await get_token(provider, "plain") == "plain"

    async def test_nothing_configured(self):
        assert await get_token(None, "") is None
        assert await get_token(BrokenProvider(), "") is None
