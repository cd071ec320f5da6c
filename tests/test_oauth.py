"""
Tests for the OAuth2 providers: authorization URLs and code exchange.
"""

from urllib.parse import parse_qsl, urlsplit

import pytest

from passless import Passless
from passless.core.config import GoogleConfig, YandexConfig
from passless.errors import (
    ConfigurationError,
    ProfileFetchError,
    TokenExchangeError,
    UnsupportedProviderError,
    ValidationError,
)
from passless.oauth import (
    GoogleProvider,
    OAuthHTTPClient,
    OAuthProvider,
    YandexProvider,
    get_provider_class,
    register_provider,
    supported_providers,
)

GOOGLE_TOKEN = "https://oauth2.googleapis.com/token"
GOOGLE_PROFILE = "https://openidconnect.googleapis.com/v1/userinfo"
YANDEX_TOKEN = "https://oauth.yandex.com/token"
YANDEX_PROFILE = "https://login.yandex.ru/info?format=json"


def query_of(url):
    return parse_qsl(urlsplit(url).query, keep_blank_values=True)


class TestAuthorizationUrl:
    """Test authorization URL building"""

    def test_google_url_scenario(self, config):
        """Google URL carries client id and state"""
        passless = Passless(config)
        url = passless.get_auth_url("google", "xyz")

        assert url.startswith("https://accounts.google.com/o/oauth2/v2/auth?")
        assert "state=xyz" in url
        assert "client_id=abc" in url

    def test_google_url_parameters(self, config):
        url = Passless(config).get_auth_url("google", "xyz")

        assert query_of(url) == [
            ("client_id", "abc"),
            ("redirect_uri", "http://localhost/cb"),
            ("response_type", "code"),
            ("scope", "openid email profile"),
            ("access_type", "offline"),
            ("prompt", "consent"),
            ("state", "xyz"),
        ]

    def test_values_are_url_encoded(self, config):
        url = Passless(config).get_auth_url("google", "a b&c")

        assert "redirect_uri=http%3A%2F%2Flocalhost%2Fcb" in url
        assert "scope=openid+email+profile" in url
        assert "state=a+b%26c" in url

    def test_yandex_url_parameters(self, config):
        url = Passless(config).get_auth_url("yandex", "s1")

        assert url.startswith("https://oauth.yandex.com/authorize?")
        assert query_of(url) == [
            ("client_id", "yandex-client"),
            ("redirect_uri", "http://localhost/yandex/cb"),
            ("response_type", "code"),
            ("scope", "login:info login:email"),
            ("state", "s1"),
        ]

    def test_state_defaults_to_empty(self, config):
        url = Passless(config).get_auth_url("yandex")
        assert ("state", "") in query_of(url)

    def test_custom_scope(self):
        provider = GoogleProvider(GoogleConfig(
            client_id="abc", redirect_uri="http://localhost/cb", scope="openid email"
        ))
        assert ("scope", "openid email") in query_of(provider.get_authorization_url())

    @pytest.mark.parametrize("name", ["github", "", None, "Google"])
    def test_unsupported_provider(self, config, name):
        with pytest.raises(UnsupportedProviderError) as exc_info:
            Passless(config).get_auth_url(name, "xyz")

        assert isinstance(exc_info.value, ValidationError)
        assert "Unsupported provider" in str(exc_info.value)

    def test_missing_client_id(self):
        provider = YandexProvider(YandexConfig(redirect_uri="http://localhost/cb"))
        with pytest.raises(ConfigurationError):
            provider.get_authorization_url("xyz")


class TestProviderRegistry:
    """Test provider lookup"""

    def test_builtin_providers(self):
        assert {"google", "yandex"} <= set(supported_providers())
        assert get_provider_class("google") is GoogleProvider
        assert get_provider_class("yandex") is YandexProvider

    def test_register_requires_name(self):
        class Nameless(OAuthProvider):
            pass

        with pytest.raises(ValueError):
            register_provider(Nameless)


class TestCodeExchange:
    """Test token exchange and profile fetch"""

    @pytest.mark.asyncio
    async def test_google_exchange(self, config, fake_session, fake_response):
        session = fake_session({
            GOOGLE_TOKEN: [fake_response(200, {
                "access_token": "at-1",
                "token_type": "Bearer",
                "expires_in": 3599,
                "refresh_token": "rt-1",
                "id_token": "idt",
            })],
            GOOGLE_PROFILE: [fake_response(200, {"sub": "42", "email": "u@example.com"})],
        })
        passless = Passless(config, http_session=session)

        result = await passless.exchange_code("google", "code-1")

        assert result.token.access_token == "at-1"
        assert result.token.refresh_token == "rt-1"
        assert result.token.expires_in == 3599
        assert result.profile == {"sub": "42", "email": "u@example.com"}

        method, url, data, headers = session.requests[0]
        assert (method, url) == ("POST", GOOGLE_TOKEN)
        assert data == {
            "grant_type": "authorization_code",
            "code": "code-1",
            "client_id": "abc",
            "client_secret": "google-secret",
            "redirect_uri": "http://localhost/cb",
        }
        assert headers["Content-Type"] == "application/x-www-form-urlencoded"

        method, url, _, headers = session.requests[1]
        assert (method, url) == ("GET", GOOGLE_PROFILE)
        assert headers == {"Authorization": "Bearer at-1"}

    @pytest.mark.asyncio
    async def test_yandex_exchange_with_redirect_override(self, config, fake_session, fake_response):
        session = fake_session({
            YANDEX_TOKEN: [fake_response(200, {"access_token": "y-at", "token_type": "bearer"})],
            YANDEX_PROFILE: [fake_response(200, {"id": "7", "login": "ivan"})],
        })
        passless = Passless(config, http_session=session)

        result = await passless.exchange_code("yandex", "c", "http://other/cb")

        assert result.profile["login"] == "ivan"
        assert session.requests[0][2]["redirect_uri"] == "http://other/cb"
        assert session.requests[1][3] == {"Authorization": "Bearer y-at"}
        assert result.to_dict()["token"] == {"access_token": "y-at", "token_type": "bearer"}

    @pytest.mark.asyncio
    async def test_token_exchange_failure(self, config, fake_session, fake_response):
        session = fake_session({
            GOOGLE_TOKEN: [fake_response(400, text='{"error": "invalid_grant"}')],
        })
        passless = Passless(config, http_session=session)

        with pytest.raises(TokenExchangeError) as exc_info:
            await passless.exchange_code("google", "bad-code")

        error = exc_info.value
        assert error.status == 400
        assert error.body == '{"error": "invalid_grant"}'
        assert "400" in str(error)
        assert error.to_dict()["error"] == "token_exchange_failed"
        # no profile request after a failed exchange
        assert len(session.requests) == 1

    @pytest.mark.asyncio
    async def test_profile_fetch_failure(self, config, fake_session, fake_response):
        session = fake_session({
            YANDEX_TOKEN: [fake_response(200, {"access_token": "y-at"})],
            YANDEX_PROFILE: [fake_response(401, text="unauthorized")],
        })
        passless = Passless(config, http_session=session)

        with pytest.raises(ProfileFetchError) as exc_info:
            await passless.exchange_code("yandex", "c")

        assert exc_info.value.status == 401
        assert exc_info.value.body == "unauthorized"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", ["", None])
    async def test_code_required(self, config, code, fake_session):
        session = fake_session()
        passless = Passless(config, http_session=session)

        with pytest.raises(ValidationError, match="Authorization code is required"):
            await passless.exchange_code("google", code)
        assert session.requests == []

    @pytest.mark.asyncio
    async def test_exchange_unsupported_provider(self, config, fake_session):
        passless = Passless(config, http_session=fake_session())
        with pytest.raises(UnsupportedProviderError):
            await passless.exchange_code("github", "c")

    @pytest.mark.asyncio
    async def test_injected_session_is_not_closed(self, config, fake_session):
        session = fake_session()
        async with Passless(config, http_session=session):
            pass
        assert session.closed is False


class TestHTTPClient:
    """Test the HTTP client session handling"""

    @pytest.mark.asyncio
    async def test_owned_session_closed(self):
        client = OAuthHTTPClient(timeout=5)
        session = client.session
        assert not session.closed

        await client.close()
        assert session.closed
