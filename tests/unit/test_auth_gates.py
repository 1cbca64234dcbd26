"""
Unit-тесты проверок доступа: каждая проверка либо пропускает запрос (None), либо поднимает ошибку.
"""
import httpx
import pytest
from fastapi.security import HTTPBasicCredentials
from starlette.requests import Request

from app.auth import AuthSettings, build_gate_chain, credential_gate, geo_gate, parse_options
from app.errors import (
    AuthenticationError,
    AuthorizationError,
    CollaboratorError,
    MalformedAddressError,
)
from app.services.geolocation import GeoLocator
from conftest import FakeLocator


def _request(client: tuple[str, int] | None) -> Request:
    return Request({"type": "http", "method": "POST", "path": "/companies", "headers": [], "client": client})


@pytest.mark.asyncio
async def test_credential_gate_forwards_matching_pair():
    """Совпадающая пара пропускает запрос."""
    gate = credential_gate("user", "pass")
    assert await gate(HTTPBasicCredentials(username="user", password="pass")) is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "credentials",
    [
        HTTPBasicCredentials(username="wrong", password="wrong"),
        HTTPBasicCredentials(username="user", password="wrong"),
        HTTPBasicCredentials(username="wrong", password="pass"),
        None,
    ],
)
async def test_credential_gate_rejects_other_pairs(credentials):
    """Любая другая пара или её отсутствие -> AuthenticationError."""
    gate = credential_gate("user", "pass")
    with pytest.raises(AuthenticationError) as exc_info:
        await gate(credentials)
    assert exc_info.value.status_code == 401
    assert exc_info.value.headers["WWW-Authenticate"].startswith("Basic")


@pytest.mark.asyncio
async def test_geo_gate_forwards_allowed_country():
    """Разрешённая страна пропускает запрос."""
    locator = FakeLocator("Cyprus")
    gate = geo_gate("Cyprus")
    assert await gate(_request(("31.153.0.1", 5000)), locator=locator) is None
    assert locator.calls == ["31.153.0.1"]


@pytest.mark.asyncio
async def test_geo_gate_rejects_other_country():
    """Другая страна -> AuthorizationError."""
    gate = geo_gate("Cyprus")
    with pytest.raises(AuthorizationError):
        await gate(_request(("8.8.8.8", 5000)), locator=FakeLocator("United States"))


@pytest.mark.asyncio
@pytest.mark.parametrize("client", [None, ("", 0), ("not-an-ip", 5000), ("999.1.1.1", 80)])
async def test_geo_gate_rejects_malformed_address(client):
    """Нет адреса или адрес не IP -> 400 без вызова геолокации."""
    locator = FakeLocator("Cyprus")
    with pytest.raises(MalformedAddressError) as exc_info:
        await geo_gate("Cyprus")(_request(client), locator=locator)
    assert exc_info.value.status_code == 400
    assert locator.calls == []


@pytest.mark.asyncio
async def test_geo_gate_collaborator_failure_is_server_error():
    """Сбой геолокации -> ошибка 500."""
    with pytest.raises(CollaboratorError) as exc_info:
        await geo_gate("Cyprus")(_request(("::1", 5000)), locator=FakeLocator(fail=True))
    assert exc_info.value.status_code == 500


def _settings(options, outermost_first=False) -> AuthSettings:
    return AuthSettings(
        username="user",
        password="pass",
        allowed_country="Cyprus",
        options=options,
        outermost_first=outermost_first,
    )


def _gate_kinds(gates) -> list[str]:
    return [gate.__qualname__.split(".")[0] for gate in gates]


def test_chain_later_option_runs_first_by_default():
    """По умолчанию последняя опция выполняется первой."""
    assert _gate_kinds(build_gate_chain(_settings(("1", "2")))) == ["credential_gate", "geo_gate"]


def test_chain_outermost_first():
    """outermost_first: порядок выполнения совпадает с порядком опций."""
    chain = build_gate_chain(_settings(("1", "2"), outermost_first=True))
    assert _gate_kinds(chain) == ["geo_gate", "credential_gate"]


def test_chain_without_options_is_empty():
    """Без опций цепочка пуста."""
    assert build_gate_chain(_settings(())) == []


def test_chain_rejects_unknown_option():
    """Неизвестная опция -> ValueError при сборке."""
    with pytest.raises(ValueError, match="unknown authorization option"):
        build_gate_chain(_settings(("3",)))


def test_parse_options():
    """Разбор строки опций через запятую."""
    assert parse_options("1,2") == ("1", "2")
    assert parse_options(" 2 ") == ("2",)
    assert parse_options("") == ()


@pytest.mark.asyncio
async def test_geolocator_returns_plain_text_country():
    """Ответ сервиса геолокации — название страны текстом."""
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/31.153.0.1/country_name"
        return httpx.Response(200, text="Cyprus")

    locator = GeoLocator("https://geo.test/{ip}/country_name", transport=httpx.MockTransport(handler))
    assert await locator.country_name("31.153.0.1") == "Cyprus"


@pytest.mark.asyncio
async def test_geolocator_non_200_is_collaborator_error():
    """Статус не 200 -> CollaboratorError."""
    locator = GeoLocator(
        "https://geo.test/{ip}/country_name",
        transport=httpx.MockTransport(lambda request: httpx.Response(429, text="rate limited")),
    )
    with pytest.raises(CollaboratorError, match="Too Many Requests"):
        await locator.country_name("31.153.0.1")


@pytest.mark.asyncio
async def test_geolocator_transport_error_is_collaborator_error():
    """Сетевая ошибка -> CollaboratorError."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    locator = GeoLocator("https://geo.test/{ip}/country_name", transport=httpx.MockTransport(handler))
    with pytest.raises(CollaboratorError):
        await locator.country_name("31.153.0.1")
