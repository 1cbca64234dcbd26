"""
Проверки доступа к маршрутам (gates): Basic-Auth с единственной парой логин/пароль и
ограничение по стране клиента. Каждая проверка — зависимость FastAPI, которая либо
пропускает запрос дальше, либо прерывает его ошибкой. Цепочка собирается при старте
из списка опций в заданном порядке.
"""
import ipaddress
import logging
import secrets

from fastapi import Depends, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from pydantic import BaseModel, ConfigDict

from app import config
from app.constants import GATE_CREDENTIALS, GATE_GEO, GATE_OPTIONS
from app.errors import AuthenticationError, AuthorizationError, MalformedAddressError
from app.services.geolocation import GeoLocator, get_geolocator

logger = logging.getLogger(__name__)

_basic = HTTPBasic(realm="Restricted", auto_error=False)


class AuthSettings(BaseModel):
    """Настройки цепочки проверок; неизменяемы после старта."""
    model_config = ConfigDict(frozen=True)

    username: str
    password: str
    allowed_country: str
    options: tuple[str, ...] = ()
    outermost_first: bool = False

    @classmethod
    def from_config(cls) -> "AuthSettings":
        return cls(
            username=config.AUTH_USERNAME,
            password=config.AUTH_PASSWORD,
            allowed_country=config.ALLOWED_COUNTRY,
            options=parse_options(config.AUTH_OPTIONS),
            outermost_first=config.AUTH_OUTERMOST_FIRST,
        )


def parse_options(raw: str) -> tuple[str, ...]:
    """Строка опций через запятую -> кортеж: "1,2" -> ("1", "2"). Пустые элементы отбрасываются."""
    return tuple(opt.strip() for opt in raw.split(",") if opt.strip())


def _same(given: str, expected: str) -> bool:
    return secrets.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


def credential_gate(username: str, password: str):
    """Пропускает запрос, только если заголовок Authorization содержит ровно эту пару."""
    async def _check(
        credentials: HTTPBasicCredentials | None = Depends(_basic),
    ) -> None:
        if credentials is None:
            logger.info("auth_rejected gate=credentials reason=missing")
            raise AuthenticationError()
        if not (_same(credentials.username, username) and _same(credentials.password, password)):
            logger.info("auth_rejected gate=credentials reason=mismatch username=%s", credentials.username)
            raise AuthenticationError()
    return _check


def geo_gate(allowed_country: str):
    """
    Пропускает запрос, только если сервис геолокации вернул allowed_country для IP клиента.
    Нет адреса или адрес не IP -> 400; сбой сервиса -> 500; другая страна -> 401.
    """
    async def _check(
        request: Request,
        locator: GeoLocator = Depends(get_geolocator),
    ) -> None:
        host = request.client.host if request.client else None
        if not host:
            raise MalformedAddressError("remote address is missing")
        try:
            ipaddress.ip_address(host)
        except ValueError:
            raise MalformedAddressError(f"remote address {host!r} is not an IP address") from None

        country = await locator.country_name(host)
        if country != allowed_country:
            logger.info("auth_rejected gate=geo ip=%s country=%s", host, country)
            raise AuthorizationError()
    return _check


def build_gate_chain(settings: AuthSettings) -> list:
    """
    Проверки в порядке выполнения. Каждая следующая опция оборачивает предыдущие,
    поэтому по умолчанию последняя в списке выполняется первой; outermost_first — наоборот.
    """
    gates = []
    for opt in settings.options:
        if opt == GATE_GEO:
            gates.append(geo_gate(settings.allowed_country))
        elif opt == GATE_CREDENTIALS:
            gates.append(credential_gate(settings.username, settings.password))
        else:
            raise ValueError(f"unknown authorization option {opt!r}, expected one of {sorted(GATE_OPTIONS)}")
    if not settings.outermost_first:
        gates.reverse()
    return gates


def gate_dependencies(settings: AuthSettings) -> list:
    """Цепочка в виде списка Depends для APIRouter / маршрута."""
    return [Depends(gate) for gate in build_gate_chain(settings)]
