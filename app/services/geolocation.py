"""
Клиент сервиса геолокации: IP -> название страны (ipapi.co, ответ — обычный текст).
"""
import logging

import httpx

from app.config import GEOLOCATION_URL
from app.errors import CollaboratorError

logger = logging.getLogger(__name__)


class GeoLocator:
    """
    Определяет страну по IP через HTTP GET на url_template.format(ip=...).
    Таймаут и повторы не заданы: запрос ждёт ответа сервиса сколько угодно.
    """

    def __init__(self, url_template: str = GEOLOCATION_URL, transport: httpx.AsyncBaseTransport | None = None):
        self.url_template = url_template
        self._transport = transport

    async def country_name(self, ip: str) -> str:
        url = self.url_template.format(ip=ip)
        try:
            async with httpx.AsyncClient(timeout=None, transport=self._transport) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            logger.warning("geolocation_failed url=%s error=%s", url, exc)
            raise CollaboratorError(f"GET {url}: {exc}") from exc

        if response.status_code != 200:
            logger.warning("geolocation_failed url=%s status=%s", url, response.status_code)
            raise CollaboratorError(f"GET {url}: {response.reason_phrase or response.status_code}")
        return response.text


def get_geolocator() -> GeoLocator:
    """Зависимость FastAPI; в тестах подменяется через app.dependency_overrides."""
    return GeoLocator()
