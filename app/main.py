import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse

from app.auth import AuthSettings, gate_dependencies
from app.config import DATA_DIR, LOG_LEVEL
from app.constants import HTTP_STATUS_TO_CODE
from app.database import create_tables
from app.errors import CompanyServiceError
from app.routers import companies_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Каталог data и таблицы БД при старте."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    await create_tables()
    yield


def _error_response(status_code: int, detail, headers: dict | None = None) -> JSONResponse:
    """JSON-ответ об ошибке с полями detail и code."""
    content = {
        "detail": detail,
        "code": HTTP_STATUS_TO_CODE.get(status_code, "error"),
    }
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def service_error_handler(request: Request, exc: CompanyServiceError):
    """Единственное место перевода ошибок репозитория и проверок доступа в HTTP-статусы."""
    if exc.status_code >= 500:
        logger.warning("request_failed path=%s status=%s error=%s", request.url.path, exc.status_code, exc.message)
    return _error_response(exc.status_code, exc.message, exc.headers)


async def http_exception_handler(request: Request, exc: HTTPException):
    return _error_response(exc.status_code, exc.detail, getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Некорректное тело или id в пути -> 400 (а не 422)."""
    return _error_response(400, jsonable_errors(exc))


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Ошибки валидации без несериализуемых полей (ctx может содержать исключения)."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


def create_app(auth_settings: AuthSettings | None = None) -> FastAPI:
    """
    Сборка приложения. auth_settings — пара логин/пароль, страна и опции проверок;
    по умолчанию берутся из app.config.
    """
    logging.basicConfig(level=getattr(logging, LOG_LEVEL.upper(), logging.INFO))
    settings = auth_settings or AuthSettings.from_config()

    app = FastAPI(title="Company Registry", lifespan=lifespan)
    app.add_exception_handler(CompanyServiceError, service_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.include_router(companies_router.build_router(protected=gate_dependencies(settings)))
    logger.info("app_configured auth_options=%s outermost_first=%s", ",".join(settings.options), settings.outermost_first)
    return app


app = create_app()
