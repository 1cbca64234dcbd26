"""
HTTP-обработчики организаций: разбор запроса -> вызов репозитория -> JSON.
Статусы ошибок выставляет общий обработчик CompanyServiceError в app.main.
"""
from collections.abc import Sequence

from fastapi import APIRouter, Depends, Path, Request

from app.constants import MAX_COMPANY_ID, MIN_COMPANY_ID
from app.errors import ValidationError
from app.repositories.company_repo import CompanyRepository, get_company_repository
from app.schemas.company import CompanyIn, CompanyOut


def _criteria_from_query(request: Request) -> dict[str, str]:
    """Query-параметры -> фильтр {атрибут: значение}; берётся первое значение каждого параметра."""
    criteria = {}
    for key in request.query_params.keys():
        value = request.query_params.getlist(key)[0]
        if value == "":
            raise ValidationError(f"attribute {key!r} has no value")
        criteria[key] = value
    return criteria


async def companies_list(
    request: Request,
    repo: CompanyRepository = Depends(get_company_repository),
):
    return await repo.list_companies(_criteria_from_query(request))


# id вне диапазона хранилища -> 400 через обработчик RequestValidationError
async def company_detail(
    company_id: int = Path(..., ge=MIN_COMPANY_ID, le=MAX_COMPANY_ID),
    repo: CompanyRepository = Depends(get_company_repository),
):
    return await repo.get_company(company_id)


async def company_create(
    payload: CompanyIn,
    repo: CompanyRepository = Depends(get_company_repository),
):
    return await repo.create_company(payload.to_model())


async def company_update(
    payload: CompanyIn,
    company_id: int = Path(..., ge=MIN_COMPANY_ID, le=MAX_COMPANY_ID),
    repo: CompanyRepository = Depends(get_company_repository),
):
    company = await repo.get_company(company_id)
    # id всегда из пути: поля из тела полностью заменяют старые
    updated = payload.to_model(company.id)
    await repo.update_company(updated)
    return updated


async def company_delete(
    company_id: int = Path(..., ge=MIN_COMPANY_ID, le=MAX_COMPANY_ID),
    repo: CompanyRepository = Depends(get_company_repository),
):
    company = await repo.get_company(company_id)
    await repo.delete_company(company)
    return company


def build_router(protected: Sequence = ()) -> APIRouter:
    """
    Маршруты /companies. protected — цепочка проверок доступа (список Depends),
    навешивается на создание и удаление.
    """
    router = APIRouter(prefix="", tags=["companies"])
    router.add_api_route(
        "/companies", companies_list, methods=["GET"],
        name="companies_list", response_model=list[CompanyOut],
    )
    router.add_api_route(
        "/companies", company_create, methods=["POST"],
        name="company_create", response_model=CompanyOut, dependencies=list(protected),
    )
    router.add_api_route(
        "/companies/{company_id}", company_detail, methods=["GET"],
        name="company_detail", response_model=CompanyOut,
    )
    router.add_api_route(
        "/companies/{company_id}", company_update, methods=["PUT"],
        name="company_update", response_model=CompanyOut,
    )
    router.add_api_route(
        "/companies/{company_id}", company_delete, methods=["DELETE"],
        name="company_delete", response_model=CompanyOut, dependencies=list(protected),
    )
    return router
