"""
Доступ к данным организаций: список по фильтру, поиск по id, создание, замена, удаление.
Каждая операция берёт свою сессию из пула; изменения выполняются в явной транзакции,
которая откатывается при любой ошибке.
"""
import logging
from collections.abc import Mapping

from sqlalchemy import delete, select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.constants import COMPANY_ATTRIBUTES, COMPANY_SELECT
from app.database import AsyncSessionLocal
from app.errors import ConflictError, NotFoundError, StorageError
from app.models import Company
from app.repositories.filter_query import bind_params, build_filter_query

logger = logging.getLogger(__name__)


def _attributes(company: Company) -> dict[str, str | None]:
    """Бизнес-атрибуты организации без id."""
    return {attr: getattr(company, attr, None) for attr in COMPANY_ATTRIBUTES}


class CompanyRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def list_companies(self, criteria: Mapping[str, str]) -> list[Company]:
        """
        Организации, у которых все атрибуты из criteria равны заданным значениям.
        Пустой результат — NotFoundError, а не пустой список.
        """
        sql, args = build_filter_query(COMPANY_SELECT, criteria)
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(Company).from_statement(text(sql)),
                    bind_params(args),
                )
                companies = list(result.scalars().all())
        except (SQLAlchemyError, OverflowError) as exc:
            logger.warning("company_list_failed criteria=%s error=%s", dict(criteria), exc)
            raise StorageError(f"failed to list companies: {exc}") from exc

        if not companies:
            raise NotFoundError("companies not found")
        return companies

    async def get_company(self, company_id: int) -> Company:
        """Организация по id."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(Company).where(Company.id == company_id))
                company = result.scalar_one_or_none()
        except (SQLAlchemyError, OverflowError) as exc:
            logger.warning("company_get_failed company_id=%s error=%s", company_id, exc)
            raise StorageError(f"failed to get company with id {company_id}: {exc}") from exc

        if company is None:
            raise NotFoundError(f"company with id {company_id} not found")
        return company

    async def create_company(self, company: Company) -> Company:
        """
        Вставляет организацию; id назначает хранилище (переданный id игнорируется).
        Возвращает новый объект с id после commit.
        """
        created = Company(**_attributes(company))
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(created)
                    await session.flush()
        except (SQLAlchemyError, OverflowError) as exc:
            logger.warning("company_create_failed error=%s", exc)
            raise StorageError(f"failed to create company: {exc}") from exc

        logger.info("company_created company_id=%s name=%s", created.id, created.name)
        return created

    async def update_company(self, company: Company) -> None:
        """Заменяет все бизнес-атрибуты строки с company.id (замена, не слияние)."""
        stmt = (
            update(Company)
            .where(Company.id == company.id)
            .values(**_attributes(company))
            .execution_options(synchronize_session=False)
        )
        await self._mutate_one(stmt, "update", company.id)
        logger.info("company_updated company_id=%s", company.id)

    async def delete_company(self, company: Company) -> None:
        """Удаляет строку с company.id."""
        stmt = (
            delete(Company)
            .where(Company.id == company.id)
            .execution_options(synchronize_session=False)
        )
        await self._mutate_one(stmt, "delete", company.id)
        logger.info("company_deleted company_id=%s", company.id)

    async def _mutate_one(self, stmt, action: str, company_id: int) -> None:
        """
        Выполняет stmt в транзакции; commit только если затронута ровно одна строка.
        0 строк -> ConflictError, больше одной -> StorageError; в обоих случаях rollback.
        """
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(stmt)
                    affected = result.rowcount
                    if affected == 0:
                        raise ConflictError(f"failed to {action} company with id {company_id}: no rows affected")
                    if affected != 1:
                        logger.error(
                            "company_%s_invariant company_id=%s rows_affected=%s", action, company_id, affected
                        )
                        raise StorageError(
                            f"failed to {action} company with id {company_id}: {affected} rows affected"
                        )
        except (SQLAlchemyError, OverflowError) as exc:
            logger.warning("company_%s_failed company_id=%s error=%s", action, company_id, exc)
            raise StorageError(f"failed to {action} company with id {company_id}: {exc}") from exc


def get_company_repository() -> CompanyRepository:
    """Зависимость FastAPI: репозиторий поверх общего пула соединений."""
    return CompanyRepository(AsyncSessionLocal)
