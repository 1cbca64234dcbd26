"""
DTO организации для HTTP. Отсутствующее поле и пустая строка различаются (None != "").
"""
from pydantic import BaseModel, ConfigDict

from app.models import Company


class CompanyIn(BaseModel):
    """Тело POST/PUT. id из тела не используется: его назначает хранилище или берётся из пути."""
    name: str | None = None
    code: str | None = None
    country: str | None = None
    website: str | None = None
    phone: str | None = None

    def to_model(self, company_id: int | None = None) -> Company:
        return Company(id=company_id, **self.model_dump())


class CompanyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None = None
    code: str | None = None
    country: str | None = None
    website: str | None = None
    phone: str | None = None
