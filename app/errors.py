"""
Ошибки сервиса организаций. У каждого класса свой HTTP-статус (status_code);
перевод в ответ выполняется в одном месте — обработчике в app.main.
"""


class CompanyServiceError(Exception):
    """Базовая ошибка: репозиторий и проверки доступа поднимают только наследников."""
    status_code = 500
    headers: dict[str, str] | None = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CompanyServiceError):
    """Некорректный запрос клиента (фильтр, тело, адрес)."""
    status_code = 400


class UnknownAttribute(ValidationError):
    """Параметр фильтра не входит в белый список атрибутов."""

    def __init__(self, attribute: str):
        super().__init__(f"unknown attribute {attribute!r}")
        self.attribute = attribute


class NotFoundError(CompanyServiceError):
    """Нет строк по id, по фильтру или для изменения."""
    status_code = 400


class ConflictError(NotFoundError):
    """Изменение затронуло 0 строк: запись удалена между поиском и изменением."""


class StorageError(CompanyServiceError):
    """Сбой хранилища: соединение, запрос, транзакция, нарушение инварианта."""
    status_code = 500


class AuthenticationError(CompanyServiceError):
    """Логин/пароль не совпали или не переданы."""
    status_code = 401
    headers = {"WWW-Authenticate": "Basic realm=Restricted"}

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class AuthorizationError(CompanyServiceError):
    """Запрос из неразрешённой страны."""
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class CollaboratorError(CompanyServiceError):
    """Сбой внешнего сервиса геолокации."""
    status_code = 500


class MalformedAddressError(CollaboratorError):
    """Адрес клиента отсутствует или не является IP."""
    status_code = 400
