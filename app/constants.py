"""
Единый источник истины для справочных значений: атрибуты фильтра, опции проверок доступа, коды ошибок.
"""

# --- Бизнес-атрибуты организации; по ним же разрешена фильтрация (имена столбцов) ---
COMPANY_ATTRIBUTES = ("name", "code", "country", "website", "phone")
FILTER_ATTRIBUTES = COMPANY_ATTRIBUTES

# Базовый запрос списка организаций (условия добавляет построитель фильтра)
COMPANY_SELECT = "select id, name, code, country, website, phone from company"

# id хранится как знаковое 64-битное целое
MIN_COMPANY_ID = -(2**63)
MAX_COMPANY_ID = 2**63 - 1

# --- Опции проверок доступа (AUTH_OPTIONS) ---
GATE_GEO = "1"
GATE_CREDENTIALS = "2"
GATE_OPTIONS = {
    GATE_GEO: "geo",
    GATE_CREDENTIALS: "credentials",
}

# --- Коды ошибок для JSON-ответов ---
HTTP_STATUS_TO_CODE = {
    400: "bad_request",
    401: "unauthorized",
    500: "server_error",
}
