"""Formatters de logging estruturado.

Todo log sai em JSON com os campos obrigatórios abaixo, renomeados
para o formato usado nos dashboards (level, logger).
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Exemplo de output:
        {
            "asctime": "2026-10-17 10:30:00,123",
            "level": "WARNING",
            "logger": "app.services.media_decryptor",
            "message": "media_plaintext_hash_mismatch",
            "correlation_id": "abc-123",
            "service": "bluepix-flow"
        }
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)
    return JsonFormatter(format_string, rename_fields=FIELD_RENAME_MAP)
