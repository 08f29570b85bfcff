"""
JSON Schema Contract Validators

Проверка JSON-записей рынков и пользователей против контрактов
(Draft 2020-12) до построения pydantic моделей.

Схемы (stablex/core/contracts/schema/):
- market_state.json
- user_state.json

Валидатор каждой схемы строится один раз (meta-validation + кэш).
Ошибки собираются через iter_errors: запись с несколькими нарушениями
отклоняется одним исключением со списком всех нарушений.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

SCHEMA_DIR = Path(__file__).parent / "schema"

MARKET_STATE_SCHEMA = "market_state"
USER_STATE_SCHEMA = "user_state"


class ContractViolationError(ValueError):
    """Запись не соответствует JSON Schema контракту."""

    def __init__(self, subject: str, errors: List[str]):
        self.subject = subject
        self.errors = errors
        super().__init__(
            f"{subject} violates contract ({len(errors)} errors): " + "; ".join(errors)
        )


@lru_cache(maxsize=None)
def load_validator(schema_name: str, schema_dir: Path = SCHEMA_DIR) -> Draft202012Validator:
    """
    Валидатор для схемы schema_dir/<schema_name>.json (кэшируется).

    Raises:
        FileNotFoundError: схемы нет
        jsonschema.SchemaError: схема не проходит meta-validation
    """
    with open(schema_dir / f"{schema_name}.json", "r", encoding="utf-8") as f:
        schema = json.load(f)

    Draft202012Validator.check_schema(schema)
    return Draft202012Validator(schema)


def _describe(error: ValidationError) -> str:
    location = ".".join(str(part) for part in error.absolute_path) or "<record>"
    return f"{location}: {error.message}"


def contract_errors(schema_name: str, record: Dict[str, Any]) -> List[str]:
    """Все нарушения контракта в записи (пустой список для валидной)."""
    errors = load_validator(schema_name).iter_errors(record)
    return sorted(_describe(e) for e in errors)


def validate_market_state(record: Dict[str, Any]) -> None:
    """
    Raises:
        ContractViolationError: со списком всех нарушений
    """
    errors = contract_errors(MARKET_STATE_SCHEMA, record)
    if errors:
        raise ContractViolationError(MARKET_STATE_SCHEMA, errors)


def validate_user_state(record: Dict[str, Any]) -> None:
    errors = contract_errors(USER_STATE_SCHEMA, record)
    if errors:
        raise ContractViolationError(USER_STATE_SCHEMA, errors)
