"""
Record Validator Module
Validates persisted JSON records against the packaged JSON schemas.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from jsonschema import Draft7Validator, FormatChecker, ValidationError

from worklife_coach.utils.errors import DataIntegrityError
from worklife_coach.utils.logger import get_logger

DEFAULT_SCHEMA_DIR = Path(__file__).resolve().parent.parent / "schemas"

logger = get_logger(
    correlation_id="record-validator", phase="persistence", component="validator"
)


class RecordValidator:
    """Validates stored records against JSON schemas."""

    def __init__(self, schema_dir: Optional[Path] = None):
        """
        Initialize validator with schema directory.

        Args:
            schema_dir: Directory containing JSON schemas (defaults to the packaged schemas)
        """
        self.schema_dir = Path(schema_dir) if schema_dir else DEFAULT_SCHEMA_DIR
        self._validators: Dict[str, Draft7Validator] = {}

    def _get_validator(self, schema_name: str) -> Draft7Validator:
        if schema_name in self._validators:
            return self._validators[schema_name]

        schema_path = self.schema_dir / schema_name
        if not schema_path.exists():
            logger.error("Schema not found", schema_name=schema_name)
            raise FileNotFoundError(f"Schema file not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        validator = Draft7Validator(schema, format_checker=FormatChecker())
        self._validators[schema_name] = validator
        return validator

    def validate(
        self, record: Dict[str, Any], schema_name: str = "user_profile_schema.json"
    ) -> None:
        """
        Validate a record against a schema.

        Args:
            record: Decoded JSON record
            schema_name: Schema filename to validate against

        Raises:
            DataIntegrityError: If validation fails, with one line per violation
        """
        validator = self._get_validator(schema_name)
        errors = sorted(validator.iter_errors(record), key=lambda e: list(e.absolute_path))
        if not errors:
            return

        logger.warning(
            "Record failed validation", schema_name=schema_name, error_count=len(errors)
        )
        raise DataIntegrityError(
            "\n".join(self._format_validation_errors(errors, schema_name))
        )

    def _format_validation_errors(
        self, errors: List[ValidationError], schema_name: str
    ) -> List[str]:
        """
        Format validation errors into readable messages.

        Args:
            errors: List of validation errors from jsonschema
            schema_name: Schema name for context

        Returns:
            List of formatted error messages
        """
        messages = [f"Record validation failed for {schema_name}:"]

        for error in errors:
            path = " -> ".join(str(p) for p in error.absolute_path) or "(root)"

            if error.validator == "required":
                messages.append(f"  * Missing required field at {path}: {error.message}")
            elif error.validator == "type":
                messages.append(
                    f"  * Type mismatch at '{path}': expected {error.validator_value}"
                )
            elif error.validator in ("minimum", "maximum"):
                messages.append(f"  * Value out of range at '{path}': {error.message}")
            elif error.validator == "enum":
                messages.append(
                    f"  * Invalid value at '{path}': allowed {error.validator_value}"
                )
            else:
                messages.append(f"  * Validation error at '{path}': {error.message}")

        return messages
