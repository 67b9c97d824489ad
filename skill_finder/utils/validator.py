"""
Schema Validator Module
Validates JSON documents (LLM responses, configuration files) against JSON schemas.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
from jsonschema import Draft7Validator, FormatChecker, ValidationError

logger = structlog.get_logger(__name__)

DEFAULT_SCHEMA_DIR = Path(__file__).parent.parent / "schemas"

LLM_RECOMMENDATION_SCHEMA = "llm_recommendation_schema.json"
SYSTEM_PARAMS_SCHEMA = "system_params_schema.json"


class ConfigurationError(Exception):
    """Raised when a schema or configuration file is missing or unreadable."""

    pass


class SchemaValidationError(Exception):
    """Raised when a document does not satisfy its JSON schema.

    Attributes:
        schema_name: Schema the document was checked against
        messages: Formatted, one-per-error messages
    """

    def __init__(self, schema_name: str, messages: List[str]):
        self.schema_name = schema_name
        self.messages = messages
        super().__init__("\n".join(messages))


class SchemaValidator:
    """Validates documents against JSON schemas shipped with the package."""

    def __init__(self, schema_dir: Optional[Path] = None):
        """
        Initialize validator with schema directory.

        Args:
            schema_dir: Path to directory containing JSON schemas
                (defaults to skill_finder/schemas)
        """
        self.schema_dir = schema_dir or DEFAULT_SCHEMA_DIR
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Load JSON schema from file.

        Args:
            schema_name: Schema filename (e.g., "llm_recommendation_schema.json")

        Returns:
            Loaded schema dictionary

        Raises:
            ConfigurationError: If schema file not found or invalid
        """
        if schema_name in self._schemas:
            logger.debug("schema_loaded_from_cache", schema_name=schema_name)
            return self._schemas[schema_name]

        schema_path = self.schema_dir / schema_name
        if not schema_path.exists():
            logger.error(
                "schema_not_found",
                schema_name=schema_name,
                schema_path=str(schema_path),
            )
            raise ConfigurationError(f"Schema file not found: {schema_path}")

        try:
            with open(schema_path, "r", encoding="utf-8") as f:
                schema = json.load(f)
            self._schemas[schema_name] = schema
            logger.info(
                "schema_loaded", schema_name=schema_name, schema_path=str(schema_path)
            )
            return schema
        except json.JSONDecodeError as e:
            logger.error("schema_invalid_json", schema_name=schema_name, error=str(e))
            raise ConfigurationError(f"Invalid JSON in schema {schema_name}: {e}")

    def validate(self, document: Any, schema_name: str) -> None:
        """
        Validate a decoded JSON document against a schema.

        Args:
            document: Decoded JSON value to validate
            schema_name: Schema filename to validate against

        Raises:
            SchemaValidationError: If validation fails with detailed error messages
        """
        logger.debug("validating_document", schema_name=schema_name)
        schema = self.load_schema(schema_name)
        validator = Draft7Validator(schema, format_checker=FormatChecker())

        errors = sorted(validator.iter_errors(document), key=lambda e: list(e.absolute_path))
        if not errors:
            logger.debug("validation_passed", schema_name=schema_name)
            return

        logger.warning(
            "validation_failed", schema_name=schema_name, error_count=len(errors)
        )
        raise SchemaValidationError(
            schema_name, self._format_validation_errors(errors, schema_name)
        )

    def validate_file(self, document_path: Path, schema_name: str) -> Dict[str, Any]:
        """
        Load and validate a JSON file.

        Args:
            document_path: Path to JSON file
            schema_name: Schema filename to validate against

        Returns:
            Validated document dictionary

        Raises:
            ConfigurationError: If file not found or not valid JSON
            SchemaValidationError: If the document fails validation
        """
        logger.debug(
            "validating_file", document_path=str(document_path), schema_name=schema_name
        )

        if not document_path.exists():
            logger.error("document_not_found", document_path=str(document_path))
            raise ConfigurationError(f"File not found: {document_path}")

        try:
            with open(document_path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(
                "document_invalid_json", document_path=str(document_path), error=str(e)
            )
            raise ConfigurationError(
                f"Invalid JSON in {document_path.name}: {e}\n"
                f"Check for trailing commas, missing quotes, or invalid syntax."
            )

        self.validate(document, schema_name)
        logger.info(
            "file_validation_complete",
            document_path=str(document_path),
            schema_name=schema_name,
        )
        return document

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
        messages = [f"Validation failed for {schema_name}:"]

        for error in errors:
            path = " -> ".join([str(p) for p in error.absolute_path]) or "(root)"

            if error.validator == "required":
                missing_field = error.message.split("'")[1]
                messages.append(f"  * Missing required field: '{missing_field}' at {path}")
            elif error.validator == "type":
                messages.append(
                    f"  * Type mismatch at '{path}': {error.message} "
                    f"(expected {error.validator_value})"
                )
            elif error.validator in ("minimum", "maximum"):
                messages.append(f"  * Value out of range at '{path}': {error.message}")
            elif error.validator in ("minItems", "maxItems"):
                messages.append(f"  * Wrong number of items at '{path}': {error.message}")
            elif error.validator == "minLength":
                messages.append(f"  * Value too short at '{path}': {error.message}")
            elif error.validator == "enum":
                messages.append(
                    f"  * Invalid value at '{path}': {error.message} "
                    f"(allowed: {error.validator_value})"
                )
            else:
                messages.append(f"  * Validation error at '{path}': {error.message}")

        return messages
