import logging
from typing import Optional

_LOGGER = logging.getLogger(__name__)
_LOGGER.setLevel(logging.INFO)


class InvalidInputError(ValueError):
    pass


class InputValidator:
    """
    Validates administrator- and student-supplied text before it is written to the store.

    Checks:
    - Required fields are not blank
    - Length limits per field type
    - Control character restrictions
    """

    MAX_LENGTHS = {
        "name": 200,
        "department": 200,
        "title": 300,
        "description": 2000,
        "content": 100_000,
        "question": 2000,
        "option": 500,
    }

    # Fields that may legitimately contain newlines and tabs
    MULTILINE_FIELDS = {"description", "content", "question"}

    @classmethod
    def validate_registration_input(cls, name: str, department: str) -> None:
        """
        Validate the fields of a student registration.

        :raises InvalidInputError: If input validation fails
        """
        cls.validate_field(name, "name")
        cls.validate_field(department, "department")

    @classmethod
    def validate_field(cls, text: str, field_name: str, required: bool = True) -> None:
        """
        Validate a single input field.

        :raises InvalidInputError: If input validation fails
        """
        if not isinstance(text, str):
            raise InvalidInputError(f"{field_name} must be a string")

        if not text.strip():
            if required:
                _LOGGER.warning(f"Blank value for required field: {field_name}")
                raise InvalidInputError(f"{field_name} must not be blank")
            return

        max_length = cls.MAX_LENGTHS.get(field_name, 2000)
        if len(text) > max_length:
            _LOGGER.warning(f"Length violation: {field_name} is {len(text)} chars (max {max_length})")
            raise InvalidInputError(f"{field_name} exceeds maximum length of {max_length} characters")

        allowed = "\n\r\t" if field_name in cls.MULTILINE_FIELDS else ""
        control_chars = sum(1 for c in text if ord(c) < 32 and c not in allowed)
        if control_chars > 0:
            _LOGGER.warning(f"Control characters in {field_name}: {control_chars}")
            raise InvalidInputError(f"{field_name} contains control characters")

    @classmethod
    def sanitize_for_logging(cls, text: Optional[str], max_length: int = 100) -> str:
        """
        Sanitize text for safe logging (via truncation).
        """
        if text is None:
            return ""
        if len(text) > max_length:
            return text[:max_length] + "..."
        return text
