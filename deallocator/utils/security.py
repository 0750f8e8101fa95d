"""Log sanitization and identifier validation for the Azure compute deallocator.

Credentials picked up by ``DefaultAzureCredential`` and SAS or storage keys
that show up in SDK error messages are redacted before anything is logged.
Inventory identifiers are checked against the Azure subscription GUID and
ARM resource ID shapes.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

AZURE_ID_PATTERNS = {
    "subscription_id": re.compile(
        r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
    ),
    "resource_id": re.compile(
        r"^/subscriptions/[^/]+/resourceGroups/[^/]+/providers/[^/]+/[^/]+/[^/]+",
        re.IGNORECASE,
    ),
}

# Never valid in an ARM ID
FORBIDDEN_ID_CHARACTERS = set("<>{}[]|\\`$;!&*\"'\n\r\t")

MAX_RESOURCE_ID_LENGTH = 1024


@dataclass
class ValidationResult:
    """Outcome of checking one identifier."""

    is_valid: bool
    errors: List[str] = field(default_factory=list)
    sanitized_value: Optional[str] = None

    @classmethod
    def accept(cls, value: str) -> "ValidationResult":
        return cls(is_valid=True, sanitized_value=value)

    @classmethod
    def reject(cls, *errors: str) -> "ValidationResult":
        return cls(is_valid=False, errors=list(errors))


class InputValidator:
    """Checks inventory identifiers before they are handed to the provider."""

    @staticmethod
    def validate_subscription_id(subscription_id: str) -> ValidationResult:
        """
        Validate an Azure subscription ID (GUID form).

        Args:
            subscription_id: Value of the ``SubscriptionID`` column

        Returns:
            ValidationResult carrying the stripped GUID when valid
        """
        value = (subscription_id or "").strip()
        if not value:
            return ValidationResult.reject("Subscription ID cannot be empty")
        if not AZURE_ID_PATTERNS["subscription_id"].match(value):
            return ValidationResult.reject(f"Subscription ID '{value}' is not a GUID")
        return ValidationResult.accept(value)

    @staticmethod
    def validate_resource_id(resource_id: str) -> ValidationResult:
        """
        Validate an Azure Resource Manager resource ID.

        Every problem found is reported, not only the first one.
        """
        value = (resource_id or "").strip()
        if not value:
            return ValidationResult.reject("Resource ID cannot be empty")

        problems = []
        if len(value) > MAX_RESOURCE_ID_LENGTH:
            problems.append(f"Resource ID is longer than {MAX_RESOURCE_ID_LENGTH} characters")
        if FORBIDDEN_ID_CHARACTERS.intersection(value):
            problems.append("Resource ID contains characters not allowed in an ARM ID")
        if not AZURE_ID_PATTERNS["resource_id"].match(value):
            problems.append(
                "Resource ID does not match /subscriptions/<id>/resourceGroups/<rg>/providers/..."
            )

        if problems:
            return ValidationResult.reject(*problems)
        return ValidationResult.accept(value)


class LogSanitizer:
    """Redacts secrets from log messages and structured log details."""

    SENSITIVE_PATTERNS = [
        (re.compile(r"(?i)client[_-]?secret\s*[=:]\s*\S+"), "client_secret=[REDACTED]"),
        (re.compile(r"(?i)password\s*[=:]\s*\S+"), "password=[REDACTED]"),
        (re.compile(r"(?i)secret\s*[=:]\s*\S+"), "secret=[REDACTED]"),
        (re.compile(r"(?i)token\s*[=:]\s*\S+"), "token=[REDACTED]"),
        (re.compile(r"(?i)(?:bearer)\s+[A-Za-z0-9\-_.]+"), "Bearer [REDACTED]"),
        (re.compile(r"(?i)sig=[A-Za-z0-9%+/=]+"), "sig=[REDACTED]"),
        (re.compile(r"(?i)AccountKey=[A-Za-z0-9+/=]+"), "AccountKey=[REDACTED]"),
    ]

    SENSITIVE_KEYS = ("password", "secret", "token", "credential", "auth")

    @classmethod
    def sanitize(cls, message: str) -> str:
        """Return ``message`` with every known secret pattern redacted."""
        for pattern, replacement in cls.SENSITIVE_PATTERNS:
            message = pattern.sub(replacement, message)
        return message

    @classmethod
    def _sanitize_value(cls, value: Any) -> Any:
        if isinstance(value, str):
            return cls.sanitize(value)
        if isinstance(value, dict):
            return cls.sanitize_dict(value)
        if isinstance(value, list):
            return [cls.sanitize(v) if isinstance(v, str) else v for v in value]
        return value

    @classmethod
    def sanitize_dict(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Sanitize log details.

        Values under a sensitive-looking key are replaced outright; other
        string values are scrubbed with ``sanitize``.
        """
        return {
            key: "[REDACTED]"
            if any(s in key.lower() for s in cls.SENSITIVE_KEYS)
            else cls._sanitize_value(value)
            for key, value in data.items()
        }
