"""
Core Application - Infrastructure & Base Classes

This app contains infrastructure code shared by the domain apps
(members, payments). It holds no business logic of its own.

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key
    - AppendOnlyMixin: Insert-once rows for the payment ledger

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - ValidationError: Input validation failures
    - ConflictError: State conflicts (duplicates, etc.)

Views (import from core.views):
    - health_check: Database, cache and fee catalog status

Usage:
    from core.services import BaseService, ServiceResult
    from core.exceptions import ValidationError, ConflictError
    from core.model_mixins import AppendOnlyMixin, UUIDPrimaryKeyMixin

Note:
    Model mixins and views are NOT imported here to avoid AppRegistryNotReady
    errors. Import them directly from their modules.
"""

# Services (no Django model dependencies)
from .services import BaseService, ServiceResult

# Exceptions (no Django dependencies)
from .exceptions import (
    BaseApplicationError,
    ConflictError,
    ValidationError,
)

__all__ = [
    # Services
    "BaseService",
    "ServiceResult",
    # Exceptions
    "BaseApplicationError",
    "ValidationError",
    "ConflictError",
]
