"""
Typed exception hierarchy for the materials kernel.

===============================================================================
RESULTS VS. EXCEPTIONS
===============================================================================

Everyday scan outcomes are NOT exceptions.  An unknown serial, a receive on
an item that is already in the warehouse, an undo with no history -- these
come back as an ``OperationResult`` with a ``ResultKind`` and the caller
decides how to present them.

The classes below cover faults: a mode label nobody recognises, a gateway
asked to update a row it never stored, an attempt to rewrite audit history,
a broken database connection, an unreadable settings file.

Every exception carries a class-level ``code`` (machine-readable) and keeps
its context as attributes so the structured log formatter can emit them.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    MaterialsKernelError (base)
    |
    +-- ScanError
    |   +-- UnknownScanModeError
    |
    +-- MaterialError
    |   +-- MaterialNotFoundError
    |
    +-- AuditLogError
    |   +-- AuditLogImmutabilityError
    |
    +-- PersistenceError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                  | When Raised
----------------|-----------------------|-----------------------------------------
Scan            | UNKNOWN_SCAN_MODE     | Mode label is neither receive nor issue
----------------|-----------------------|-----------------------------------------
Material        | MATERIAL_NOT_FOUND    | Gateway update/delete of an unknown id
----------------|-----------------------|-----------------------------------------
Audit log       | AUDIT_LOG_IMMUTABLE   | Stored log entry removed or rewritten
----------------|-----------------------|-----------------------------------------
Persistence     | PERSISTENCE_ERROR     | Database driver failure in the gateway
----------------|-----------------------|-----------------------------------------
Configuration   | CONFIGURATION_ERROR   | Settings file missing keys / bad types

===============================================================================
"""


class MaterialsKernelError(Exception):
    """
    Base exception for all materials kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "MATERIALS_KERNEL_ERROR"


# Scan-related exceptions


class ScanError(MaterialsKernelError):
    """Base exception for scan input errors."""

    code: str = "SCAN_ERROR"


class UnknownScanModeError(ScanError):
    """Scan mode label could not be resolved."""

    code: str = "UNKNOWN_SCAN_MODE"

    def __init__(self, mode: str):
        self.mode = mode
        super().__init__(f"Unknown scan mode: {mode!r}")


# Material-related exceptions


class MaterialError(MaterialsKernelError):
    """Base exception for material record errors."""

    code: str = "MATERIAL_ERROR"


class MaterialNotFoundError(MaterialError):
    """No stored material with the given id."""

    code: str = "MATERIAL_NOT_FOUND"

    def __init__(self, material_id: str):
        self.material_id = material_id
        super().__init__(f"Material not found: {material_id}")


# Audit log exceptions


class AuditLogError(MaterialsKernelError):
    """Base exception for audit log errors."""

    code: str = "AUDIT_LOG_ERROR"


class AuditLogImmutabilityError(AuditLogError):
    """
    An update would remove or rewrite an already stored log entry.

    The log is append-only: undo adds a compensating entry, it never
    deletes the one it reverses.
    """

    code: str = "AUDIT_LOG_IMMUTABLE"

    def __init__(self, material_id: str, seq: int, reason: str):
        self.material_id = material_id
        self.seq = seq
        self.reason = reason
        super().__init__(
            f"Audit log of material {material_id} is append-only "
            f"(entry {seq}): {reason}"
        )


# Infrastructure exceptions


class PersistenceError(MaterialsKernelError):
    """The persistence gateway failed to complete an operation."""

    code: str = "PERSISTENCE_ERROR"

    def __init__(self, operation: str, material_id: str | None, detail: str):
        self.operation = operation
        self.material_id = material_id
        self.detail = detail
        super().__init__(
            f"Persistence {operation} failed for material {material_id}: {detail}"
        )


class ConfigurationError(MaterialsKernelError):
    """Settings could not be loaded or are invalid."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid configuration in {source}: {reason}")
