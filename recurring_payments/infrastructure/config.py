"""Configuration objects for the infrastructure layer following DDD principles."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_STORE_FILE_NAME = "subscriptions"


class StoreConfig(BaseModel):
    """Strongly-typed configuration for the file-backed subscription store.

    The store lives in a single file inside ``directory``; temporary files
    used for atomic replacement are created next to it.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    directory: Path = Field(..., description="Directory holding the store file")
    file_name: str = Field(
        default=DEFAULT_STORE_FILE_NAME,
        min_length=1,
        description="Name of the store file inside the directory",
    )
    fsync: bool = Field(
        default=True,
        description="Flush the temporary file to disk before the atomic rename",
    )

    @field_validator("file_name")
    @classmethod
    def validate_file_name(cls, v: str) -> str:
        """The file name must be a plain name, not a path."""
        if Path(v).name != v or v in (".", ".."):
            raise ValueError(f"Invalid store file name: {v}. Must not contain path separators")
        return v

    @property
    def path(self) -> Path:
        """Full path of the store file."""
        return self.directory / self.file_name


class ReconcilerConfig(BaseModel):
    """Configuration for the polling reconciler."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        strict=True,
        validate_assignment=True,
    )

    verify_identity: bool = Field(
        default=True,
        description="Require merchants to prove their identity when polled",
    )
    period_scoped_totals: bool = Field(
        default=True,
        description=(
            "Report the amount paid within the current calendar period; "
            "when False the contract's whole history is summed"
        ),
    )


class LogContext(BaseModel):
    """Keyword context attached to store and reconciler log lines.

    Only fields that are set end up in the log record. Unknown keys are kept
    so callers can attach one-off values such as amounts.
    """

    model_config = ConfigDict(extra="allow", str_strip_whitespace=True)

    subscription: str | None = Field(default=None, description="Printable subscription key")
    contract_id: str | None = Field(default=None, description="Hex contract identifier")
    cycle_id: str | None = Field(default=None, description="Reconciliation cycle identifier")
    operation: str | None = Field(default=None, description="Store or cycle step, e.g. 'persist'")
    component: str | None = Field(default=None, description="Class emitting the log line")
    error_code: str | None = Field(default=None, description="Exception class name")
    error_type: str | None = Field(default=None, description="Fully qualified exception type")

    def to_dict(self) -> dict[str, Any]:
        """Set fields only, ready to pass as logger keyword arguments."""
        return {key: value for key, value in self.model_dump().items() if value is not None}

    def with_error(self, error: Exception) -> LogContext:
        """Copy of this context describing ``error``."""
        error_class = type(error)
        return self.model_copy(
            update={
                "error_code": error_class.__name__,
                "error_type": f"{error_class.__module__}.{error_class.__name__}",
            }
        )

    def with_operation(self, operation: str, component: str | None = None) -> LogContext:
        """Copy of this context for another step, keeping the component unless given."""
        return self.model_copy(
            update={"operation": operation, "component": component or self.component}
        )
