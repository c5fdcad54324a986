"""
Helpers that turn low-level failures into LedFleetError and report them.

| Situation | Helper |
|-----------|--------|
| A panel host cannot be resolved or reached | `wrap_connection_error(e, panel_id, address)` |
| A layout or config file fails pydantic validation | `wrap_pydantic_error(e, path)` |
| Many panels are handled in one pass | `collect_errors("connect panels")` |
| A non-critical step may fail without stopping the caller | `ErrorContext(..., re_raise=False)` |
| An error has to be shown to the operator | `format_error_for_display(e)` |

## Batch example

```python
collector = collect_errors("connect panels")
for panel in layout.panels:
    with collector.try_operation(panel.id):
        links[panel.id].connect()

if collector.has_errors:
    click.echo(collector.get_summary(), err=True)
```
"""

import logging
import socket
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

from pydantic import ValidationError

from .base import LedFleetError
from .config import ConfigFileInvalidError, ConfigValidationError
from .device import DeviceConnectionError, MetadataError

logger = logging.getLogger(__name__)


class ErrorContext:
    """
    Logs the start, end or failure of one step.

    With `re_raise=False` the failure is logged, kept in `error` and
    swallowed, so the caller can carry on:

    Example:
        ```python
        with ErrorContext("remember last layout", re_raise=False) as step:
            config.save()
        if step.error:
            click.echo("Could not save settings")
        ```
    """

    def __init__(
        self,
        operation: str,
        logger_instance: Optional[logging.Logger] = None,
        re_raise: bool = True,
    ):
        self.operation = operation
        self.re_raise = re_raise
        self.error: Optional[Exception] = None
        self._log = logger_instance or logger

    def __enter__(self) -> "ErrorContext":
        self._log.debug(f"{self.operation}: started")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_val is None:
            self._log.debug(f"{self.operation}: done")
            return False
        if not isinstance(exc_val, Exception):
            return False

        self.error = exc_val
        if isinstance(exc_val, LedFleetError):
            self._log.error(f"Failed to {self.operation}: {exc_val.technical_message}")
        else:
            self._log.error(f"Failed to {self.operation}: {exc_val}", exc_info=exc_val)
        return not self.re_raise


def _field_name(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "value"


def wrap_pydantic_error(error: ValidationError, file_path: str) -> LedFleetError:
    """
    Convert a pydantic ValidationError raised while loading a file.

    Returns:
        ConfigFileInvalidError when the file is not JSON at all,
        ConfigValidationError when a value is wrong
    """
    details = error.errors()

    syntax = next((d for d in details if d.get("type") == "json_invalid"), None)
    if syntax is not None:
        message = syntax.get("msg", "invalid JSON")
        return ConfigFileInvalidError(file_path, message.removeprefix("Invalid JSON:").strip())

    if len(details) == 1:
        detail = details[0]
        return ConfigValidationError(
            field=_field_name(detail.get("loc", ())),
            value=detail.get("input"),
            error_msg=detail.get("msg", "validation failed"),
            file_path=file_path,
        )

    lines = [
        f"  - {_field_name(d.get('loc', ()))}: {d.get('msg', 'validation failed')}"
        for d in details
    ]
    return ConfigValidationError(
        field="multiple fields",
        value=None,
        error_msg=f"{len(details)} validation errors:\n" + "\n".join(lines),
        file_path=file_path,
    )


def wrap_connection_error(
    error: Exception,
    panel_id: str,
    address: str,
    url: Optional[str] = None,
) -> DeviceConnectionError:
    """
    Convert a socket, OS or HTTP error raised while reaching a panel.

    Args:
        error: The original exception
        panel_id: The panel being connected
        address: The panel's configured address
        url: The REST endpoint involved, for metadata failures

    Returns:
        MetadataError when a URL is given, DeviceConnectionError otherwise
    """
    if isinstance(error, DeviceConnectionError):
        return error

    if isinstance(error, socket.gaierror):
        reason = f"cannot resolve host: {error}"
    elif isinstance(error, TimeoutError):
        reason = f"timed out: {error}"
    else:
        reason = f"{type(error).__name__}: {error}"

    if url is not None:
        return MetadataError(panel_id, url, reason)
    return DeviceConnectionError(panel_id, address, reason)


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """Operator message and recovery hint (None if there is none) for any exception."""
    if isinstance(error, LedFleetError):
        return error.user_message, error.recovery_hint
    return f"{type(error).__name__}: {error}", None


class ErrorCollector:
    """
    Runs a batch of sub-operations and keeps every failure.

    A failing sub-operation is logged and recorded, then the batch moves
    on. Only `Exception` subclasses are collected; KeyboardInterrupt and
    SystemExit still propagate.
    """

    def __init__(self, operation: str):
        self.operation = operation
        self.errors: list[tuple[str, Exception]] = []
        self.success_count = 0

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def failed_operations(self) -> list[str]:
        """Names of the sub-operations that raised, in order."""
        return [name for name, _ in self.errors]

    @contextmanager
    def try_operation(self, sub_operation: str) -> Iterator[None]:
        """Run one sub-operation, recording instead of raising on failure."""
        try:
            yield
        except Exception as e:
            detail = e.technical_message if isinstance(e, LedFleetError) else str(e)
            logger.warning(f"{self.operation}: {sub_operation} failed: {detail}")
            self.errors.append((sub_operation, e))
        else:
            self.success_count += 1

    def get_summary(self) -> str:
        """One line for the batch, then one per failure."""
        if not self.errors:
            return f"All operations completed successfully ({self.success_count} total)"

        total = self.error_count + self.success_count
        lines = [f"Failed to {self.operation}: {self.error_count} of {total} failed"]
        for name, error in self.errors:
            message, _ = format_error_for_display(error)
            lines.append(f"  - {name}: {message}")
        return "\n".join(lines)


def collect_errors(operation: str) -> ErrorCollector:
    """Start an ErrorCollector for `operation` (e.g. "connect panels")."""
    return ErrorCollector(operation)
