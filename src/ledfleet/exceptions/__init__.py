"""
Custom exception hierarchy for ledfleet.

## Exception Hierarchy

```
LedFleetError (base)
├── ConfigurationError
│   ├── ConfigFileInvalidError
│   ├── ConfigValidationError
│   └── LayoutBoundsError
├── DeviceError
│   ├── DeviceConnectionError
│   │   └── MetadataError
│   ├── DeviceNotConnectedError
│   └── DeviceTransportError
└── EncodingError (also a ValueError)
    └── BufferTooSmallError
```

Configuration errors abort startup. Connection errors are recorded per
panel and can be retried. Transport errors affect one frame on one panel.
Encoding errors are programming or layout mistakes and propagate at once.

See `ledfleet.exceptions.handlers` for utilities to handle these exceptions.
"""

from .base import LedFleetError
from .config import (
    ConfigFileInvalidError,
    ConfigurationError,
    ConfigValidationError,
    LayoutBoundsError,
)
from .device import (
    DeviceConnectionError,
    DeviceError,
    DeviceNotConnectedError,
    DeviceTransportError,
    MetadataError,
)
from .encoding import BufferTooSmallError, EncodingError
from .handlers import (
    ErrorCollector,
    ErrorContext,
    collect_errors,
    format_error_for_display,
    wrap_connection_error,
    wrap_pydantic_error,
)

__all__ = [
    # Base
    "LedFleetError",
    # Config
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    "LayoutBoundsError",
    # Device
    "DeviceConnectionError",
    "DeviceError",
    "DeviceNotConnectedError",
    "DeviceTransportError",
    "MetadataError",
    # Encoding
    "BufferTooSmallError",
    "EncodingError",
    # Handlers
    "ErrorCollector",
    "ErrorContext",
    "collect_errors",
    "format_error_for_display",
    "wrap_connection_error",
    "wrap_pydantic_error",
]
