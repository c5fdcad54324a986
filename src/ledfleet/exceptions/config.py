"""Errors raised while loading layout and settings files.

None of these are retried: the operator has to fix the file first.
"""

from typing import Any

from .base import LedFleetError

_JSON_CHECKLIST = (
    "Common JSON mistakes:\n"
    "  - a comma after the last item of an object or array\n"
    "  - keys or strings without double quotes\n"
    "  - a missing closing brace or bracket"
)

# Extra hints by field name fragment, first match wins
_FIELD_HINTS = (
    ("panels", "Run 'ledfleet layout check <file>' to validate a layout"),
    ("position", "Run 'ledfleet layout check <file>' to validate a layout"),
    ("size", "Run 'ledfleet layout check <file>' to validate a layout"),
    ("fps", "Valid frame rates: 1 to 240"),
    ("brightness", "Brightness is a fraction between 0.0 and 1.0"),
)


class ConfigurationError(LedFleetError):
    """A layout or settings file cannot be used."""


class ConfigFileInvalidError(ConfigurationError):
    """The file is empty, unreadable or not JSON."""

    def __init__(self, file_path: str, parse_error: str):
        """
        Args:
            file_path: The offending file
            parse_error: Parser or IO message
        """
        lowered = parse_error.lower()
        if "trailing comma" in lowered:
            user_message = "Configuration file has a trailing comma"
            hint = f"Remove the comma after the last item in {file_path}"
        elif "empty" in lowered:
            user_message = "Configuration file is empty"
            hint = f"Delete {file_path} to go back to defaults, or fill it in"
        else:
            user_message = "Configuration file has invalid syntax"
            hint = f"{_JSON_CHECKLIST}\nFile: {file_path}"

        super().__init__(
            user_message,
            technical_message=f"Cannot parse {file_path}: {parse_error}",
            recoverable=True,
            recovery_hint=hint,
        )
        self.file_path = file_path
        self.parse_error = parse_error


class ConfigValidationError(ConfigurationError):
    """The file is valid JSON but a value is out of range or inconsistent."""

    def __init__(self, field: str, value: Any, error_msg: str, file_path: str | None = None):
        """
        Args:
            field: Dotted path of the bad field ("panels.0.size.width")
            value: The rejected value
            error_msg: Why it was rejected
            file_path: The file it came from, if any
        """
        hints = [f"Fix '{field}'" + (f" in {file_path}" if file_path else "")]
        lowered = field.lower()
        hints += [hint for key, hint in _FIELD_HINTS if key in lowered][:1]

        super().__init__(
            f"Invalid configuration value for '{field}': {error_msg}",
            technical_message=f"{field}={value!r} rejected: {error_msg}",
            recoverable=True,
            recovery_hint="\n".join(hints),
        )
        self.field = field
        self.value = value
        self.file_path = file_path


class LayoutBoundsError(ConfigurationError):
    """A panel rectangle extends beyond the virtual canvas."""

    def __init__(
        self,
        panel_id: str,
        panel_extent: tuple[int, int],
        canvas_size: tuple[int, int],
    ):
        """
        Initialize layout bounds error.

        Args:
            panel_id: Panel whose rectangle does not fit
            panel_extent: (right, bottom) pixel edge of the panel, exclusive
            canvas_size: (width, height) of the virtual canvas
        """
        right, bottom = panel_extent
        width, height = canvas_size
        super().__init__(
            user_message=(
                f"Panel '{panel_id}' does not fit in the {width}x{height} canvas"
            ),
            technical_message=(
                f"Panel {panel_id} extends to ({right}, {bottom}), "
                f"canvas is {width}x{height}"
            ),
            recoverable=False,
            recovery_hint=(
                "Enlarge 'virtualGrid' or move the panel. "
                "Omit 'virtualGrid' to size the canvas to fit every panel."
            ),
        )
        self.panel_id = panel_id
        self.panel_extent = panel_extent
        self.canvas_size = canvas_size
