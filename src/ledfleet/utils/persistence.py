"""JSON files backed by pydantic models (settings and layouts).

Writes are crash-safe: the previous file is copied to `<name>.bak`, the
new content goes to `<name>.tmp` and is renamed over the target. Reads
never repair anything; a broken file is reported with a hint and left
untouched for the operator to fix.
"""

import logging
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from ledfleet.exceptions import ConfigFileInvalidError, ConfigurationError, wrap_pydantic_error

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _sibling(path: Path, suffix: str) -> Path:
    return path.with_suffix(path.suffix + suffix)


class PydanticPersistence:
    """
    Static helpers to read and write pydantic models as JSON.

    Example:
        ```python
        layout = PydanticPersistence.load_json(Path("wall.json"), LayoutConfig)
        PydanticPersistence.save_json(settings, AppConfig.default_path())
        ```
    """

    @staticmethod
    def load_json(path: Path, model_type: type[M]) -> M:
        """
        Read `path` and validate it as `model_type`.

        Raises:
            FileNotFoundError: If there is no such file
            ConfigFileInvalidError: If the file is empty, unreadable or not JSON
            ConfigValidationError: If a value fails validation
            ConfigurationError: For model-level checks (e.g. layout bounds)
        """
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Cannot read {path}: {e}")
            raise ConfigFileInvalidError(str(path), f"Cannot read file: {e}") from e

        if not text.strip():
            raise ConfigFileInvalidError(str(path), "File is empty")

        try:
            model = model_type.model_validate_json(text)
        except ValidationError as e:
            logger.error(f"{path} is not a valid {model_type.__name__}: {e}")
            raise wrap_pydantic_error(e, str(path)) from e

        logger.debug(f"Loaded {model_type.__name__} from {path}")
        return model

    @staticmethod
    def load_json_or_default(
        path: Path, model_type: type[M], default_factory: Callable[[], M] | None = None
    ) -> M:
        """
        Like load_json, but a missing file yields a default model.

        Broken files still raise. Nothing is written to disk.
        """
        try:
            return PydanticPersistence.load_json(path, model_type)
        except FileNotFoundError:
            logger.info(f"No {path}, using default {model_type.__name__}")
            return default_factory() if default_factory else model_type()

    @staticmethod
    def save_json(
        data: BaseModel,
        path: Path,
        indent: int = 2,
        create_parents: bool = True,
        backup: bool = True,
        by_alias: bool = False,
    ) -> None:
        """
        Write `data` to `path` atomically.

        Args:
            data: Model to write
            path: Target file
            indent: JSON indentation
            create_parents: Create missing parent directories
            backup: Keep the current file as `<name>.bak`
            by_alias: Write field aliases instead of field names

        Raises:
            OSError: If the file cannot be written
            ConfigurationError: If the model cannot be serialized
        """
        name = type(data).__name__
        try:
            content = data.model_dump_json(indent=indent, by_alias=by_alias)
        except ValueError as e:
            raise ConfigurationError(
                f"Failed to save configuration to {path}",
                technical_message=f"Cannot serialize {name}: {e}",
            ) from e

        if create_parents:
            path.parent.mkdir(parents=True, exist_ok=True)

        if backup and path.exists():
            shutil.copy2(path, _sibling(path, ".bak"))

        temp_path = _sibling(path, ".tmp")
        try:
            temp_path.write_text(content, encoding="utf-8")
            temp_path.replace(path)
        except OSError as e:
            logger.error(f"Cannot write {name} to {path}: {e}")
            raise
        finally:
            temp_path.unlink(missing_ok=True)
        logger.debug(f"Saved {name} to {path}")

    @staticmethod
    def validate_json(path: Path, model_type: type[M]) -> tuple[bool, str | None]:
        """
        Check a file without keeping the model.

        Returns:
            (True, None) if valid, else (False, reason)
        """
        try:
            PydanticPersistence.load_json(path, model_type)
        except FileNotFoundError:
            return False, f"File not found: {path}"
        except ConfigurationError as e:
            return False, e.get_full_message()
        return True, None
