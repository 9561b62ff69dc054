"""Loaders for configuration documents walked by the command line."""

import json
from pathlib import Path
from typing import Any

try:
    import yaml
    HAS_YAML = True
    _YAML_ERRORS = (yaml.YAMLError,)
except ImportError:
    HAS_YAML = False
    _YAML_ERRORS = ()

try:
    import tomllib
except ImportError:
    try:
        import toml as tomllib  # type: ignore
        HAS_TOML = True
    except ImportError:
        HAS_TOML = False
else:
    HAS_TOML = True


class DocumentError(ValueError):
    """A document cannot be read or parsed."""


def parse_text(content: str, suffix: str) -> Any:
    """
    Parse the content of a document.

    Args:
        content: Text of the document.
        suffix: File extension selecting the format, e.g. ".yaml". Unknown
               extensions are tried as JSON, then as YAML.

    Returns:
        Parsed data structure.

    Raises:
        DocumentError: If the content is malformed or the parser for the
                       format is not installed.
    """
    suffix = suffix.lower()
    try:
        if suffix in {".yaml", ".yml"}:
            if not HAS_YAML:
                raise DocumentError("PyYAML is required to load YAML documents")
            return yaml.safe_load(content)

        elif suffix == ".json":
            return json.loads(content)

        elif suffix == ".toml":
            if not HAS_TOML:
                raise DocumentError("toml is required to load TOML documents")
            return tomllib.loads(content)

        else:
            # Try to parse as JSON first, then YAML
            try:
                return json.loads(content)
            except json.JSONDecodeError:
                if HAS_YAML:
                    return yaml.safe_load(content)
                raise

    except DocumentError:
        raise
    except ValueError as e:
        # JSON and TOML decode errors
        raise DocumentError(str(e)) from e
    except _YAML_ERRORS as e:
        raise DocumentError(str(e)) from e


def parse_file(file_path: Path) -> Any:
    """
    Load a configuration document.

    Args:
        file_path: Path to a YAML, JSON or TOML file.

    Returns:
        Parsed data structure.

    Raises:
        DocumentError: If the file cannot be read or parsed.
    """
    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentError(f"cannot read {file_path}: {e}") from e
    return parse_text(content, file_path.suffix)
