"""
Loading argument values from YAML or JSON configuration files.

A configuration file is a mapping from argument name to value:

    integer: 4
    path: /var/lib/kittens
    multiple integers: [1, 2, 3]
"""

import json
import os
import typing
from typing import Any

from .errors import ConfigFileError

try:
    import yaml

    HAS_YAML = True
except ImportError:
    HAS_YAML = False

__all__: typing.Sequence[str] = ("load_config_file",)

_YAML_EXTENSIONS = (".yaml", ".yml")
_JSON_EXTENSIONS = (".json",)
_YAML_ERRORS: tuple[type, ...] = (yaml.YAMLError,) if HAS_YAML else ()


def _read_document(config_path: str, file_ext: str) -> Any:
    with open(config_path, "r") as f:
        if file_ext in _YAML_EXTENSIONS:
            return yaml.safe_load(f)
        return json.load(f)


def load_config_file(config_path: str) -> dict[str, Any]:
    """
    Read the argument values stored in a configuration file.

    The format follows the extension: ``.yaml``/``.yml`` through PyYAML,
    ``.json`` through the json module.

    Args:
        config_path (str): Path to the configuration file.

    Returns:
        dict[str, Any]: Mapping of argument name to configured value. An empty
        document yields an empty mapping.

    Raises:
        ConfigFileError: If the file cannot be opened or read (the OSError is
            chained as the cause), its extension is not one of the above, its
            content does not parse, or the document is not a mapping.
    """
    file_ext = os.path.splitext(config_path)[1].lower()
    if file_ext not in _YAML_EXTENSIONS + _JSON_EXTENSIONS:
        raise ConfigFileError(
            config_path,
            f"Unsupported file format: {file_ext or '(none)'}, expected one of "
            f"{', '.join(_YAML_EXTENSIONS + _JSON_EXTENSIONS)}",
        )
    if file_ext in _YAML_EXTENSIONS and not HAS_YAML:
        raise ConfigFileError(config_path, "reading YAML requires PyYAML")

    try:
        data = _read_document(config_path, file_ext)
    except OSError as e:
        raise ConfigFileError(config_path, f"cannot be read ({e.strerror or e})") from e
    except json.JSONDecodeError as e:
        raise ConfigFileError(config_path, f"Invalid JSON file: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigFileError(config_path, f"not valid text: {e}") from e
    except _YAML_ERRORS as e:
        raise ConfigFileError(config_path, f"Invalid YAML file: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(
            config_path,
            f"expected a mapping of argument names, got {type(data).__name__}",
        )
    return data
