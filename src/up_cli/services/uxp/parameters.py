"""Chart parameter parsing.

Parameters start from an optional YAML file and are refined by
``--set key.path=value`` overrides, the way ``helm --set`` treats them.
"""

from __future__ import annotations

import copy
import re
from pathlib import Path
from typing import Any

import yaml

from up_cli.services.uxp.exceptions import ParameterParseError

ERR_READ_PARAMETERS_FILE = "unable to read parameters file"
ERR_PARSE_INSTALL_PARAMETERS = "unable to parse install parameters"

_INT_PATTERN = re.compile(r"^[-+]?(0|[1-9][0-9]*)$")


def parse_set_values(values: list[str] | None) -> dict[str, str]:
    """Split ``key=value`` strings into a mapping.

    Raises:
        ParameterParseError: A value has no ``=`` or an empty key.
    """
    result: dict[str, str] = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ParameterParseError(f"invalid parameter {item!r}, expected key=value")
        result[key.strip()] = value
    return result


def load_parameters_file(path: str | Path | None) -> dict[str, Any]:
    """Read a YAML parameters file. A missing path yields an empty mapping.

    Raises:
        ParameterParseError: The file cannot be read or is not a YAML mapping.
    """
    if not path:
        return {}
    try:
        with Path(path).open() as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ParameterParseError(ERR_READ_PARAMETERS_FILE, e) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ParameterParseError(
            ERR_READ_PARAMETERS_FILE, TypeError(f"{path} does not contain a mapping")
        )
    return data


def coerce_value(value: str) -> Any:
    """Coerce an override string to a bool, None, int, or leave it as a string."""
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if lowered == "null":
        return None
    if _INT_PATTERN.match(value):
        return int(value)
    return value


class ParameterParser:
    """Merges ``--set`` overrides into a base parameter mapping.

    The base mapping is never modified.

    Example:
        >>> ParameterParser({"a": {"b": 1}}, {"a.c": "true"}).parse()
        {'a': {'b': 1, 'c': True}}
    """

    def __init__(self, base: dict[str, Any] | None, overrides: dict[str, str] | None) -> None:
        self.base = base or {}
        self.overrides = overrides or {}

    def parse(self) -> dict[str, Any]:
        """Return the merged parameters.

        Raises:
            ParameterParseError: An override path runs through a non-mapping value.
        """
        result = copy.deepcopy(self.base)
        for key, raw in self.overrides.items():
            self._set_nested_value(result, key, coerce_value(raw))
        return result

    @staticmethod
    def _set_nested_value(target: dict[str, Any], path: str, value: Any) -> None:
        parts = path.split(".")
        if any(not p for p in parts):
            raise ParameterParseError(f"invalid parameter key {path!r}")

        current = target
        for i, part in enumerate(parts[:-1]):
            existing = current.get(part)
            if existing is None:
                # helm replaces a null with a map
                existing = current[part] = {}
            if not isinstance(existing, dict):
                collided = ".".join(parts[: i + 1])
                raise ParameterParseError(
                    f"cannot set {path}: {collided} is not a mapping"
                )
            current = existing
        current[parts[-1]] = value


def build_parameters(
    values_file: str | Path | None,
    set_values: list[str] | None,
) -> dict[str, Any]:
    """Assemble install parameters from a values file and ``--set`` overrides.

    Raises:
        ParameterParseError: ``unable to read parameters file`` or
            ``unable to parse install parameters``, wrapping the cause.
    """
    base = load_parameters_file(values_file)
    try:
        return ParameterParser(base, parse_set_values(set_values)).parse()
    except ParameterParseError as e:
        raise ParameterParseError(ERR_PARSE_INSTALL_PARAMETERS, e) from e
