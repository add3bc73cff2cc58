# topmark:header:start
#
#   project      : ScopeReport
#   file         : io.py
#   file_relpath : src/scopereport/config/io.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""TOML and environment I/O for ScopeReport configuration.

Typical flow:
    1. Start from the built-in defaults (`ReportConfig()`).
    2. Discover the nearest ``scopereport.toml`` or ``pyproject.toml`` containing a
       ``[tool.scopereport]`` table (`find_config_file`) and apply it.
    3. Apply ``SCOPEREPORT_*`` environment variables (`env_overrides`).
    4. Serialize back to TOML when needed (`to_toml`).

Parsing is done with `tomlkit` and returned as plain `dict` structures.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeGuard

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from scopereport.config.keys import Toml
from scopereport.config.logging import get_logger
from scopereport.config.model import ReportConfig
from scopereport.constants import (
    ENV_COLOR,
    ENV_FRAME,
    ENV_GLYPHS,
    PYPROJECT_TOML_NAME,
    SCOPEREPORT_TOML_NAME,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from scopereport.config.logging import ScopereportLogger

logger: ScopereportLogger = get_logger(__name__)

TomlTable = dict[str, Any]

_ENV_KEYS: dict[str, str] = {
    ENV_FRAME: Toml.KEY_FRAME,
    ENV_GLYPHS: Toml.KEY_GLYPHS,
    ENV_COLOR: Toml.KEY_COLOR,
}


def is_toml_table(val: Any) -> TypeGuard[TomlTable]:
    """Return True if ``val`` is a TOML table (``dict``)."""
    return isinstance(val, dict)


def load_toml_dict(path: Path) -> TomlTable:
    """Parse a TOML file into a plain ``dict``.

    Args:
        path (Path): File to read.

    Returns:
        TomlTable: The parsed document; an empty dict if the file cannot be read or
        parsed (the problem is logged).
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Cannot read %s: %s", path, exc)
        return {}
    try:
        document = tomlkit.parse(text)
    except TomlkitParseError as exc:
        logger.warning("Invalid TOML in %s: %s", path, exc)
        return {}
    return document.unwrap()


def extract_section(document: TomlTable, path: Path) -> TomlTable | None:
    """Return the ScopeReport table of a parsed configuration file.

    ``scopereport.toml`` holds the settings at top level; ``pyproject.toml`` holds
    them under ``[tool.scopereport]``.
    """
    if path.name != PYPROJECT_TOML_NAME:
        return document
    tool = document.get(Toml.SECTION_TOOL)
    if not is_toml_table(tool):
        return None
    section = tool.get(Toml.SECTION_SCOPEREPORT)
    return section if is_toml_table(section) else None


def find_config_file(start: Path | None = None) -> tuple[Path, TomlTable] | None:
    """Search ``start`` and its parents for configuration.

    In each directory ``scopereport.toml`` wins over ``pyproject.toml``; a
    ``pyproject.toml`` only counts when it contains ``[tool.scopereport]``.

    Args:
        start (Path | None): Directory to start from; defaults to the working directory.

    Returns:
        tuple[Path, TomlTable] | None: The file and its ScopeReport table, or None.
    """
    directory = (start or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        for name in (SCOPEREPORT_TOML_NAME, PYPROJECT_TOML_NAME):
            candidate = candidate_dir / name
            if not candidate.is_file():
                continue
            section = extract_section(load_toml_dict(candidate), candidate)
            if section is not None:
                logger.debug("Using configuration from %s", candidate)
                return candidate, section
    return None


def env_overrides(environ: Mapping[str, str] | None = None) -> TomlTable:
    """Return the configuration values set through ``SCOPEREPORT_*`` variables."""
    env = os.environ if environ is None else environ
    return {key: env[name] for name, key in _ENV_KEYS.items() if env.get(name)}


def load_config(start: Path | None = None) -> ReportConfig:
    """Resolve the effective configuration (defaults, file, environment).

    Args:
        start (Path | None): Directory where configuration discovery starts.

    Returns:
        ReportConfig: The merged configuration.
    """
    config = ReportConfig()
    found = find_config_file(start)
    if found is not None:
        path, table = found
        config = config.merged_with(table, source=str(path))
    overrides = env_overrides()
    if overrides:
        config = config.merged_with(overrides, source="environment")
    return config


def to_toml(config: ReportConfig, *, for_pyproject: bool = False) -> str:
    """Render ``config`` as a TOML document.

    Args:
        config (ReportConfig): Configuration to serialize.
        for_pyproject (bool): If True, nest the values under ``[tool.scopereport]``.

    Returns:
        str: TOML document text.
    """
    document = tomlkit.document()
    if not for_pyproject:
        for key, value in config.to_dict().items():
            document.add(key, value)
        return tomlkit.dumps(document)

    table = tomlkit.table()
    for key, value in config.to_dict().items():
        table.add(key, value)
    tool = tomlkit.table(is_super_table=True)
    tool.add(Toml.SECTION_SCOPEREPORT, table)
    document.add(Toml.SECTION_TOOL, tool)
    return tomlkit.dumps(document)
