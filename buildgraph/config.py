"""Configuration for graph caching, resolution and plan compilation.

``load_config`` accepts several source kinds:

* None -> default BuildGraphConfig
* dict -> validated as-is
* Path / path-like string -> load a .toml or .json file
* Inline TOML/JSON string
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from buildgraph.errors import ConfigurationError

logger = logging.getLogger("buildgraph.config")

ConfigSource = Union[str, Path, Dict[str, Any], None]

DEFAULT_CACHE_PATH = Path(".buildgraph") / "dep_graph.json"


class BuildGraphConfig(BaseModel):
    """Settings for a planning run.

    Attributes:
        cache_path: Where the resolved graph is persisted between runs.
        use_cache: Read the persisted graph before resolving.
        write_cache: Persist the graph after resolving.
        strict_plan: Reject plans that miss nodes or break dependency order.
        max_resolution_steps: Upper bound on fetches in one resolution run.
        indent: JSON indentation of the cache file (None for compact).
    """

    model_config = ConfigDict(extra="forbid")

    cache_path: Path = DEFAULT_CACHE_PATH
    use_cache: bool = True
    write_cache: bool = True
    strict_plan: bool = True
    max_resolution_steps: int = Field(default=10000, ge=1)
    indent: Optional[int] = Field(default=None, ge=0, le=8)


def _parse_text(text: str, fmt: Optional[str]) -> Dict[str, Any]:
    if fmt == "json":
        return json.loads(text)
    if fmt == "toml":
        return tomllib.loads(text)
    # Inline content: JSON objects start with a brace, anything else is TOML.
    if text.lstrip().startswith("{"):
        return json.loads(text)
    return tomllib.loads(text)


def load_config(source: ConfigSource = None) -> BuildGraphConfig:
    """Load a BuildGraphConfig from ``source``.

    Args:
        source: None, a mapping, a path to a .toml/.json file, or inline
            TOML/JSON text.

    Returns:
        Validated configuration.

    Raises:
        ConfigurationError: If the source cannot be parsed or validated.
    """
    if source is None:
        logger.debug("No config source provided; using defaults")
        return BuildGraphConfig()

    if isinstance(source, dict):
        data = source
    elif isinstance(source, (str, Path)):
        path = Path(source)
        fmt: Optional[str] = None
        if isinstance(source, Path) or _looks_like_file(path):
            try:
                text = path.read_text(encoding="utf-8")
            except OSError as exc:
                raise ConfigurationError(f"Cannot read config file {path}: {exc}") from exc
            suffix = path.suffix.lower()
            if suffix in {".toml", ".tml"}:
                fmt = "toml"
            elif suffix == ".json":
                fmt = "json"
            logger.debug("Loading config from %s", path)
        else:
            text = str(source)
        try:
            data = _parse_text(text, fmt)
        except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
            raise ConfigurationError(f"Malformed configuration: {exc}") from exc
    else:
        raise ConfigurationError(
            f"Unsupported configuration source type: {type(source).__name__}"
        )

    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a mapping")

    try:
        return BuildGraphConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


def _looks_like_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        # Inline text too long or odd to be a path.
        return False
