"""Configuration loading utilities."""

import copy
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Union

import yaml

INCLUDE_PREFIX = "!include "


class ConfigLoader:
    """Load and manage YAML configurations."""

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize config loader.

        Args:
            config_dir: Directory searched for relative config paths
                that do not exist as given.
        """
        self.config_dir = Path(config_dir) if config_dir else Path("configs")
        self._cache: Dict[str, Dict] = {}

    def resolve(self, config_path: Union[str, Path]) -> Path:
        """
        Resolve a config path.

        Absolute paths and relative paths that exist are used as-is;
        anything else is looked up under config_dir.
        """
        config_path = Path(config_path)
        if config_path.is_absolute() or config_path.exists():
            return config_path
        if config_path.parts[:len(self.config_dir.parts)] == self.config_dir.parts:
            return config_path
        return self.config_dir / config_path

    def load(
        self,
        config_path: Union[str, Path],
        use_cache: bool = True,
    ) -> Dict[str, Any]:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to config file.
            use_cache: Whether to use cached config.

        Returns:
            Configuration dictionary (an empty dict for an empty file).

        Raises:
            FileNotFoundError: If the config file doesn't exist.
            ValueError: If the top level of the file is not a mapping.
        """
        config_path = self.resolve(config_path)
        cache_key = str(config_path)

        if use_cache and cache_key in self._cache:
            return copy.deepcopy(self._cache[cache_key])

        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r") as f:
            config = yaml.safe_load(f) or {}

        if not isinstance(config, dict):
            raise ValueError(
                f"Config root must be a mapping, got {type(config).__name__}: {config_path}"
            )

        config = self._process_includes(
            config, config_path.parent, frozenset([config_path.resolve()])
        )

        if use_cache:
            self._cache[cache_key] = config

        return copy.deepcopy(config)

    def _process_includes(
        self,
        config: Dict,
        base_dir: Path,
        chain: FrozenSet[Path] = frozenset(),
    ) -> Dict:
        """
        Replace `!include <file>` string values with the referenced YAML.

        Args:
            config: Configuration dictionary.
            base_dir: Base directory for relative includes.
            chain: Resolved paths of the files currently being included.

        Returns:
            Processed configuration.

        Raises:
            FileNotFoundError: If an included file doesn't exist.
            ValueError: If a file includes itself, directly or indirectly.
        """
        result = {}

        for key, value in config.items():
            if isinstance(value, str) and value.startswith(INCLUDE_PREFIX):
                include_path = base_dir / value[len(INCLUDE_PREFIX):].strip()
                if not include_path.exists():
                    raise FileNotFoundError(f"Included config not found: {include_path}")
                resolved = include_path.resolve()
                if resolved in chain:
                    raise ValueError(f"Circular config include: {include_path}")
                with open(include_path, "r") as f:
                    included = yaml.safe_load(f)
                if isinstance(included, dict):
                    included = self._process_includes(
                        included, include_path.parent, chain | {resolved}
                    )
                result[key] = included
            elif isinstance(value, dict):
                result[key] = self._process_includes(value, base_dir, chain)
            else:
                result[key] = value

        return result

    def merge(
        self,
        base: Dict[str, Any],
        override: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Deep merge two configurations.

        Args:
            base: Base configuration.
            override: Override configuration.

        Returns:
            Merged configuration.
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self.merge(result[key], value)
            else:
                result[key] = value

        return result

    def save(
        self,
        config: Dict[str, Any],
        path: Union[str, Path],
    ) -> None:
        """
        Save configuration to YAML file.

        Args:
            config: Configuration dictionary.
            path: Output file path.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.safe_dump(config, f, default_flow_style=None, sort_keys=False)

        self._cache.pop(str(path), None)

    def clear_cache(self) -> None:
        """Clear configuration cache."""
        self._cache.clear()


def get_nested(
    config: Dict[str, Any],
    key: str,
    default: Any = None,
) -> Any:
    """
    Get nested config value using dot notation.

    Args:
        config: Configuration dictionary.
        key: Dot-separated key (e.g., 'extrinsics.euler.psi').
        default: Default value if key not found.

    Returns:
        Config value or default.
    """
    value = config

    for k in key.split("."):
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default

    return value

