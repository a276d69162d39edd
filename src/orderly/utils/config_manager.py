"""
Configuration management for Orderly.
Handles loading, validation, and merging of configurations from multiple sources.
"""

import os
import json
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional, Tuple, Iterable
from dataclasses import dataclass, field
from copy import deepcopy

from .naming import NamingConvention, CONVENTION_TYPES

logger = logging.getLogger(__name__)

CONFIG_FILES = (".orderly.yml", ".orderly.yaml", "orderly.config.json")
ENV_PREFIX = "ORDERLY_"
LOG_LEVELS = ("debug", "info", "warn", "error")


@dataclass(frozen=True)
class CategoryRule:
    """A named bucket of extensions and patterns mapped to a folder."""

    name: str
    extensions: frozenset = field(default_factory=frozenset)
    patterns: Optional[Tuple[str, ...]] = None
    target_folder: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CategoryRule":
        """Build a rule from its configuration mapping.

        Extensions are normalized to lowercase dotted suffixes.
        """
        extensions = frozenset(
            _normalize_extension(ext) for ext in data.get("extensions") or []
        )
        patterns = data.get("patterns")
        return cls(
            name=data["name"],
            extensions=extensions,
            patterns=tuple(patterns) if patterns is not None else None,
            target_folder=data.get("target_folder"),
        )


@dataclass(frozen=True)
class OrganizerConfig:
    """Fully resolved configuration for one organizer run."""

    categories: Tuple[CategoryRule, ...] = ()
    naming_convention: NamingConvention = field(default_factory=NamingConvention)
    exclude_patterns: Tuple[str, ...] = ()
    include_hidden: bool = False
    dry_run: bool = False
    generate_manifest: bool = True
    target_directory: Optional[str] = None
    log_level: str = "info"
    log_file: Optional[str] = None


def _normalize_extension(extension: str) -> str:
    extension = extension.strip().lower()
    if extension and not extension.startswith("."):
        extension = "." + extension
    return extension


def _category(name: str, extensions: Iterable[str]) -> Dict[str, Any]:
    return {"name": name, "extensions": list(extensions), "target_folder": name}


class ConfigManager:
    """Manage configuration from defaults, files, environment and command line."""

    def __init__(
        self,
        config_file: Optional[Path] = None,
        cli_overrides: Optional[Dict[str, Any]] = None,
        search_directory: Optional[Path] = None,
    ):
        """
        Initialize configuration manager.

        Args:
            config_file: Optional path to configuration file. Must exist when given.
            cli_overrides: Optional mapping of dotted config paths to values
            search_directory: Directory searched for a default config file
                when no config_file is given (defaults to the working directory)
        """
        self.config = self._load_default_config()
        self.config_file: Optional[Path] = None

        if config_file is not None:
            config_file = Path(config_file)
            if not config_file.exists():
                raise FileNotFoundError(f"Config file not found: {config_file}")
            self._load_from_file(config_file)
        else:
            found = self.find_config(search_directory or Path.cwd())
            if found:
                self._load_from_file(found)

        # Override with environment variables
        self._load_from_env()

        # Override with command line arguments
        if cli_overrides:
            self._load_from_cli(cli_overrides)

        self._validate_config()

        logger.debug("Configuration loaded successfully")

    def _load_default_config(self) -> Dict[str, Any]:
        """Load default configuration."""
        return {
            "categories": [
                _category(
                    "images",
                    [".jpg", ".jpeg", ".png", ".gif", ".svg", ".webp", ".ico"],
                ),
                _category(
                    "documents",
                    [".pdf", ".doc", ".docx", ".txt", ".md", ".odt", ".rtf"],
                ),
                _category(
                    "videos",
                    [".mp4", ".avi", ".mkv", ".mov", ".wmv", ".flv", ".webm"],
                ),
                _category(
                    "audio",
                    [".mp3", ".wav", ".flac", ".aac", ".ogg", ".wma", ".m4a"],
                ),
                _category(
                    "archives",
                    [".zip", ".tar", ".gz", ".rar", ".7z", ".bz2", ".xz"],
                ),
                _category(
                    "code",
                    [".js", ".ts", ".py", ".java", ".cpp", ".c", ".h", ".cs",
                     ".go", ".rs", ".php", ".rb"],
                ),
                _category("spreadsheets", [".xlsx", ".xls", ".csv", ".ods"]),
                _category("presentations", [".ppt", ".pptx", ".odp", ".key"]),
            ],
            "naming_convention": {"type": "kebab-case", "lowercase": True},
            "exclude_patterns": [
                "node_modules/**",
                ".git/**",
                "dist/**",
                "build/**",
                ".DS_Store",
            ],
            "include_hidden": False,
            "dry_run": False,
            "generate_manifest": True,
            "target_directory": None,
            "log_level": "info",
            "log_file": None,
        }

    @staticmethod
    def find_config(directory: Path) -> Optional[Path]:
        """Find the first default config file present in a directory."""
        for name in CONFIG_FILES:
            candidate = Path(directory) / name
            if candidate.exists():
                return candidate
        return None

    def _load_from_file(self, config_file: Path):
        """Load configuration from file."""
        logger.info(f"Loading configuration from {config_file}")

        suffix = config_file.suffix.lower()
        if suffix not in (".json", ".yaml", ".yml"):
            raise ValueError(f"Unsupported config file format: {suffix}")

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                if suffix == ".json":
                    file_config = json.load(f)
                else:
                    file_config = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            logger.error(f"Error loading config file: {e}")
            raise ValueError(f"Malformed config file {config_file}: {e}") from e

        if file_config is None:
            file_config = {}
        if not isinstance(file_config, dict):
            raise ValueError(f"Config file must contain a mapping: {config_file}")

        self._deep_merge(self.config, file_config)
        self.config_file = config_file

    def _load_from_env(self):
        """Load configuration from ORDERLY_ environment variables.

        Nested keys are separated by a double underscore, e.g.
        ORDERLY_NAMING_CONVENTION__TYPE=snake_case.
        """
        for key, value in os.environ.items():
            if key.startswith(ENV_PREFIX):
                config_path = key[len(ENV_PREFIX):].lower().split("__")
                self._set_nested_config(self.config, config_path, value)

    def _load_from_cli(self, cli_overrides: Dict[str, Any]):
        """Load configuration from command line overrides."""
        for path, value in cli_overrides.items():
            if value is not None:
                self._set_nested_config(self.config, path.split("."), value)

    def _deep_merge(self, base: Dict[str, Any], update: Dict[str, Any]):
        """Deep merge update dictionary into base dictionary."""
        for key, value in update.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _set_nested_config(
        self, config_dict: Dict[str, Any], path: List[str], value: Any
    ):
        """Set a value in a nested dictionary using a path."""
        # Convert value to appropriate type if it's a string
        if isinstance(value, str):
            if value.lower() in ("true", "false"):
                value = value.lower() == "true"
            elif value.isdigit():
                value = int(value)
            elif value.startswith("[") and value.endswith("]"):
                try:
                    value = json.loads(value)
                except json.JSONDecodeError:
                    logger.warning(f"Could not parse list value: {value}")

        current = config_dict
        for part in path[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]
        current[path[-1]] = value

    def _validate_config(self):
        """Validate configuration values."""
        errors = []

        categories = self.config.get("categories")
        if not isinstance(categories, list):
            errors.append("categories must be a list")
        else:
            for index, category in enumerate(categories):
                errors.extend(self.validate_category(category, index))

        naming = self.config.get("naming_convention")
        if not isinstance(naming, dict):
            errors.append("naming_convention must be a mapping")
        elif naming.get("type") not in CONVENTION_TYPES:
            errors.append(f"naming_convention type must be one of {list(CONVENTION_TYPES)}")

        if not isinstance(self.config.get("exclude_patterns"), list):
            errors.append("exclude_patterns must be a list")

        for flag in ("include_hidden", "dry_run", "generate_manifest"):
            if not isinstance(self.config.get(flag), bool):
                errors.append(f"{flag} must be true or false")

        if self.config.get("log_level") not in LOG_LEVELS:
            errors.append(f"log_level must be one of {list(LOG_LEVELS)}")

        for key in ("target_directory", "log_file"):
            value = self.config.get(key)
            if value is not None and not isinstance(value, str):
                errors.append(f"{key} must be a path")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def validate_category(self, category: Any, index: int = 0) -> List[str]:
        """Validate a category rule and return errors."""
        if not isinstance(category, dict):
            return [f"category #{index} must be a mapping"]

        errors = []
        if not category.get("name"):
            errors.append(f"category #{index} must have a name")
        extensions = category.get("extensions")
        if not isinstance(extensions, list):
            errors.append(f"category #{index} extensions must be a list")
        elif not all(isinstance(ext, str) for ext in extensions):
            errors.append(f"category #{index} extensions must be strings")
        patterns = category.get("patterns")
        if patterns is not None and not isinstance(patterns, list):
            errors.append(f"category #{index} patterns must be a list")
        elif patterns and not all(isinstance(p, str) for p in patterns):
            errors.append(f"category #{index} patterns must be strings")
        target_folder = category.get("target_folder")
        if target_folder is not None and not isinstance(target_folder, str):
            errors.append(f"category #{index} target_folder must be a string")
        return errors

    def get(self, path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            path: Configuration path (e.g., 'naming_convention.type')
            default: Default value if path not found

        Returns:
            Configuration value or default
        """
        parts = path.split(".")
        current = self.config

        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default

        return current

    def set(self, path: str, value: Any):
        """Set configuration value using dot notation."""
        self._set_nested_config(self.config, path.split("."), value)

    def to_organizer_config(self) -> OrganizerConfig:
        """Freeze the merged configuration into an OrganizerConfig."""
        naming = self.config["naming_convention"]
        target_directory = self.config.get("target_directory")
        if target_directory:
            target_directory = os.path.abspath(os.path.expanduser(target_directory))

        return OrganizerConfig(
            categories=tuple(
                CategoryRule.from_dict(category) for category in self.config["categories"]
            ),
            naming_convention=NamingConvention(
                type=naming["type"], lowercase=bool(naming.get("lowercase", False))
            ),
            exclude_patterns=tuple(self.config["exclude_patterns"]),
            include_hidden=self.config["include_hidden"],
            dry_run=self.config["dry_run"],
            generate_manifest=self.config["generate_manifest"],
            target_directory=target_directory or None,
            log_level=self.config["log_level"],
            log_file=self.config.get("log_file"),
        )

    def save(self, filepath: Path):
        """
        Save configuration to file. The format follows the file suffix.

        Args:
            filepath: Path to save configuration
        """
        filepath = Path(filepath)
        suffix = filepath.suffix.lower()
        logger.info(f"Saving configuration to {filepath}")

        if suffix == ".json":
            content = json.dumps(self.config, indent=2)
        elif suffix in (".yaml", ".yml"):
            content = yaml.safe_dump(self.config, default_flow_style=False, sort_keys=False)
        else:
            raise ValueError(f"Unsupported config file format: {suffix}")

        with open(filepath, "w", encoding="utf-8") as f:
            f.write(content)

    @classmethod
    def create_template(cls, filepath: Path):
        """Create a configuration file holding the default settings.

        Environment variables and existing config files are ignored.
        """
        template = cls.__new__(cls)
        template.config = deepcopy(template._load_default_config())
        template.config_file = None
        template.save(filepath)
        logger.info(f"Configuration template created at {filepath}")
