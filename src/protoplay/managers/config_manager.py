"""
Config Manager

Loads the engine configuration with include system support and exposes
it as a typed EngineConfig.
"""

from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from protoplay.models.config import EngineConfig
from protoplay.models.enums import LogCategory
from protoplay.utils.logger import configure_logger, get_logger

log = get_logger().for_category(LogCategory.CONFIG)

PACKAGE_DIR = Path(__file__).parent.parent


class ConfigManager:
    """
    Engine configuration manager with include system support

    Loads config.yaml and processes the include: directive to merge modular
    YAML files. Any failure falls back to factory_defaults.yaml.

    Example:
        config = ConfigManager()
        config.load()

        config.engine.animation.default_duration  # 0.3
        config.data["layout"]                     # raw dict
    """

    def __init__(
        self,
        config_path: Union[str, Path] = "config/config.yaml",
        defaults_path: Union[str, Path] = "config/factory_defaults.yaml"
    ):
        """
        Args:
            config_path: Path to main config.yaml (relative paths resolve against the package)
            defaults_path: Path to factory defaults fallback
        """
        self.config_path = self._resolve(config_path)
        self.factory_defaults_path = self._resolve(defaults_path)
        self.data: Dict[str, Any] = {}
        self.engine: EngineConfig = EngineConfig()

    @staticmethod
    def _resolve(path: Union[str, Path]) -> Path:
        path = Path(path)
        return path if path.is_absolute() else PACKAGE_DIR / path

    def load(self, apply_logging: bool = True) -> EngineConfig:
        """
        Load YAML configuration with include system support

        Process:
        1. Load main config.yaml
        2. If it has an 'include:' list, load and merge those files
        3. Otherwise treat it as a monolithic config
        4. Fall back to factory_defaults.yaml on failure
        5. Build the typed EngineConfig (and configure the logger)

        Returns:
            Typed engine configuration
        """
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                main_config = yaml.safe_load(f) or {}

            if not isinstance(main_config, dict):
                raise ValueError("config root must be a mapping")

            if "include" in main_config:
                log.info("Using include-based configuration")
                includes = main_config.pop("include") or []
                self.data = self._load_with_includes(includes, self.config_path.parent)
                self._merge(self.data, main_config)
            else:
                log.info("Using monolithic configuration")
                self.data = main_config

        except (OSError, yaml.YAMLError, ValueError) as ex:
            log.error("Failed to load config", path=str(self.config_path), error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults")
            self.data = self._load_defaults()

        self.engine = EngineConfig.from_dict(self.data)
        if apply_logging:
            configure_logger(self.engine.logging.level, self.engine.logging.colors)

        log.info(
            "Configuration loaded",
            duration=f"{self.engine.animation.default_duration}s",
            easing=self.engine.animation.default_easing,
            smart_animate=self.engine.animation.enable_smart_animate,
        )
        return self.engine

    def _load_defaults(self) -> Dict[str, Any]:
        try:
            with open(self.factory_defaults_path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as ex:
            log.error("Failed to load factory defaults, using built-in values", error=str(ex))
            return {}

    def _load_with_includes(self, include_list: List[str], config_dir: Path) -> Dict[str, Any]:
        """
        Load and merge multiple YAML files from include list

        Args:
            include_list: Filenames to load (e.g. ["animation.yaml", "logging.yaml"])
            config_dir: Directory containing config files

        Returns:
            Merged config dict (later files win per section key)
        """
        merged: Dict[str, Any] = {}

        for filename in include_list:
            filepath = config_dir / filename
            try:
                with open(filepath, "r", encoding="utf-8") as f:
                    file_data = yaml.safe_load(f)
            except FileNotFoundError:
                log.error(f"File not found: {filename}")
                raise
            if file_data:
                self._merge(merged, file_data)
                log.info(f"Loaded {filename}", keys=str(list(file_data.keys())))

        log.info("Config merge complete", total_keys=len(merged), keys=str(list(merged.keys())))
        return merged

    @staticmethod
    def _merge(into: Dict[str, Any], data: Dict[str, Any]) -> None:
        # One level deep: sections from separate files combine key by key
        for key, value in data.items():
            if isinstance(value, dict) and isinstance(into.get(key), dict):
                into[key].update(value)
            else:
                into[key] = value

