"""Configuration management for storechain.

A store can be described declaratively in ``storechain.yaml``:

    storechain:
      debug: false
      reducer: myapp.reducers.counter
      preloaded_state: 0
      middleware:
        - myapp.middleware.audit
        - middleware: myapp.middleware.throttle
          params:
            limit: 10

Plain middleware entries are import paths to middleware constructors. Entries
with ``params`` point at a factory that is called with the params and must
return a middleware constructor. Import paths may use ``pkg.module.attr`` or
``pkg.module:attr``.

Configuration Discovery Precedence (Highest to Lowest Priority):
===============================================================

1. **STORECHAIN_CONFIG Environment Variable**
   - Path to a YAML file: `export STORECHAIN_CONFIG=/path/to/storechain.yaml`

2. **./storechain.yaml** in the current working directory

3. **Defaults** (no reducer, no middleware)
"""

import importlib
import logging
import os
import threading
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from storechain.errors import ConfigError
from storechain.middleware import Middleware, apply_middleware
from storechain.store import Reducer, Store, create_store

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "storechain.yaml"
CONFIG_ENV_VAR = "STORECHAIN_CONFIG"


def import_object(path: str) -> Any:
    """Import an object from its dotted path.

    Args:
        path: ``pkg.module.attr`` or ``pkg.module:attr``

    Returns:
        The imported object

    Raises:
        ConfigError: If the module or attribute cannot be found
    """
    if ":" in path:
        module_path, _, attr_path = path.partition(":")
    else:
        module_path, _, attr_path = path.rpartition(".")

    if not module_path or not attr_path:
        raise ConfigError(f"Invalid import path '{path}': expected 'module.attr' or 'module:attr'")

    try:
        obj: Any = importlib.import_module(module_path)
    except ImportError as e:
        raise ConfigError(f"Cannot import module '{module_path}' for '{path}': {e}") from e

    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as e:
            raise ConfigError(f"Module '{module_path}' has no attribute '{attr_path}'") from e
    return obj


class MiddlewareEntry(BaseModel):
    """A middleware factory with parameters."""

    middleware: str
    """Import path to a factory returning a middleware constructor"""

    params: dict[str, Any] = Field(default_factory=dict)
    """Keyword arguments passed to the factory"""

    @property
    def path(self) -> str:
        return self.middleware

    def resolve(self) -> Middleware:
        """Import the factory and build the middleware constructor.

        Raises:
            ConfigError: If the factory cannot be imported or is not callable, or rejects the params
        """
        factory = import_object(self.middleware)
        if not callable(factory):
            raise ConfigError(f"Middleware factory '{self.middleware}' is not callable")
        if not self.params:
            return factory
        try:
            return factory(**self.params)
        except TypeError as e:
            raise ConfigError(f"Invalid params for middleware factory '{self.middleware}': {e}") from e


class StoreChainConfig(BaseSettings):
    """Main configuration for storechain that reads from storechain.yaml."""

    model_config = SettingsConfigDict(
        env_prefix="STORECHAIN_",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = False

    # Reducer import path (e.g., "myapp.reducers:counter")
    reducer: str | None = None

    preloaded_state: Any = None

    # Middleware import paths or entries with params, outermost first
    middleware: list[str | MiddlewareEntry] = Field(default_factory=list)

    # Path to the loaded configuration file
    config_path: Path = Field(default_factory=lambda: Path(CONFIG_FILENAME))

    @property
    def middleware_entries(self) -> list[MiddlewareEntry]:
        """Middleware configuration normalized to entries."""
        return [
            MiddlewareEntry(middleware=entry) if isinstance(entry, str) else entry for entry in self.middleware
        ]

    def load_reducer(self) -> Reducer:
        """Import the configured reducer.

        Raises:
            ConfigError: If no reducer is configured or it cannot be imported
        """
        if not self.reducer:
            raise ConfigError(f"No reducer configured in {self.config_path}")
        reducer = import_object(self.reducer)
        if not callable(reducer):
            raise ConfigError(f"Reducer '{self.reducer}' is not callable")
        logger.debug("Loaded reducer: %s", self.reducer)
        return reducer

    def load_middleware(self) -> list[Middleware]:
        """Import the configured middleware constructors in chain order.

        Returns:
            Middleware constructors, outermost first

        Raises:
            ConfigError: If any middleware cannot be resolved
        """
        loaded: list[Middleware] = []
        for entry in self.middleware_entries:
            middleware = entry.resolve()
            if not callable(middleware):
                raise ConfigError(f"Middleware '{entry.path}' did not resolve to a callable")
            loaded.append(middleware)
            if entry.params:
                logger.debug("Loaded middleware: %s with params: %s", entry.path, entry.params)
            else:
                logger.debug("Loaded middleware: %s", entry.path)
        return loaded

    def build_store(self) -> Store:
        """Create a store from the configured reducer, state and middleware."""
        return create_store(
            self.load_reducer(),
            self.preloaded_state,
            apply_middleware(*self.load_middleware()),
        )

    @classmethod
    def from_yaml(cls, yaml_path: Path, **kwargs: Any) -> "StoreChainConfig":
        """Load configuration from the ``storechain`` section of a YAML file.

        Args:
            yaml_path: Path to the YAML file
            **kwargs: Overrides applied on top of the file

        Returns:
            StoreChainConfig instance (defaults if the file does not exist)

        Raises:
            ConfigError: If the file is not valid YAML or has the wrong shape
        """
        data: dict[str, Any] = {}
        if yaml_path.exists():
            try:
                with yaml_path.open() as f:
                    raw = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {yaml_path}: {e}") from e

            if not isinstance(raw, dict):
                raise ConfigError(f"Expected a mapping at the top of {yaml_path}, got {type(raw).__name__}")

            section = raw.get("storechain", {}) or {}
            if not isinstance(section, dict):
                raise ConfigError(f"Expected 'storechain' in {yaml_path} to be a mapping")
            data.update(section)
        else:
            logger.debug("Config file %s not found, using defaults", yaml_path)

        data.update(kwargs)
        data["config_path"] = yaml_path
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {yaml_path}: {e}") from e


# Global configuration instance
_config_instance: StoreChainConfig | None = None
_config_lock = threading.Lock()


def get_config() -> StoreChainConfig:
    """Get the configuration instance."""
    global _config_instance

    if _config_instance is None:
        with _config_lock:
            # Double-check locking pattern
            if _config_instance is None:
                env_path = os.environ.get(CONFIG_ENV_VAR)
                if env_path:
                    config_path = Path(env_path)
                    logger.info("Using config file from environment: %s", config_path)
                else:
                    config_path = Path.cwd() / CONFIG_FILENAME
                    if config_path.exists():
                        logger.info("Using config file: %s", config_path)
                    else:
                        logger.info("No %s found, using default config", CONFIG_FILENAME)
                _config_instance = StoreChainConfig.from_yaml(config_path)

    return _config_instance


def set_config_instance(config: StoreChainConfig) -> None:
    """Set the global configuration instance (for testing)."""
    global _config_instance
    _config_instance = config


def clear_config_instance() -> None:
    """Clear the global configuration instance (for testing)."""
    global _config_instance
    _config_instance = None
