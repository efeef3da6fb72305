"""Configuration for locating GOPATH, the module cache and discovery limits"""

import configparser
import os
import platform
from typing import Optional, Any

from pathlib import Path

from gopathlink.constants import DEFAULT_HTTP_TIMEOUT, DEFAULT_MAX_REDIRECTS

APP_NAME = "gopathlink"

_home = os.path.expanduser("~")

xdg_config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.join(_home, ".config")


default_cfg = {
    "dirs": {"gopath": "~/go"},
    "http": {"timeout": str(DEFAULT_HTTP_TIMEOUT)},
    "discovery": {"max_redirects": str(DEFAULT_MAX_REDIRECTS)},
}

if platform.system() == "Darwin":
    # macOS
    config_dir = Path("~/Library/Application Support/gopathlink").expanduser()
else:
    # Linux or others
    config_dir = Path(os.path.join(xdg_config_home, APP_NAME))


def get_config_file():
    return config_dir / f"{APP_NAME}.cfg"


def init_dirs():
    """Initialize the configuration directory.

    Fails gracefully if the directory cannot be created (e.g., read-only filesystem).
    """
    import logging

    logger = logging.getLogger(__name__)

    try:
        os.makedirs(config_dir, exist_ok=True)
    except OSError as e:
        logger.warning(
            f"Could not create config directory {config_dir}: {e}. "
            "Using in-memory configuration only."
        )


class ConfigAccessor:
    """
    A dict-like accessor for configuration files.

    This class provides a way to access configuration options with a dictionary-like
    interface while handling missing sections or keys gracefully.

    Usage:
        config = ConfigAccessor()
        value = config.get('section', 'key', default='default')
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize a ConfigAccessor with an optional config file path.

        Args:
            config_path: Path to the configuration file. If None, uses the default path.
        """
        if config_path is None:
            self.config_path = get_config_file()
        else:
            self.config_path = config_path

        init_dirs()

        self.config = configparser.ConfigParser()
        if self.config_path.exists():
            self.config.read(self.config_path)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """
        Get a configuration value from the specified section and key.

        Args:
            section: The configuration section
            key: The configuration key
            default: Value to return if the section or key doesn't exist

        Returns:
            The configuration value if it exists, otherwise the default value
        """
        try:
            return self.config[section][key]
        except (KeyError, configparser.NoSectionError, configparser.NoOptionError):
            return default

    def set(self, section: str, key: str, value: str) -> None:
        if not self.config.has_section(section):
            self.config.add_section(section)

        self.config[section][key] = value

    def save(self) -> None:
        """
        Save the current configuration to the config file.

        Fails gracefully if the file cannot be written (e.g., read-only filesystem).
        """
        import logging

        logger = logging.getLogger(__name__)

        try:
            with open(self.config_path, "w") as configfile:
                self.config.write(configfile)
        except (OSError, IOError) as e:
            logger.warning(
                f"Could not save configuration to {self.config_path}: {e}. "
                "Configuration changes will not persist."
            )

    def sections(self) -> list:
        return self.config.sections()

    def options(self, section: str) -> list:
        try:
            return self.config.options(section)
        except configparser.NoSectionError:
            return []


# Create a global config accessor instance
config = ConfigAccessor()


def get_gopath() -> Path:
    """
    Get the GOPATH entry sources are linked into.

    Only the first entry of a multi-entry GOPATH is used. The environment wins
    over the config file; a symlinked GOPATH is resolved to its target.

    Returns:
        Path to the GOPATH directory (defaults to ~/go)
    """
    gopath_str = os.environ.get("GOPATH") or config.get(
        "dirs", "gopath", default_cfg["dirs"]["gopath"]
    )
    first = gopath_str.split(os.pathsep)[0]
    gopath = Path(first).expanduser()
    if gopath.is_symlink():
        gopath = gopath.resolve()
    return gopath


def get_source_root() -> Path:
    """
    Get the flat source root (GOPATH/src), creating it when missing.

    Permission errors propagate: nothing can be linked without a source root.
    """
    source_root = get_gopath() / "src"
    source_root.mkdir(parents=True, exist_ok=True)
    return source_root


def get_module_cache_dir() -> Path:
    """
    Get the module cache maintained by go tools (read-only for us).

    Returns:
        Path from GOMODCACHE, the config file, or GOPATH/pkg/mod
    """
    modcache = os.environ.get("GOMODCACHE") or config.get("dirs", "modcache")
    if modcache:
        return Path(modcache).expanduser()
    return get_gopath() / "pkg" / "mod"


def get_http_timeout() -> float:
    return float(config.get("http", "timeout", default_cfg["http"]["timeout"]))


def get_max_redirects() -> int:
    return int(
        config.get(
            "discovery", "max_redirects", default_cfg["discovery"]["max_redirects"]
        )
    )
