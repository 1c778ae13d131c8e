"""Configuration management for Drivesite.

Supports TOML configuration format with auto-discovery.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

CONFIG_FILENAME = "drivesite.toml"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 3000


@dataclass
class StoreConfig:
    """Document store configuration."""

    listing: Path = field(default_factory=lambda: Path("listing.json"))
    content_dir: Path = field(default_factory=lambda: Path("content"))
    root_id: str | None = None


@dataclass
class SiteConfig:
    """Site presentation configuration."""

    layouts: list[str] = field(default_factory=lambda: ["default"])


@dataclass
class LiveReloadConfig:
    """Live reload configuration."""

    enabled: bool = True


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    store: StoreConfig
    site: SiteConfig
    live_reload: LiveReloadConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for drivesite.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> "Config":
        """Create config with all defaults."""
        return cls(
            server=ServerConfig(),
            store=StoreConfig(),
            site=SiteConfig(),
            live_reload=LiveReloadConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}") from e

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            store=cls._parse_store(data.get("store"), config_dir),
            site=cls._parse_site(data.get("site")),
            live_reload=cls._parse_live_reload(data.get("live_reload")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        """Parse server configuration section."""
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 3000)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_store(cls, data: object, config_dir: Path) -> StoreConfig:
        """Parse store configuration section.

        Args:
            data: Raw store section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            StoreConfig instance
        """
        if data is None:
            return StoreConfig(
                listing=config_dir / "listing.json",
                content_dir=config_dir / "content",
            )

        if not isinstance(data, dict):
            raise ValueError("store section must be a dictionary")

        listing = data.get("listing", "listing.json")
        if not isinstance(listing, str):
            raise ValueError("store.listing must be a string")

        content_dir = data.get("content_dir", "content")
        if not isinstance(content_dir, str):
            raise ValueError("store.content_dir must be a string")

        root_id = data.get("root_id")
        if root_id is not None and not isinstance(root_id, str):
            raise ValueError("store.root_id must be a string")

        return StoreConfig(
            listing=config_dir / listing,
            content_dir=config_dir / content_dir,
            root_id=root_id,
        )

    @classmethod
    def _parse_site(cls, data: object) -> SiteConfig:
        """Parse site configuration section."""
        if data is None:
            return SiteConfig()

        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        layouts_raw = data.get("layouts", ["default"])
        if not isinstance(layouts_raw, list):
            raise ValueError("site.layouts must be a list")
        layouts: list[str] = []
        for item in layouts_raw:
            if not isinstance(item, str):
                raise ValueError("site.layouts items must be strings")
            layouts.append(item)

        return SiteConfig(layouts=layouts)

    @classmethod
    def _parse_live_reload(cls, data: object) -> LiveReloadConfig:
        """Parse live_reload configuration section."""
        if data is None:
            return LiveReloadConfig()

        if not isinstance(data, dict):
            raise ValueError("live_reload section must be a dictionary")

        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError("live_reload.enabled must be a boolean")

        return LiveReloadConfig(enabled=enabled)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        listing: Path | None = None,
        content_dir: Path | None = None,
        live_reload_enabled: bool | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            listing: Override store.listing
            content_dir: Override store.content_dir
            live_reload_enabled: Override live_reload.enabled

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        store = self.store
        if listing is not None or content_dir is not None:
            store = replace(
                self.store,
                listing=listing if listing is not None else self.store.listing,
                content_dir=content_dir if content_dir is not None else self.store.content_dir,
            )

        live_reload = self.live_reload
        if live_reload_enabled is not None:
            live_reload = replace(self.live_reload, enabled=live_reload_enabled)

        return replace(
            self,
            server=server,
            store=store,
            live_reload=live_reload,
        )
