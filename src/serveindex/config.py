# Configuration for directory listing mounts and the bundled server.
# Created: 2026-10-19
#
# ServeIndexOptions is the immutable per-mount record handed to the middleware.
# Settings reads the bundled server's configuration from SERVE_INDEX_* env vars.

from __future__ import annotations

from collections.abc import Callable
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from serveindex.paths import normalize_root

PUBLIC_DIR = Path(__file__).parent / "public"
DEFAULT_TEMPLATE = PUBLIC_DIR / "directory.html"
DEFAULT_STYLESHEET = PUBLIC_DIR / "style.css"


class ServeIndexOptions(BaseModel):
    """Options for one directory listing mount.

    ``template`` is either a template file with ``{style}``, ``{files}``,
    ``{directory}`` and ``{linked-path}`` tokens, or a callable that receives
    :class:`~serveindex.renderers.RenderLocals` and returns the HTML (directly
    or as an awaitable). Raw ``style`` text takes precedence over the
    ``stylesheet`` file.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    root: str
    hidden: bool = False
    filter: Callable[..., bool] | None = None
    icons: bool = False
    stylesheet: Path = DEFAULT_STYLESHEET
    style: str | None = None
    template: Path | Callable[..., Any] = DEFAULT_TEMPLATE
    view: str = "tiles"
    brief: bool = False

    # Per-media-type renderers; None selects the built-in one.
    html_renderer: Callable[..., Any] | None = None
    json_renderer: Callable[..., Any] | None = None
    plain_renderer: Callable[..., Any] | None = None

    @field_validator("root", mode="before")
    @classmethod
    def _normalize_root(cls, value: Any) -> str:
        if not value:
            raise ValueError("root path required")
        return normalize_root(value)

    @field_validator("view", mode="before")
    @classmethod
    def _default_view(cls, value: Any) -> Any:
        return value or "tiles"


class Settings(BaseSettings):
    """Settings for ``serve-index`` / ``python -m serveindex``."""

    model_config = SettingsConfigDict(
        env_prefix="SERVE_INDEX_",
        env_file=".env",
        extra="ignore",
    )

    root: Path = Path(".")
    host: str = "127.0.0.1"
    port: int = 3001
    icons: bool = False
    hidden: bool = False
    brief: bool = False
    view: str = "details"
    template: Path | None = None
    stylesheet: Path | None = None
    log_level: str = "INFO"

    def to_options(self) -> ServeIndexOptions:
        """Build the mount options for :attr:`root`."""
        extra: dict[str, Any] = {}
        if self.template is not None:
            extra["template"] = self.template
        if self.stylesheet is not None:
            extra["stylesheet"] = self.stylesheet
        return ServeIndexOptions(
            root=self.root,
            icons=self.icons,
            hidden=self.hidden,
            brief=self.brief,
            view=self.view,
            **extra,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
