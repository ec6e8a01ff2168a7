"""Installer options, read from ``FULLSOURCE_*`` environment variables."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

from fullsource.installer.models import FrameworkIdentity

DEFAULT_TRUNK = "https://appfuse.dev.java.net/svn/appfuse/"
DEFAULT_TAG = "trunk/"
DEFAULT_DESTINATION = "src"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env_bool(key: str, default: bool) -> bool:
    value = os.environ.get(key)
    if value is None:
        return default
    value = value.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    return default


def default_strip_carriage_returns() -> bool:
    """Platform line-ending policy: strip ``\\r`` everywhere except Windows."""
    return not sys.platform.startswith("win")


def resolve_tag(tag: str, framework_version: str | None, framework: FrameworkIdentity) -> str:
    """Pin the default ``trunk/`` tag to the release named by *framework_version*.

    ``2.0-m5`` becomes ``tags/APPFUSE_2.0_M5/``. SNAPSHOT versions and
    explicitly chosen tags are left alone.
    """
    if not framework_version or framework_version.endswith("SNAPSHOT") or tag != DEFAULT_TAG:
        return tag
    release = framework_version.upper().replace("-", "_")
    return f"tags/{framework.name_token.upper()}_{release}/"


@dataclass
class InstallOptions:
    """Every option the installer understands."""

    trunk: str = DEFAULT_TRUNK
    tag: str = DEFAULT_TAG
    destination: str = DEFAULT_DESTINATION
    dao_framework: str | None = None
    web_framework: str | None = None
    rename_packages: bool = True
    strip_carriage_returns: bool = False
    framework: FrameworkIdentity = field(default_factory=FrameworkIdentity)

    @classmethod
    def from_env(cls, **overrides: object) -> InstallOptions:
        """Build options from the environment; non-None *overrides* win."""
        options = cls(
            trunk=os.environ.get("FULLSOURCE_TRUNK", DEFAULT_TRUNK),
            tag=os.environ.get("FULLSOURCE_TAG", DEFAULT_TAG),
            destination=os.environ.get("FULLSOURCE_DESTINATION", DEFAULT_DESTINATION),
            dao_framework=os.environ.get("FULLSOURCE_DAO_FRAMEWORK") or None,
            web_framework=os.environ.get("FULLSOURCE_WEB_FRAMEWORK") or None,
            rename_packages=_env_bool("FULLSOURCE_RENAME_PACKAGES", True),
            strip_carriage_returns=_env_bool(
                "FULLSOURCE_STRIP_CR", default_strip_carriage_returns()
            ),
        )
        for key, value in overrides.items():
            if value is not None:
                setattr(options, key, value)
        return options

    def base_url(self, tag: str | None = None) -> str:
        trunk = self.trunk if self.trunk.endswith("/") else self.trunk + "/"
        tag = self.tag if tag is None else tag
        if tag and not tag.endswith("/"):
            tag += "/"
        return trunk + tag.lstrip("/")
