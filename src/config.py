"""
Build configuration, read once at start-up and passed to every stage.

Environment overrides:
  OUT_DIR         output directory (default: <project>/dist)
  SITE_BASE_URL   canonical site origin, trailing slashes stripped
  LOGO_URL        branding image shown on every verse page
  CNAME           custom domain written to /CNAME (default: host of SITE_BASE_URL)
"""
from __future__ import annotations

import argparse
import os
from dataclasses import dataclass, replace
from pathlib import Path
from urllib.parse import urlparse

PROJECT_ROOT = Path(__file__).parent.parent

DEFAULT_OUT_DIR = PROJECT_ROOT / "dist"
DEFAULT_SITE_BASE_URL = "https://kjv.livingwordbibles.com"
DEFAULT_LOGO_URL = (
    "https://static1.squarespace.com/static/68d6b7d6d21f02432fd7397b/t/"
    "690209b3567af44aabfbdaca/1761741235124/LivingWordBibles01.png"
)

# Primary source first, schema-compatible mirrors after.
DATA_BASES = (
    "https://cdn.jsdelivr.net/gh/Living-Word-Bibles/king-james-version@main/",
    "https://raw.githubusercontent.com/Living-Word-Bibles/king-james-version/main/",
    "https://cdn.jsdelivr.net/gh/aruljohn/Bible-kjv@master/",
    "https://raw.githubusercontent.com/aruljohn/Bible-kjv/master/",
)
# Books.json at the root, then the legacy nested directory
SUB_PATHS = ("", "Bible-kjv-master/")

SITEMAP_CHUNK = 50_000


def _strip_base(url: str) -> str:
    return url.rstrip("/")


def _host(url: str) -> str:
    return urlparse(url).netloc or url


@dataclass(frozen=True)
class BuildConfig:
    out_dir: Path = DEFAULT_OUT_DIR
    site_base_url: str = DEFAULT_SITE_BASE_URL
    logo_url: str = DEFAULT_LOGO_URL
    cname: str = _host(DEFAULT_SITE_BASE_URL)
    data_bases: tuple[str, ...] = DATA_BASES
    sub_paths: tuple[str, ...] = SUB_PATHS
    fetch_tries: int = 3
    backoff_seconds: float = 0.25
    request_timeout: float = 30
    sitemap_chunk: int = SITEMAP_CHUNK
    clean: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "site_base_url", _strip_base(self.site_base_url))
        object.__setattr__(self, "out_dir", Path(self.out_dir))

    @classmethod
    def from_env(cls, environ=None) -> "BuildConfig":
        env = os.environ if environ is None else environ
        base = env.get("SITE_BASE_URL") or DEFAULT_SITE_BASE_URL
        out_dir = env.get("OUT_DIR")
        return cls(
            out_dir=Path(out_dir).resolve() if out_dir else DEFAULT_OUT_DIR,
            site_base_url=base,
            logo_url=env.get("LOGO_URL") or DEFAULT_LOGO_URL,
            cname=env.get("CNAME") or _host(_strip_base(base)),
        )


def add_arguments(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("--out-dir", metavar="DIR", help="Output directory (env OUT_DIR)")
    ap.add_argument("--site-base-url", metavar="URL", help="Canonical site origin (env SITE_BASE_URL)")
    ap.add_argument("--logo-url", metavar="URL", help="Branding image URL (env LOGO_URL)")
    ap.add_argument("--cname", metavar="DOMAIN", help="Custom domain for /CNAME (env CNAME)")
    ap.add_argument("--no-clean", action="store_true", help="Keep existing output instead of deleting it first")


def from_args(args: argparse.Namespace, environ=None) -> BuildConfig:
    """Environment first, command-line flags on top."""
    env = os.environ if environ is None else environ
    config = BuildConfig.from_env(env)
    changes: dict = {}
    if args.out_dir:
        changes["out_dir"] = Path(args.out_dir).resolve()
    if args.site_base_url:
        changes["site_base_url"] = args.site_base_url
        if not args.cname and not env.get("CNAME"):
            changes["cname"] = _host(_strip_base(args.site_base_url))
    if args.logo_url:
        changes["logo_url"] = args.logo_url
    if args.cname:
        changes["cname"] = args.cname
    if args.no_clean:
        changes["clean"] = False
    return replace(config, **changes) if changes else config
