"""Tests for BuildConfig env/CLI resolution."""
from __future__ import annotations

import argparse
from pathlib import Path

import config as config_mod
from config import BuildConfig, add_arguments, from_args


def _parse(*argv: str) -> argparse.Namespace:
    ap = argparse.ArgumentParser()
    add_arguments(ap)
    return ap.parse_args(list(argv))


def test_defaults_without_env():
    cfg = BuildConfig.from_env({})
    assert cfg.out_dir == config_mod.DEFAULT_OUT_DIR
    assert cfg.site_base_url == "https://kjv.livingwordbibles.com"
    assert cfg.cname == "kjv.livingwordbibles.com"
    assert cfg.logo_url == config_mod.DEFAULT_LOGO_URL
    assert cfg.data_bases[0].startswith("https://cdn.jsdelivr.net/gh/Living-Word-Bibles/")
    assert cfg.sub_paths == ("", "Bible-kjv-master/")
    assert (cfg.fetch_tries, cfg.backoff_seconds, cfg.sitemap_chunk) == (3, 0.25, 50_000)
    assert cfg.clean is True


def test_env_overrides_and_trailing_slashes_stripped(tmp_path):
    cfg = BuildConfig.from_env({
        "OUT_DIR": str(tmp_path / "site"),
        "SITE_BASE_URL": "https://bible.example.org///",
        "LOGO_URL": "https://cdn.example.org/logo.png",
    })
    assert cfg.out_dir == (tmp_path / "site").resolve()
    assert cfg.site_base_url == "https://bible.example.org"
    assert cfg.cname == "bible.example.org"
    assert cfg.logo_url == "https://cdn.example.org/logo.png"


def test_explicit_cname_env_wins():
    cfg = BuildConfig.from_env({"SITE_BASE_URL": "https://a.example", "CNAME": "b.example"})
    assert cfg.cname == "b.example"


def test_cli_flags_override_env(tmp_path):
    env = {"SITE_BASE_URL": "https://env.example", "OUT_DIR": str(tmp_path / "env")}
    args = _parse("--out-dir", str(tmp_path / "cli"), "--site-base-url", "https://cli.example/", "--no-clean")
    cfg = from_args(args, env)
    assert cfg.out_dir == (tmp_path / "cli").resolve()
    assert cfg.site_base_url == "https://cli.example"
    assert cfg.cname == "cli.example"
    assert cfg.clean is False


def test_cli_without_flags_is_env_config():
    env = {"SITE_BASE_URL": "https://env.example"}
    assert from_args(_parse(), env) == BuildConfig.from_env(env)


def test_out_dir_coerced_to_path():
    assert isinstance(BuildConfig(out_dir="dist").out_dir, Path)
