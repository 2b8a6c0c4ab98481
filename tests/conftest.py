import os
import pathlib

import pytest

from govanity_package.govanity import GeneratorConfig


@pytest.fixture
def source_tree(tmp_path):
    """$GOPATH/src/acme with two repositories, a nested package and VCS metadata."""
    src = tmp_path / "gopath" / "src"
    acme = src / "acme"
    for d in ("toolkit/sub", "toolkit/.git/objects", "other", ".hidden/inner"):
        (acme / d).mkdir(parents=True)
    (acme / "toolkit" / "go.mod").write_text("module acme/toolkit\n")
    (acme / "toolkit" / "main.go").write_text("package main\n")
    (acme / "README").write_text("acme\n")
    return src


@pytest.fixture
def make_config(source_tree, tmp_path):
    def _make(**overrides):
        values = dict(
            source_root=source_tree,
            repo_subpath="acme",
            vanity_domains=("example.com", "example.dev"),
            github_user="octocat",
            output_dir=str(tmp_path / "site"),
        )
        values.update(overrides)
        return GeneratorConfig(**values)
    return _make


def pages(outdir):
    root = pathlib.Path(outdir)
    return sorted(p.relative_to(root).as_posix() for p in root.rglob("index.html*"))


@pytest.fixture
def unreadable_toolkit(monkeypatch, source_tree):
    """Make listing acme/toolkit fail the way an unreadable directory would."""
    target = source_tree / "acme" / "toolkit"
    real_scandir = os.scandir

    def scandir(path="."):
        if pathlib.Path(path) == target:
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", scandir)
    return target
