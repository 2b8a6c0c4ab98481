#!/usr/bin/env python3
"""
Generate static HTML pages that redirect Go vanity import paths to GitHub.

Features
- Walks $GOPATH/src/<repo> and treats every directory below it as a repository
- Writes <outdir>/<repo>/index.html with one go-import meta tag per vanity domain
  * Each tag points at https://github.com/<user>/<repo> (git)
  * A refresh tag and a link send browsers to the documentation viewer
- Skips hidden directories (and everything beneath them)
- Never overwrites an existing index.html; new content goes to index.html.<alt>

Usage
    python -m govanity_package.govanity -repo example.com -vanity example.com,example.dev \\
        -github octocat -outdir ./site

Notes
- The output directory must not live inside the tree being walked.
- Every directory below the root counts as a repository, including nested
  package directories. Pass -marker go.mod to only render module roots.
"""

from __future__ import annotations
import argparse
import enum
import html
import logging
import os
import pathlib
import stat
import sys
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

DEFAULT_ALT = "vanity"
DEFAULT_DOC_BASE = "https://godoc.org"
INDEX_NAME = "index.html"
DIR_MODE = 0o755

PAGE_TEMPLATE = """<html>
<head>
{imports}
<meta http-equiv="refresh" content="2; url={doc_url}">
</head>
<body>
Redirecting to <a href="{doc_url}">{doc_url}</a>.
</html>
"""
IMPORT_TEMPLATE = '<meta name="go-import" content="{domain}/{repo} git https://github.com/{user}/{repo}">'


class GovanityError(Exception):
    """Base error for the redirect generator."""


class ConfigError(GovanityError, ValueError):
    """Raised when the run configuration is incomplete or invalid."""


class UnsafeOutputError(GovanityError):
    """Raised when the output directory sits inside the walked tree."""


def parse_domains(value: str) -> Tuple[str, ...]:
    return tuple(d.strip() for d in value.split(",") if d.strip())


def default_source_root() -> pathlib.Path:
    """$GOPATH/src, using the first GOPATH entry; ~/go when GOPATH is unset."""
    gopath = os.environ.get("GOPATH", "")
    first = gopath.split(os.pathsep)[0] if gopath else ""
    base = pathlib.Path(first) if first else pathlib.Path.home() / "go"
    return base / "src"


@dataclass(frozen=True)
class GeneratorConfig:
    source_root: pathlib.Path
    repo_subpath: str
    vanity_domains: Tuple[str, ...]
    github_user: str
    output_dir: str
    collision_suffix: str = DEFAULT_ALT
    doc_base: str = DEFAULT_DOC_BASE
    marker: Optional[str] = None

    @property
    def walk_root(self) -> pathlib.Path:
        return self.source_root / self.repo_subpath

    @property
    def root_name(self) -> str:
        return pathlib.PurePath(self.repo_subpath).name

    def validate(self) -> "GeneratorConfig":
        missing = []
        if not self.repo_subpath or not self.root_name:
            missing.append("repo")
        if not self.vanity_domains or not all(self.vanity_domains):
            missing.append("vanity")
        if not self.github_user:
            missing.append("github")
        if not self.output_dir:
            missing.append("outdir")
        if not self.collision_suffix:
            missing.append("alt")
        if not self.doc_base:
            missing.append("godoc")
        if missing:
            raise ConfigError(f"missing required settings: {', '.join(missing)}")
        return self


@dataclass
class RepoRecord:
    identifier: str       # slash-separated path after the root name
    path: pathlib.Path    # directory on disk


@dataclass
class GenerationReport:
    written: List[pathlib.Path] = field(default_factory=list)
    fallbacks: List[pathlib.Path] = field(default_factory=list)
    unchanged: List[pathlib.Path] = field(default_factory=list)
    failed: List[pathlib.Path] = field(default_factory=list)
    aborted: bool = False

    def summary(self) -> str:
        text = (f"{len(self.written)} written, {len(self.fallbacks)} fallback, "
                f"{len(self.unchanged)} unchanged, {len(self.failed)} failed")
        if self.aborted:
            text += " (walk aborted)"
        return text


# ---------------------------------------------------------------------
# Root & safety check
# ---------------------------------------------------------------------
def check_output_dir(config: GeneratorConfig) -> Tuple[pathlib.Path, pathlib.Path]:
    """Return absolute (walk_root, output_dir), refusing output inside the walk root.

    The containment test is a plain string prefix on the absolute paths;
    symlinks are not resolved.
    """
    root = os.path.abspath(config.walk_root)
    out = os.path.abspath(config.output_dir)
    if out.startswith(root):
        raise UnsafeOutputError(f"output directory {out} is inside the source tree {root}")
    if not os.path.isdir(root):
        raise ConfigError(f"source directory {root} does not exist or is not a directory")
    return pathlib.Path(root), pathlib.Path(out)


# ---------------------------------------------------------------------
# Directory walker
# ---------------------------------------------------------------------
class Visit(enum.Enum):
    CONTINUE = "continue"
    SKIP_SUBTREE = "skip_subtree"
    ABORT = "abort"


Visitor = Callable[[pathlib.Path, bool, Optional[OSError]], Visit]


def walk(root: pathlib.Path, visitor: Visitor) -> bool:
    """Depth-first walk in lexical order. Returns False if the visitor aborted."""
    try:
        st = root.stat()
    except OSError as e:
        return visitor(root, False, e) is not Visit.ABORT
    return _walk(root, stat.S_ISDIR(st.st_mode), visitor) is not Visit.ABORT


def _walk(path: pathlib.Path, is_dir: bool, visitor: Visitor, descend: bool = True) -> Visit:
    action = visitor(path, is_dir, None)
    if action is not Visit.CONTINUE or not is_dir or not descend:
        return Visit.ABORT if action is Visit.ABORT else Visit.CONTINUE

    try:
        with os.scandir(path) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        return Visit.ABORT if visitor(path, is_dir, e) is Visit.ABORT else Visit.CONTINUE

    for entry in entries:
        child = pathlib.Path(entry.path)
        try:
            child_is_dir = entry.is_dir()
            is_link = entry.is_symlink()
        except OSError as e:
            if visitor(child, False, e) is Visit.ABORT:
                return Visit.ABORT
            continue
        # symlinked directories are visited but not followed
        if _walk(child, child_is_dir, visitor, descend=not is_link) is Visit.ABORT:
            return Visit.ABORT
    return Visit.CONTINUE


def repo_identifier(path: pathlib.Path, root_name: str) -> str:
    """Segments after the rightmost component named root_name, joined with '/'."""
    parts = pathlib.Path(path).parts
    for i in range(len(parts) - 1, -1, -1):
        if parts[i] == root_name:
            return "/".join(parts[i + 1:])
    return ""


# ---------------------------------------------------------------------
# Template renderer
# ---------------------------------------------------------------------
def doc_url(identifier: str, domain: str, doc_base: str = DEFAULT_DOC_BASE) -> str:
    return f"{doc_base.rstrip('/')}/{domain}/{identifier}"


def render_index(identifier: str, domains: Sequence[str], github_user: str, doc_base: str = DEFAULT_DOC_BASE) -> str:
    """Page text for one repository; the first domain is used for the documentation link."""
    imports = "\n".join(
        IMPORT_TEMPLATE.format(domain=html.escape(d), repo=html.escape(identifier), user=html.escape(github_user))
        for d in domains
    )
    return PAGE_TEMPLATE.format(imports=imports, doc_url=html.escape(doc_url(identifier, domains[0], doc_base)))


def write_index(record: RepoRecord, config: GeneratorConfig, report: GenerationReport) -> Optional[pathlib.Path]:
    """Write the page for one repository; returns the file written, if any."""
    if not record.identifier:
        logger.warning("No repository identifier for %s, skipping", record.path)
        return None

    target_dir = pathlib.Path(config.output_dir, *record.identifier.split("/"))
    try:
        target_dir.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Failed to mkdir %s: %s", target_dir, e)
        report.failed.append(record.path)
        return None

    content = render_index(record.identifier, config.vanity_domains, config.github_user, config.doc_base)
    outfile = target_dir / INDEX_NAME
    try:
        if outfile.exists():
            if outfile.read_text(encoding="utf-8", errors="replace") == content:
                logger.debug("Up to date %s", outfile)
                report.unchanged.append(outfile)
                return None
            fallback = outfile.with_name(f"{INDEX_NAME}.{config.collision_suffix}")
            logger.warning("%s already exists, writing %s instead", outfile, fallback)
            fallback.write_text(content, encoding="utf-8")
            report.fallbacks.append(fallback)
            return fallback
        logger.info("Writing %s", outfile)
        outfile.write_text(content, encoding="utf-8")
        report.written.append(outfile)
        return outfile
    except OSError as e:
        logger.error("Failed to write page for %s: %s", record.identifier, e)
        report.failed.append(record.path)
        return None


# ---------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------
def generate(config: GeneratorConfig) -> GenerationReport:
    """Walk the source tree and write one redirect page per repository directory.

    Raises ConfigError / UnsafeOutputError before touching the output tree.
    Per-directory failures are logged and recorded in the report.
    """
    config.validate()
    root, out = check_output_dir(config)
    config = replace(config, output_dir=str(out))
    report = GenerationReport()
    root_name = config.root_name

    def visit(path: pathlib.Path, is_dir: bool, err: Optional[OSError]) -> Visit:
        if err is not None:
            logger.error("Error walking %s: %s", path, err)
            return Visit.ABORT
        if not is_dir:
            return Visit.CONTINUE
        if path != root and path.name.startswith("."):
            return Visit.SKIP_SUBTREE
        if path == root or path.name == root_name:
            return Visit.CONTINUE
        if config.marker and not (path / config.marker).exists():
            return Visit.CONTINUE
        write_index(RepoRecord(repo_identifier(path, root_name), path), config, report)
        return Visit.CONTINUE

    report.aborted = not walk(root, visit)
    return report


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="govanity",
        description="Generate go-import redirect pages for vanity import paths hosted on GitHub",
    )
    ap.add_argument("-repo", "--repo", default="", help="Subpath under the source directory to walk (e.g. example.com)")
    ap.add_argument("-vanity", "--vanity", "-domain", "--domain", dest="vanity", default="",
                    help="Comma-separated vanity domains; the first one is used for documentation links")
    ap.add_argument("-github", "--github", default="", help="GitHub user name")
    ap.add_argument("-outdir", "--outdir", default="", help="Output directory for the redirect HTML files")
    ap.add_argument("-alt", "--alt", default=DEFAULT_ALT, help=f"Suffix for the fallback file when index.html exists (default: {DEFAULT_ALT})")
    ap.add_argument("-src", "--src", default=None, help="Source base directory (default: $GOPATH/src)")
    ap.add_argument("-godoc", "--godoc", default=DEFAULT_DOC_BASE, help=f"Documentation viewer base URL (default: {DEFAULT_DOC_BASE})")
    ap.add_argument("-marker", "--marker", default=None, help="Only render directories containing this file (e.g. go.mod)")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log every page decision")
    return ap


def config_from_args(args: argparse.Namespace) -> GeneratorConfig:
    source_root = pathlib.Path(args.src) if args.src else default_source_root()
    return GeneratorConfig(
        source_root=source_root,
        repo_subpath=args.repo,
        vanity_domains=parse_domains(args.vanity),
        github_user=args.github,
        output_dir=args.outdir,
        collision_suffix=args.alt,
        doc_base=args.godoc,
        marker=args.marker or None,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    if not (args.repo and parse_domains(args.vanity) and args.github and args.outdir):
        ap.print_usage(sys.stderr)
        print("govanity: -repo, -vanity, -github and -outdir are required", file=sys.stderr)
        return 1

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    config = config_from_args(args)
    print(f"📂 Scanning {config.walk_root}...", file=sys.stderr)
    try:
        report = generate(config)
    except GovanityError as e:
        logger.error("%s", e)
        return 1

    print(f"✓ {report.summary()} in {config.output_dir}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
