import pytest

from govanity_package import govanity
from conftest import pages


def fail_generate(config):
    raise AssertionError("generate must not run")


@pytest.mark.parametrize("missing", ["-repo", "-vanity", "-github", "-outdir"])
def test_missing_flag_prints_usage(monkeypatch, capsys, missing):
    monkeypatch.setattr(govanity, "generate", fail_generate)
    args = {"-repo": "acme", "-vanity": "example.com", "-github": "octocat", "-outdir": "site"}
    del args[missing]
    argv = [x for kv in args.items() for x in kv]

    assert govanity.main(argv) == 1
    assert "usage:" in capsys.readouterr().err


def test_main_generates_pages(source_tree, tmp_path, capsys):
    outdir = tmp_path / "site"
    rc = govanity.main([
        "-src", str(source_tree), "-repo", "acme", "-vanity", "example.com,example.dev",
        "-github", "octocat", "-outdir", str(outdir),
    ])

    assert rc == 0
    assert "toolkit/index.html" in pages(outdir)
    assert "3 written" in capsys.readouterr().err


def test_main_accepts_long_options_and_alt(source_tree, tmp_path):
    outdir = tmp_path / "site"
    (outdir / "other").mkdir(parents=True)
    (outdir / "other" / "index.html").write_text("mine\n")

    rc = govanity.main([
        "--src", str(source_tree), "--repo", "acme", "--domain", "example.com",
        "--github", "octocat", "--outdir", str(outdir), "--alt", "gen",
    ])

    assert rc == 0
    assert (outdir / "other" / "index.html.gen").exists()


def test_main_rejects_output_inside_source(source_tree):
    outdir = source_tree / "acme" / "site"
    rc = govanity.main([
        "-src", str(source_tree), "-repo", "acme", "-vanity", "example.com",
        "-github", "octocat", "-outdir", str(outdir),
    ])

    assert rc == 1
    assert not outdir.exists()


def test_main_walk_error_still_exits_zero(source_tree, tmp_path, capsys, unreadable_toolkit):
    outdir = tmp_path / "site"
    rc = govanity.main([
        "-src", str(source_tree), "-repo", "acme", "-vanity", "example.com",
        "-github", "octocat", "-outdir", str(outdir),
    ])

    assert rc == 0
    assert "(walk aborted)" in capsys.readouterr().err
    assert (outdir / "other" / "index.html").exists()
