from pathlib import Path

from click.testing import CliRunner

from postpress import __version__
from postpress.cli import cli


def init_example(runner: CliRunner, target: Path):
    result = runner.invoke(cli, ["init", str(target)])
    assert result.exit_code == 0, result.output
    return result


def test_cli_init_writes_example_site(tmp_path):
    runner = CliRunner()
    target = tmp_path / "site"
    result = init_example(runner, target)

    assert (target / ".postpress" / "layout.html").exists()
    assert (target / ".postpress" / "meta.yaml").exists()
    assert (target / "blog" / "hello-world" / "post.md").exists()
    assert "Wrote 13 files" in result.output

    # fails on non-empty directory
    result = runner.invoke(cli, ["init", str(target)])
    assert result.exit_code != 0
    assert "non-empty" in result.output


def test_cli_builds_example_site(tmp_path):
    runner = CliRunner()
    site = tmp_path / "site"
    out = tmp_path / "public"
    init_example(runner, site)

    result = runner.invoke(cli, ["build", str(site), "--out", str(out)])

    assert result.exit_code == 0, result.output
    assert "Wrote 3 posts, 6 pages and 1 files" in result.output
    for rel in [
        "index.html",
        "tags.html",
        "404.html",
        "feed.xml",
        "sitemap.txt",
        "robots.txt",
        "style.css",
        "blog/hello-world/index.html",
        "blog/markdown-tour/index.html",
        "notes/first-note/index.html",
    ]:
        assert (out / rel).exists(), rel

    index = (out / "index.html").read_text(encoding="utf-8")
    assert "A Tour Of Markdown" in index
    assert "First Note" in index

    post = (out / "blog" / "hello-world" / "index.html").read_text(encoding="utf-8")
    assert "<h1>Hello World</h1>" in post
    assert 'href="/tags.html#intro"' in post

    sitemap = (out / "sitemap.txt").read_text(encoding="utf-8")
    assert "https://example.com/blog/hello-world/index.html" in sitemap
    assert "feed.xml" not in sitemap


def test_cli_build_uses_configured_output_dir(tmp_path, monkeypatch):
    runner = CliRunner()
    site = tmp_path / "site"
    init_example(runner, site)
    (site / ".postpress" / "config.yaml").write_text("output_dir: dist\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(cli, ["build", "site"])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "dist" / "index.html").exists()


def test_cli_build_reports_broken_post(tmp_path):
    runner = CliRunner()
    site = tmp_path / "site"
    init_example(runner, site)
    (site / "blog" / "broken").mkdir()
    (site / "blog" / "broken" / "post.md").write_text("no header here", encoding="utf-8")

    result = runner.invoke(cli, ["build", str(site), "--out", str(tmp_path / "out")])

    assert result.exit_code == 1
    assert "Build failed" in result.output
    assert "broken" in result.output
    assert "read head: missing separator lines" in result.output


def test_cli_build_reports_missing_layout(tmp_path):
    runner = CliRunner()
    site = tmp_path / "site"
    site.mkdir()

    result = runner.invoke(cli, ["build", str(site), "--out", str(tmp_path / "out")])

    assert result.exit_code == 1
    assert "layout.html" in result.output


def test_cli_build_without_arguments_inside_site(tmp_path, monkeypatch):
    runner = CliRunner()
    site = tmp_path / "site"
    init_example(runner, site)
    monkeypatch.chdir(site)

    result = runner.invoke(cli, ["build"])
    assert result.exit_code == 0, result.output
    assert (site / "public" / "index.html").exists()

    # The previous output is not read back as sources.
    result = runner.invoke(cli, ["build"])
    assert result.exit_code == 0, result.output
    assert "Wrote 3 posts, 6 pages and 1 files" in result.output
    assert not (site / "public" / "public").exists()


def test_cli_build_refuses_output_equal_to_source(tmp_path):
    runner = CliRunner()
    site = tmp_path / "site"
    init_example(runner, site)

    result = runner.invoke(cli, ["build", str(site), "--out", str(site)])

    assert result.exit_code != 0
    assert "must differ from the source directory" in result.output
    assert (site / "index.html").read_text(encoding="utf-8").startswith("{% extends")


def test_cli_serve_uses_config(monkeypatch, tmp_path):
    runner = CliRunner()
    called = {}

    class DummyServer:
        def __init__(self, directory, address):
            called["directory"] = directory
            called["address"] = address

        def start(self):
            called["started"] = True

    monkeypatch.setattr("postpress.server.DemoServer", DummyServer)

    result = runner.invoke(cli, ["serve", str(tmp_path), "--addr", ":9000"], catch_exceptions=False)
    assert result.exit_code == 0
    assert called == {"directory": Path("public"), "address": ":9000", "started": True}

    result = runner.invoke(cli, ["serve", str(tmp_path), "--out", str(tmp_path / "o")])
    assert result.exit_code == 0
    assert called["directory"] == tmp_path / "o"
    assert called["address"] == "127.0.0.1:8080"


def test_cli_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert f"postpress, version {__version__}" in result.output
