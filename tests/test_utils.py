from datetime import date, datetime, timedelta, timezone
from pathlib import PurePosixPath, PureWindowsPath

from postpress import utils


def test_titlecase_only_touches_word_starts():
    assert utils.titlecase("hello world") == "Hello World"
    assert utils.titlecase("iPhone tips") == "IPhone Tips"
    assert utils.titlecase("site_name") == "Site_name"
    assert utils.titlecase("web-dev") == "Web-Dev"
    assert utils.titlecase("") == ""


def test_as_utc():
    assert utils.as_utc(date(2024, 1, 2)) == datetime(2024, 1, 2, tzinfo=timezone.utc)
    naive = utils.as_utc(datetime(2024, 1, 2, 3))
    assert naive.tzinfo is timezone.utc
    aware = datetime(2024, 1, 2, 3, tzinfo=timezone(timedelta(hours=2)))
    assert utils.as_utc(aware) is aware


def test_path_classification():
    assert utils.is_hidden_path(PurePosixPath(".git/config"))
    assert utils.is_hidden_path(PurePosixPath("blog/.draft/post.md"))
    assert not utils.is_hidden_path(PurePosixPath("blog/post.md"))

    assert utils.is_template(PurePosixPath("index.html"))
    assert utils.is_template(PurePosixPath("feed.xml"))
    assert utils.is_template(PurePosixPath("robots.txt"))
    assert not utils.is_template(PurePosixPath("style.css"))

    assert utils.is_page(PurePosixPath("about/index.html"))
    assert not utils.is_page(PurePosixPath("feed.xml"))


def test_destinations_and_urls():
    dest = utils.to_destination(PureWindowsPath("blog\\hello\\index.html"))
    assert dest == PurePosixPath("blog/hello/index.html")
    assert utils.url_for(dest) == "/blog/hello/index.html"


def test_write_and_copy_files(tmp_path):
    written = tmp_path / "a" / "b" / "file.bin"
    utils.write_file(written, b"\x00\x01data")
    assert written.read_bytes() == b"\x00\x01data"

    copied = tmp_path / "c" / "copy.bin"
    utils.copy_file(written, copied)
    assert copied.read_bytes() == b"\x00\x01data"
