import pytest

from postpress.config import DEFAULT_CONFIG, Meta, load_config, load_meta
from postpress.errors import MetaError


def write_meta(tmp_path, text):
    path = tmp_path / "meta.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_meta_keys_are_capitalized(tmp_path):
    meta = load_meta(write_meta(tmp_path, "title: My Blog\nsite name: Example\nfoo: bar\n"))
    assert dict(meta) == {"Title": "My Blog", "Site Name": "Example", "Foo": "bar"}


def test_meta_values_stay_text(tmp_path):
    meta = load_meta(write_meta(tmp_path, "year: 2024\ndraft: yes\nempty:\n"))
    assert meta["Year"] == "2024"
    assert meta["Draft"] == "yes"
    assert meta["Empty"] == ""


def test_missing_or_empty_meta_is_empty(tmp_path):
    assert len(load_meta(tmp_path / "missing.yaml")) == 0
    assert len(load_meta(write_meta(tmp_path, ""))) == 0


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("- a\n- b\n", "mapping"),
        ("nested:\n  key: value\n", "must be a string"),
        ("title: a\ntitle: b\n", "duplicate key"),
        ("title: a\nTitle: b\n", "duplicate meta key 'Title'"),
        ("title: [unclosed\n", "invalid YAML"),
    ],
)
def test_invalid_meta(tmp_path, text, message):
    path = write_meta(tmp_path, text)
    with pytest.raises(MetaError) as exc:
        load_meta(path)
    assert message in exc.value.message
    assert exc.value.source_path == path


def test_meta_is_read_only():
    meta = Meta({"Title": "x"})
    with pytest.raises(TypeError):
        meta["Title"] = "y"


def test_load_config_defaults(tmp_path):
    assert load_config(tmp_path) == DEFAULT_CONFIG


def test_load_config_overrides(tmp_path):
    config_dir = tmp_path / ".postpress"
    config_dir.mkdir()
    (config_dir / "config.yaml").write_text("output_dir: dist\naddress: ':9000'\n", encoding="utf-8")
    config = load_config(tmp_path)
    assert config == {"output_dir": "dist", "address": ":9000"}


def test_load_config_rejects_unknown_keys(tmp_path):
    config_dir = tmp_path / ".postpress"
    config_dir.mkdir()
    (config_dir / "config.yaml").write_text("theme: dark\n", encoding="utf-8")
    with pytest.raises(MetaError) as exc:
        load_config(tmp_path)
    assert "unknown config key 'theme'" in exc.value.message


def test_missing_meta_keys_read_as_empty_attributes():
    meta = Meta({"Title": "x"})
    assert meta.Title == "x"
    assert meta.Author == ""
    assert "Author" not in meta
    with pytest.raises(KeyError):
        meta["Author"]


def test_meta_and_config_must_be_utf8(tmp_path):
    path = tmp_path / "meta.yaml"
    path.write_bytes(b"title: \xff\xfe\n")
    with pytest.raises(MetaError) as exc:
        load_meta(path)
    assert "not valid UTF-8" in exc.value.message
    assert isinstance(exc.value.original_error, UnicodeDecodeError)

    config_dir = tmp_path / ".postpress"
    config_dir.mkdir()
    (config_dir / "config.yaml").write_bytes(b"output_dir: \xff\n")
    with pytest.raises(MetaError) as exc:
        load_config(tmp_path)
    assert "not valid UTF-8" in exc.value.message
