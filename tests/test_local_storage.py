"""
Local Storage Tests - asset paths, directory creation and writes
"""

import base64
import os
import sys

sys.path.insert(
    0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src")
)

import pytest

from theme_downloader.coreutils.errors import AssetStoreError, SetupError
from theme_downloader.extract.schemas import AssetContent, AssetEncoding
from theme_downloader.load.local_storage import (
    AssetStore,
    asset_path,
    decode_payload,
    save_asset,
    setup_output_dir,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\xff\x00"


def test_setup_output_dir_creates_directory(tmp_path):
    output_dir = setup_output_dir(tmp_path / "foo.myshopify.com-42")
    assert output_dir.is_dir()


def test_setup_output_dir_refuses_existing(tmp_path):
    existing = tmp_path / "foo.myshopify.com-42"
    existing.mkdir()
    (existing / "stale.liquid").write_text("old")

    with pytest.raises(SetupError):
        setup_output_dir(existing)

    assert (existing / "stale.liquid").read_text() == "old"


def test_asset_path_joins_key(tmp_path):
    assert asset_path(tmp_path, "assets/css/theme.css") == tmp_path / "assets" / "css" / "theme.css"


@pytest.mark.parametrize("key", ["", "../evil.liquid", "assets/../../evil", "/etc/passwd"])
def test_asset_path_rejects_escaping_keys(tmp_path, key):
    with pytest.raises(AssetStoreError):
        asset_path(tmp_path, key)


def test_save_creates_intermediate_directories(tmp_path):
    content = AssetContent(key="assets/css/theme.css", payload="body { color: red; }")

    target = save_asset(content, tmp_path)

    assert (tmp_path / "assets" / "css").is_dir()
    assert target.read_text(encoding="utf-8") == "body { color: red; }"


def test_save_decodes_base64(tmp_path):
    content = AssetContent(
        key="assets/logo.png",
        payload=base64.b64encode(PNG_BYTES).decode("ascii"),
        encoding=AssetEncoding.BASE64,
    )

    target = save_asset(content, tmp_path)

    assert target.read_bytes() == PNG_BYTES


def test_raw_text_written_as_utf8(tmp_path):
    content = AssetContent(key="locales/fr.json", payload='{"hello": "Bonjour à tous"}')
    target = save_asset(content, tmp_path)
    assert target.read_bytes() == '{"hello": "Bonjour à tous"}'.encode("utf-8")


def test_save_is_idempotent(tmp_path):
    store = AssetStore(tmp_path)
    content = AssetContent(key="templates/index.liquid", payload="{{ content_for_index }}")

    first = store.save(content).read_bytes()
    second = store.save(content).read_bytes()

    assert first == second == b"{{ content_for_index }}"


def test_save_truncates_previous_content(tmp_path):
    store = AssetStore(tmp_path)
    store.save(AssetContent(key="snippets/a.liquid", payload="a much longer body"))
    store.save(AssetContent(key="snippets/a.liquid", payload="short"))
    assert store.path_for("snippets/a.liquid").read_text() == "short"


def test_line_wrapped_base64_decodes(tmp_path):
    data = bytes(range(256)) * 2
    wrapped = base64.encodebytes(data).decode("ascii")
    assert "\n" in wrapped

    content = AssetContent(key="assets/x.bin", payload=wrapped, encoding=AssetEncoding.BASE64)
    target = save_asset(content, tmp_path)

    assert target.read_bytes() == data


def test_base64_skips_non_alphabet_characters():
    content = AssetContent(
        key="assets/logo.png",
        payload="iVBO\r\nRw0K\tGgo=",
        encoding=AssetEncoding.BASE64,
    )
    assert decode_payload(content) == base64.b64decode("iVBORw0KGgo=")


def test_raw_value_with_lone_surrogate_is_written(tmp_path):
    content = AssetContent(key="templates/t.liquid", payload="a\ud800b")
    target = save_asset(content, tmp_path)
    assert target.read_bytes() == b"a\xed\xa0\x80b"


def test_truncated_base64_fails(tmp_path):
    content = AssetContent(key="assets/bad.png", payload="abc", encoding=AssetEncoding.BASE64)
    with pytest.raises(AssetStoreError):
        decode_payload(content)


def test_write_failure_raises_store_error(tmp_path):
    # A directory sits where the file should go
    (tmp_path / "templates" / "index.liquid").mkdir(parents=True)

    with pytest.raises(AssetStoreError) as exc:
        save_asset(AssetContent(key="templates/index.liquid", payload="x"), tmp_path)

    assert exc.value.key == "templates/index.liquid"
