import asyncio
import errno

import pytest

from filesystem import ensure_writable_directory, list_directory, read_text_file


def test_ensure_creates_nested_dirs(tmp_path):
    target = tmp_path / "a" / "b" / "mods"

    asyncio.run(ensure_writable_directory(target))
    asyncio.run(ensure_writable_directory(target))

    assert target.is_dir()


def test_ensure_read_only_dir_raises(tmp_path, monkeypatch):
    monkeypatch.setattr("filesystem.os.access", lambda path, mode: False)

    with pytest.raises(PermissionError) as excinfo:
        asyncio.run(ensure_writable_directory(tmp_path / "mods"))

    assert excinfo.value.errno == errno.EACCES
    assert excinfo.value.filename == str(tmp_path / "mods")


def test_list_directory_is_sorted(tmp_path):
    for name in ("b.txt", "a.txt", "c"):
        (tmp_path / name).write_text("", encoding="utf-8")

    assert asyncio.run(list_directory(tmp_path)) == ["a.txt", "b.txt", "c"]


def test_read_text_file(tmp_path):
    (tmp_path / "VERSION").write_text("1.7.1.0\n", encoding="utf-8")

    assert asyncio.run(read_text_file(tmp_path / "VERSION")) == "1.7.1.0\n"
