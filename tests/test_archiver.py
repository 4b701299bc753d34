import asyncio
import zipfile

import py7zr
import pytest

from archiver import collect_members, create_archive, write_archive


def entries_of(root):
    return sorted(root.iterdir())


def test_zip_keeps_relative_layout(staging):
    archive = staging / "ModName.zip"
    asyncio.run(create_archive(archive, entries_of(staging)))

    with zipfile.ZipFile(archive) as zf:
        files = {n for n in zf.namelist() if not n.endswith("/")}
    assert files == {"readme.txt", "data/crops.xml"}


def test_7z_archive_is_written(staging, tmp_path):
    archive = tmp_path / "ModName.7z"
    write_archive(archive, entries_of(staging))

    with py7zr.SevenZipFile(archive, "r") as sz:
        names = set(sz.getnames())
    assert "readme.txt" in names
    assert "data/crops.xml" in names


def test_non_recursive_skips_directories(staging, tmp_path):
    archive = tmp_path / "flat.zip"
    write_archive(archive, entries_of(staging), recursive=False)

    with zipfile.ZipFile(archive) as zf:
        assert zf.namelist() == ["readme.txt"]


def test_archive_never_contains_itself(staging):
    archive = staging / "ModName.zip"
    archive.write_bytes(b"stale")

    members = collect_members(archive, entries_of(staging))

    assert archive not in [src for src, _ in members]


def test_nested_directories_are_walked(tmp_path):
    root = tmp_path / "stage"
    (root / "maps" / "textures").mkdir(parents=True)
    (root / "maps" / "textures" / "grass.dds").write_bytes(b"dds")
    (root / "modDesc.xml").write_text("<modDesc/>", encoding="utf-8")

    names = [name for _, name in collect_members(root / "out.zip", entries_of(root))]

    assert "maps/textures/grass.dds" in names
    assert "modDesc.xml" in names


def test_unsupported_format_is_rejected(staging, tmp_path):
    with pytest.raises(ValueError, match="Unsupported archive format"):
        write_archive(tmp_path / "mod.rar", entries_of(staging))


def test_missing_entry_propagates_and_cleans_up(tmp_path):
    archive = tmp_path / "broken.zip"

    with pytest.raises(FileNotFoundError):
        asyncio.run(create_archive(archive, [tmp_path / "does-not-exist.txt"]))
    assert not archive.exists()
