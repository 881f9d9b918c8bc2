"""Tests for the backup directory, asset naming and zip archives."""

import json
import zipfile
from datetime import datetime
from pathlib import Path

import pytest

from storyblok_backup.backup.archive import archive_name, create_zip
from storyblok_backup.backup.asset_handler import AssetHandler
from storyblok_backup.backup.storage import BackupStorage
from storyblok_backup.exceptions import FormatError, OutputConflictError


class TestBackupStorage:
    """Test cases for BackupStorage."""

    def test_prepare_creates_backup_dir(self, tmp_path: Path) -> None:
        """Test that prepare creates <output>/backup."""
        storage = BackupStorage(tmp_path / "out")
        storage.prepare()

        assert storage.backup_dir == tmp_path / "out" / "backup"
        assert storage.backup_dir.is_dir()

    def test_prepare_refuses_existing_dir(self, tmp_path: Path) -> None:
        """Test that an existing directory is kept without force."""
        output_dir = tmp_path / "out"
        output_dir.mkdir()
        (output_dir / "keep.txt").write_text("keep")

        with pytest.raises(OutputConflictError, match="--force"):
            BackupStorage(output_dir).prepare()

        assert (output_dir / "keep.txt").read_text() == "keep"

    def test_prepare_force_wipes_dir(self, tmp_path: Path) -> None:
        """Test that force removes everything in the output directory."""
        output_dir = tmp_path / "out"
        output_dir.mkdir()
        (output_dir / "stale.txt").write_text("stale")

        BackupStorage(output_dir).prepare(force=True)

        assert [p.name for p in output_dir.iterdir()] == ["backup"]

    def test_write_json(self, tmp_path: Path) -> None:
        """Test that items are written as indented UTF-8 JSON."""
        storage = BackupStorage(tmp_path / "out")
        storage.prepare()

        path = storage.write_json("stories", "1", {"id": 1, "name": "Über uns"})

        assert path == storage.backup_dir / "stories" / "1.json"
        text = path.read_text(encoding="utf-8")
        assert "Über uns" in text
        assert json.loads(text) == {"id": 1, "name": "Über uns"}
        assert text == json.dumps({"id": 1, "name": "Über uns"}, indent=2, ensure_ascii=False)
        assert storage.files_written == 1

    def test_write_json_at_root(self, tmp_path: Path) -> None:
        """Test that a None folder writes into the backup root."""
        storage = BackupStorage(tmp_path / "out")
        storage.prepare()

        path = storage.write_json(None, "space-1", {"id": 1})

        assert path == storage.backup_dir / "space-1.json"


class TestAssetHandler:
    """Test cases for AssetHandler."""

    @pytest.mark.parametrize(
        ("filename", "expected"),
        [
            ("https://a.storyblok.com/f/1/1920x1080/abc/hero.png", "9.png"),
            ("https://a.storyblok.com/f/1/report.final.PDF", "9.PDF"),
            ("https://a.storyblok.com/f/1/archive.tar.gz", "9.gz"),
            ("https://a.storyblok.com/f/1/README", "9"),
        ],
    )
    def test_local_file_name(self, filename: str, expected: str) -> None:
        """Test that the extension follows the last dot of the file name."""
        assert AssetHandler.local_file_name({"id": 9, "filename": filename}) == expected

    def test_local_file_name_without_source(self) -> None:
        """Test that assets without a file have no local name."""
        assert AssetHandler.local_file_name({"id": 9, "filename": None}) is None
        assert AssetHandler.local_file_name({"id": 9}) is None

    def test_download_asset_file(self, fake_api, tmp_path: Path) -> None:
        """Test that the binary is downloaded exclusively into the folder."""
        asset = {"id": 9, "filename": "https://a.storyblok.com/f/1/hero.png"}

        path = AssetHandler.download_asset_file(fake_api, asset, tmp_path)

        assert path == tmp_path / "9.png"
        assert fake_api.calls == [
            ("download_file", "https://a.storyblok.com/f/1/hero.png", str(tmp_path / "9.png"))
        ]

    def test_download_existing_file_is_untouched(self, fake_api, tmp_path: Path) -> None:
        """Test that an existing binary aborts and keeps its content."""
        (tmp_path / "9.png").write_bytes(b"original")
        asset = {"id": 9, "filename": "https://a.storyblok.com/f/1/hero.png"}

        with pytest.raises(OutputConflictError):
            AssetHandler.download_asset_file(fake_api, asset, tmp_path)

        assert (tmp_path / "9.png").read_bytes() == b"original"

    def test_download_asset_without_file(self, fake_api, tmp_path: Path) -> None:
        """Test that an asset without a source file aborts the download."""
        with pytest.raises(FormatError, match="has no file"):
            AssetHandler.download_asset_file(fake_api, {"id": 9, "filename": None}, tmp_path)

        assert fake_api.calls == []


class TestArchive:
    """Test cases for zip archiving."""

    def test_archive_name(self) -> None:
        """Test the timestamped archive name."""
        now = datetime(2024, 5, 1, 13, 45, 0)
        assert archive_name("backup", now) == "backup-2024-05-01-13-45-00.zip"

    def test_create_zip(self, tmp_path: Path) -> None:
        """Test that the archive unpacks to a backup/ folder."""
        storage = BackupStorage(tmp_path / "out")
        storage.prepare()
        storage.write_json(None, "space-1", {"id": 1})
        storage.write_json("stories", "2", {"id": 2})

        zip_path = create_zip(storage.backup_dir, storage.output_dir, prefix="nightly")

        assert zip_path.parent == storage.output_dir
        assert zip_path.name.startswith("nightly-")
        with zipfile.ZipFile(zip_path) as zf:
            assert sorted(zf.namelist()) == ["backup/space-1.json", "backup/stories/2.json"]
            assert json.loads(zf.read("backup/stories/2.json")) == {"id": 2}
