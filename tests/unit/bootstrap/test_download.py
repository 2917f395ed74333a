"""Tests for downloading and extracting the server binary."""

from __future__ import annotations

import io
import os
import stat
import sys
import tarfile
import tempfile
import zipfile
from pathlib import Path
from unittest.mock import patch
from urllib.error import URLError

import pytest

from gh_mcp.bootstrap.download import (
    archive_suffix,
    download_to_tempfile,
    extract_from_tar_gz,
    extract_from_zip,
    fetch_and_install,
    secure_urlopen,
)
from gh_mcp.bootstrap.paths import LauncherPaths
from gh_mcp.core.errors import ArchiveError, FilesystemError, NetworkError

_IS_WINDOWS = sys.platform == "win32"
BINARY_CONTENT = b"\x7fELF fake server binary"


def _make_zip(path: Path, entries: dict) -> Path:
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in entries.items():
            if name.endswith("/"):
                zf.writestr(zipfile.ZipInfo(name), b"")
            else:
                zf.writestr(name, data)
    return path


def _make_tar_gz(path: Path, entries: dict) -> Path:
    with tarfile.open(path, "w:gz") as tar:
        for name, data in entries.items():
            info = tarfile.TarInfo(name)
            if name.endswith("/"):
                info.type = tarfile.DIRTYPE
                tar.addfile(info)
            else:
                info.size = len(data)
                tar.addfile(info, io.BytesIO(data))
    return path


def _paths(tmp_path: Path) -> LauncherPaths:
    return LauncherPaths(data_dir=tmp_path / "data", launcher_dir=tmp_path / "ext")


def _temp_files() -> set:
    return {p for p in Path(tempfile.gettempdir()).glob("github-mcp-server-*")}


class TestArchiveSuffix:
    """Tests for archive_suffix."""

    def test_zip(self) -> None:
        assert archive_suffix("https://x.test/a/server_Windows_x86_64.zip") == ".zip"

    def test_tar_gz(self) -> None:
        assert archive_suffix("https://x.test/a/server_Linux_x86_64.tar.gz") == ".tar.gz"

    def test_query_string_ignored(self) -> None:
        assert archive_suffix("https://x.test/a/server.tar.gz?token=1") == ".tar.gz"

    def test_raw_binary(self) -> None:
        assert archive_suffix("https://x.test/a/server-linux-amd64") == ""


class TestSecureUrlopen:
    """Tests for URL scheme validation."""

    def test_rejects_file_scheme(self) -> None:
        with pytest.raises(NetworkError):
            secure_urlopen("file:///etc/passwd")

    def test_rejects_remote_http(self) -> None:
        with pytest.raises(NetworkError):
            secure_urlopen("http://example.test/server.zip")

    def test_allows_loopback_http(self, make_response) -> None:
        with patch("gh_mcp.bootstrap.download.urlopen", return_value=make_response(b"")) as mock_open:
            secure_urlopen("http://127.0.0.1:8080/latest", timeout=5)
        assert mock_open.call_args[1]["timeout"] == 5


class TestExtractFromZip:
    """Tests for extract_from_zip."""

    def test_extracts_matching_entry(self, tmp_path: Path) -> None:
        archive = _make_zip(
            tmp_path / "a.zip",
            {"README.md": b"readme", "bin/": b"", "bin/helper": BINARY_CONTENT},
        )
        target = tmp_path / "out"
        extract_from_zip(archive, target, "helper")
        assert target.read_bytes() == BINARY_CONTENT

    def test_skips_directory_entries(self, tmp_path: Path) -> None:
        archive = _make_zip(
            tmp_path / "a.zip",
            {"helper-dir/": b"", "helper-dir/helper.exe": BINARY_CONTENT},
        )
        target = tmp_path / "out"
        extract_from_zip(archive, target, "helper")
        assert target.read_bytes() == BINARY_CONTENT

    def test_no_match_raises_and_writes_nothing(self, tmp_path: Path) -> None:
        archive = _make_zip(tmp_path / "a.zip", {"LICENSE": b"mit"})
        target = tmp_path / "out"
        with pytest.raises(ArchiveError, match="binary not found in zip"):
            extract_from_zip(archive, target, "helper")
        assert not target.exists()

    def test_corrupt_archive(self, tmp_path: Path) -> None:
        archive = tmp_path / "a.zip"
        archive.write_bytes(b"not a zip")
        with pytest.raises(ArchiveError, match="invalid zip archive"):
            extract_from_zip(archive, tmp_path / "out", "helper")

    @pytest.mark.parametrize(
        "error",
        [
            RuntimeError("File 'helper' is encrypted, password required for extraction"),
            NotImplementedError("That compression method is not supported"),
        ],
    )
    def test_unreadable_entry(self, tmp_path: Path, error: Exception) -> None:
        archive = _make_zip(tmp_path / "a.zip", {"helper": BINARY_CONTENT})
        with patch("gh_mcp.bootstrap.download.zipfile.ZipFile.open", side_effect=error):
            with pytest.raises(ArchiveError, match="invalid zip archive"):
                extract_from_zip(archive, tmp_path / "out", "helper")


class TestExtractFromTarGz:
    """Tests for extract_from_tar_gz."""

    def test_extracts_first_regular_match(self, tmp_path: Path) -> None:
        archive = _make_tar_gz(
            tmp_path / "a.tar.gz",
            {
                "helper_linux/": b"",
                "LICENSE": b"mit",
                "helper_linux/helper": BINARY_CONTENT,
                "helper_linux/helper.1": b"manpage",
            },
        )
        target = tmp_path / "out"
        extract_from_tar_gz(archive, target, "helper")
        assert target.read_bytes() == BINARY_CONTENT

    def test_no_match_raises_and_writes_nothing(self, tmp_path: Path) -> None:
        archive = _make_tar_gz(tmp_path / "a.tar.gz", {"LICENSE": b"mit", "README.md": b"x"})
        target = tmp_path / "out"
        with pytest.raises(ArchiveError, match="binary not found in tar.gz"):
            extract_from_tar_gz(archive, target, "helper")
        assert not target.exists()

    def test_not_gzip(self, tmp_path: Path) -> None:
        archive = tmp_path / "a.tar.gz"
        archive.write_bytes(b"plain text")
        with pytest.raises(ArchiveError, match="invalid tar.gz archive"):
            extract_from_tar_gz(archive, tmp_path / "out", "helper")


class TestDownloadToTempfile:
    """Tests for the scoped temporary download."""

    def test_file_removed_after_success(self, make_response) -> None:
        with patch("gh_mcp.bootstrap.download.urlopen", return_value=make_response(b"payload")):
            with download_to_tempfile("https://dl.test/x") as tmp:
                assert tmp.read_bytes() == b"payload"
        assert not tmp.exists()

    def test_file_removed_after_error_in_body(self, make_response) -> None:
        with patch("gh_mcp.bootstrap.download.urlopen", return_value=make_response(b"payload")):
            with pytest.raises(RuntimeError):
                with download_to_tempfile("https://dl.test/x") as tmp:
                    raise RuntimeError("boom")
        assert not tmp.exists()

    def test_file_removed_after_http_error(self, make_response) -> None:
        before = _temp_files()
        with patch("gh_mcp.bootstrap.download.urlopen", return_value=make_response(b"gone", status=404)):
            with pytest.raises(NetworkError, match="failed to download binary: HTTP 404"):
                with download_to_tempfile("https://dl.test/x"):
                    pass
        assert _temp_files() == before


class TestFetchAndInstall:
    """Tests for fetch_and_install."""

    def test_zip_round_trip(self, tmp_path: Path, make_response) -> None:
        archive = _make_zip(tmp_path / "src.zip", {"bin/helper": BINARY_CONTENT})
        response = make_response(archive.read_bytes())
        paths = _paths(tmp_path)

        with patch("gh_mcp.bootstrap.download.urlopen", return_value=response):
            installed = fetch_and_install(
                "https://dl.test/helper-linux-amd64.zip", paths, "helper", "helper"
            )

        assert installed == paths.bin_dir / "helper"
        assert installed.read_bytes() == BINARY_CONTENT
        if not _IS_WINDOWS:
            mode = stat.S_IMODE(os.stat(installed).st_mode)
            assert mode == 0o755

    def test_tar_gz_install(self, tmp_path: Path, make_response) -> None:
        archive = _make_tar_gz(tmp_path / "src.tar.gz", {"dist/helper": BINARY_CONTENT})
        paths = _paths(tmp_path)

        with patch("gh_mcp.bootstrap.download.urlopen", return_value=make_response(archive.read_bytes())):
            installed = fetch_and_install(
                "https://dl.test/helper_Linux_x86_64.tar.gz", paths, "helper", "helper"
            )

        assert installed.read_bytes() == BINARY_CONTENT

    def test_tar_gz_without_binary_leaves_no_target(self, tmp_path: Path, make_response) -> None:
        archive = _make_tar_gz(tmp_path / "src.tar.gz", {"LICENSE": b"mit"})
        paths = _paths(tmp_path)
        before = _temp_files()

        with patch("gh_mcp.bootstrap.download.urlopen", return_value=make_response(archive.read_bytes())):
            with pytest.raises(ArchiveError):
                fetch_and_install("https://dl.test/helper.tar.gz", paths, "helper", "helper")

        assert not (paths.bin_dir / "helper").exists()
        assert _temp_files() == before

    def test_raw_binary_is_moved_into_place(self, tmp_path: Path, make_response) -> None:
        paths = _paths(tmp_path)
        with patch("gh_mcp.bootstrap.download.urlopen", return_value=make_response(BINARY_CONTENT)):
            installed = fetch_and_install(
                "https://dl.test/helper-linux-amd64", paths, "helper", "helper"
            )
        assert installed.read_bytes() == BINARY_CONTENT

    def test_creates_bin_directory(self, tmp_path: Path, make_response) -> None:
        paths = _paths(tmp_path)
        assert not paths.bin_dir.exists()
        with patch("gh_mcp.bootstrap.download.urlopen", return_value=make_response(BINARY_CONTENT)):
            fetch_and_install("https://dl.test/helper", paths, "helper", "helper")
        assert paths.bin_dir.is_dir()

    def test_bin_directory_failure(self, tmp_path: Path) -> None:
        # A regular file where the data dir should be
        blocker = tmp_path / "data"
        blocker.write_text("not a directory")
        with patch("gh_mcp.bootstrap.download.urlopen") as mock_open:
            with pytest.raises(FilesystemError, match="failed to create binary directory"):
                fetch_and_install("https://dl.test/helper", _paths(tmp_path), "helper", "helper")
        mock_open.assert_not_called()

    def test_download_failure(self, tmp_path: Path) -> None:
        with patch("gh_mcp.bootstrap.download.urlopen", side_effect=URLError("refused")):
            with pytest.raises(NetworkError, match="failed to download binary"):
                fetch_and_install("https://dl.test/helper.zip", _paths(tmp_path), "helper", "helper")
        assert not (_paths(tmp_path).bin_dir / "helper").exists()
