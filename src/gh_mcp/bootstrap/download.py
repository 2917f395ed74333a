"""Download and install the github-mcp-server binary.

Release assets come as ``.zip``, ``.tar.gz`` or a bare executable. Only the
single binary is pulled out of an archive; nothing else is extracted.
No checksum or signature verification is performed.
"""

from __future__ import annotations

import gzip
import shutil
import tarfile
import tempfile
import zipfile
import zlib
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator, Mapping, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from gh_mcp.bootstrap.paths import LauncherPaths
from gh_mcp.core.errors import ArchiveError, FilesystemError, NetworkError
from gh_mcp.core.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0

# Owner rwx, group/other rx
EXECUTABLE_MODE = 0o755

_LOOPBACK_HOSTS = {"localhost", "127.0.0.1", "::1"}
_MAX_ERROR_BODY = 4096


def _validate_url(url: str) -> None:
    parsed = urlparse(url)
    if parsed.scheme == "https":
        return
    if parsed.scheme == "http" and parsed.hostname in _LOOPBACK_HOSTS:
        return
    raise NetworkError(f"Refusing to fetch non-HTTPS URL: {url}")


def secure_urlopen(
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> IO[bytes]:
    """Open an HTTPS URL with a bounded timeout.

    Plain HTTP is only allowed for loopback hosts.

    Raises:
        NetworkError: If the URL scheme is not allowed.
        urllib.error.URLError: On transport failures.
    """
    _validate_url(url)
    request = Request(url, headers=dict(headers or {}))
    return urlopen(request, timeout=timeout)  # nosec B310 - scheme validated above


def _read_body(response: IO[bytes]) -> str:
    try:
        return response.read(_MAX_ERROR_BODY).decode("utf-8", errors="replace")
    except OSError:
        return ""


@contextmanager
def open_url(
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT,
    action: str = "fetch",
) -> Iterator[IO[bytes]]:
    """Open a URL and require HTTP 200.

    Args:
        url: URL to GET.
        headers: Extra request headers.
        timeout: Seconds before the request is abandoned.
        action: Phrase used in error messages ("failed to <action>").

    Raises:
        NetworkError: On transport failure or a non-200 status.
    """
    try:
        response = secure_urlopen(url, headers=headers, timeout=timeout)
    except HTTPError as e:
        body = _read_body(e)
        raise NetworkError(
            f"failed to {action}: HTTP {e.code} - {body}", status=e.code, body=body
        ) from e
    except (URLError, OSError) as e:
        raise NetworkError(f"failed to {action}: {e}") from e

    with response:
        status = getattr(response, "status", 200)
        if status != 200:
            body = _read_body(response)
            raise NetworkError(
                f"failed to {action}: HTTP {status} - {body}", status=status, body=body
            )
        yield response


@contextmanager
def download_to_tempfile(
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT,
    prefix: str = "github-mcp-server-",
    suffix: str = "",
) -> Iterator[Path]:
    """Download a URL into a temporary file that is removed on exit.

    Yields:
        Path to the closed temporary file.
    """
    try:
        # delete=False and manual cleanup; Windows cannot reopen an open temp file
        tmp_file = tempfile.NamedTemporaryFile(prefix=prefix, suffix=suffix, delete=False)
    except OSError as e:
        raise FilesystemError(f"failed to create temporary file: {e}") from e
    tmp_path = Path(tmp_file.name)

    try:
        with open_url(url, headers=headers, timeout=timeout, action="download binary") as response:
            try:
                shutil.copyfileobj(response, tmp_file)
            except OSError as e:
                raise NetworkError(f"failed to save downloaded file: {e}") from e
        tmp_file.close()
        yield tmp_path
    finally:
        if not tmp_file.closed:
            tmp_file.close()
        tmp_path.unlink(missing_ok=True)


def extract_from_zip(archive_path: Path, target_path: Path, member_hint: str) -> None:
    """Copy the first non-directory zip entry whose name contains ``member_hint``.

    Raises:
        ArchiveError: If the archive is unreadable or has no matching entry.
    """
    try:
        with zipfile.ZipFile(archive_path) as zf:
            member = next(
                (
                    info
                    for info in zf.infolist()
                    if member_hint in info.filename and not info.is_dir()
                ),
                None,
            )
            if member is None:
                raise ArchiveError("binary not found in zip")

            LOGGER.debug(f"Extracting {member.filename} from zip")
            with zf.open(member) as src, open(target_path, "wb") as dst:
                shutil.copyfileobj(src, dst)
    except (zipfile.BadZipFile, zlib.error, RuntimeError, NotImplementedError) as e:
        # RuntimeError: encrypted entry, NotImplementedError: unsupported compression
        raise ArchiveError(f"invalid zip archive: {e}") from e


def extract_from_tar_gz(archive_path: Path, target_path: Path, member_hint: str) -> None:
    """Copy the first regular tar entry whose name contains ``member_hint``.

    Raises:
        ArchiveError: If the archive is unreadable or has no matching entry.
    """
    try:
        with tarfile.open(archive_path, "r:gz") as tar:
            for member in tar:
                if not (member.isreg() and member_hint in member.name):
                    continue

                src = tar.extractfile(member)
                if src is None:
                    continue

                LOGGER.debug(f"Extracting {member.name} from tar.gz")
                with src, open(target_path, "wb") as dst:
                    shutil.copyfileobj(src, dst)
                return
    except (tarfile.TarError, gzip.BadGzipFile, zlib.error, EOFError) as e:
        raise ArchiveError(f"invalid tar.gz archive: {e}") from e

    raise ArchiveError("binary not found in tar.gz")


def archive_suffix(url: str) -> str:
    """Return ``.zip``, ``.tar.gz`` or ``""`` for a download URL."""
    path = urlparse(url).path.lower()
    if path.endswith(".zip"):
        return ".zip"
    if path.endswith(".tar.gz"):
        return ".tar.gz"
    return ""


def fetch_and_install(
    url: str,
    paths: LauncherPaths,
    binary_file: str,
    member_hint: str,
    timeout: float = DEFAULT_TIMEOUT,
    headers: Optional[Mapping[str, str]] = None,
) -> Path:
    """Download a release asset and install the binary into the data dir.

    Args:
        url: Asset download URL.
        paths: Launcher paths; the binary goes into ``paths.bin_dir``.
        binary_file: Installed file name (``.exe`` suffixed on Windows).
        member_hint: Substring identifying the binary inside an archive.
        timeout: Seconds before the download is abandoned.
        headers: Extra request headers.

    Returns:
        Path to the installed, executable binary.

    Raises:
        NetworkError: Download failed.
        ArchiveError: Archive unreadable or binary missing from it.
        FilesystemError: Directory creation, write, move or chmod failed.
    """
    bin_dir = paths.bin_dir
    try:
        bin_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"failed to create binary directory: {e}") from e

    target_path = bin_dir / binary_file
    suffix = archive_suffix(url)

    LOGGER.info(f"Downloading from: {url}")
    with download_to_tempfile(url, headers=headers, timeout=timeout, suffix=suffix) as tmp_path:
        try:
            if suffix == ".zip":
                extract_from_zip(tmp_path, target_path, member_hint)
            elif suffix == ".tar.gz":
                extract_from_tar_gz(tmp_path, target_path, member_hint)
            else:
                # Direct binary download
                shutil.move(str(tmp_path), str(target_path))
        except OSError as e:
            raise FilesystemError(f"failed to install binary to {target_path}: {e}") from e

    try:
        target_path.chmod(EXECUTABLE_MODE)
    except OSError as e:
        raise FilesystemError(f"failed to make binary executable: {e}") from e

    LOGGER.info(f"Installed {binary_file} to {target_path}")
    return target_path
