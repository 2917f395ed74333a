"""Resolve the download URL of the latest github-mcp-server release.

Release asset naming has not been consistent over time, so the asset is
chosen by an ordered chain of increasingly permissive matchers. The first
matcher that accepts any asset wins.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from gh_mcp.bootstrap.download import open_url
from gh_mcp.bootstrap.platform import PlatformInfo, get_platform_info
from gh_mcp.config.models import LauncherConfig
from gh_mcp.core.errors import (
    CredentialError,
    NetworkError,
    NoMatchingAssetError,
    ReleaseParseError,
)
from gh_mcp.core.logging import get_logger

LOGGER = get_logger(__name__)

# (lower-cased asset name, os, arch) -> matched
AssetPredicate = Callable[[str, str, str], bool]
TokenProvider = Callable[[], str]

MACOS_ALIASES = ("mac", "macos", "osx")
X86_64_ALIASES = ("x86_64", "amd64")
EXCLUDED_MARKERS = (".sha", ".md5", "src", "source")

BUILD_FROM_SOURCE_HINT = (
    "go build -o bin/github-mcp-server ./cmd/github-mcp-server"
)


@dataclass(frozen=True)
class Asset:
    """A downloadable file attached to a release."""

    name: str
    download_url: str


@dataclass
class ReleaseInfo:
    """The parts of a GitHub release listing the launcher needs."""

    tag_name: str = ""
    assets: List[Asset] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "ReleaseInfo":
        """Build from a decoded GitHub ``releases/latest`` response.

        Raises:
            ReleaseParseError: If the document does not have the expected shape.
        """
        if not isinstance(data, dict):
            raise ReleaseParseError(
                f"failed to parse release info: expected object, got {type(data).__name__}"
            )

        raw_assets = data.get("assets") or []
        if not isinstance(raw_assets, list):
            raise ReleaseParseError("failed to parse release info: 'assets' is not a list")

        assets: List[Asset] = []
        for raw in raw_assets:
            if not isinstance(raw, dict):
                raise ReleaseParseError("failed to parse release info: asset is not an object")
            assets.append(
                Asset(
                    name=str(raw.get("name") or ""),
                    download_url=str(raw.get("browser_download_url") or ""),
                )
            )

        return cls(tag_name=str(data.get("tag_name") or ""), assets=assets)


def _contains_any(name: str, needles: Sequence[str]) -> bool:
    return any(needle in name for needle in needles)


def match_os_and_arch(name: str, os_name: str, arch: str) -> bool:
    """Standard naming: both OS and arch appear in the name."""
    return os_name.lower() in name and arch.lower() in name


def macos_alias_matcher(alias: str) -> AssetPredicate:
    """macOS releases published as mac/macos/osx instead of darwin."""

    def predicate(name: str, os_name: str, arch: str) -> bool:
        if os_name != "darwin":
            return False
        return alias in name and _contains_any(name, (arch.lower(),) + X86_64_ALIASES)

    return predicate


def match_x86_64_alias(name: str, os_name: str, arch: str) -> bool:
    """amd64 hosts also accept x86_64-named assets."""
    if arch != "amd64":
        return False
    return os_name.lower() in name and "x86_64" in name


def match_macos_alias_any_arch(name: str, os_name: str, arch: str) -> bool:
    """macOS alias with no architecture marker, e.g. a universal binary."""
    if os_name != "darwin":
        return False
    return _contains_any(name, MACOS_ALIASES) and not _contains_any(name, EXCLUDED_MARKERS)


def match_os_only(name: str, os_name: str, arch: str) -> bool:
    """Last resort: any OS-matching asset that is not a checksum or source bundle."""
    return os_name.lower() in name and not _contains_any(name, EXCLUDED_MARKERS)


@dataclass(frozen=True)
class AssetMatcher:
    """One step of the asset fallback chain."""

    description: str
    predicate: AssetPredicate

    def matches(self, asset: Asset, platform_info: PlatformInfo) -> bool:
        return self.predicate(asset.name.lower(), platform_info.os, platform_info.arch)


DEFAULT_MATCHERS: Tuple[AssetMatcher, ...] = (
    AssetMatcher("OS and architecture", match_os_and_arch),
    *(
        AssetMatcher(f"macOS alternative '{alias}'", macos_alias_matcher(alias))
        for alias in MACOS_ALIASES
    ),
    AssetMatcher("architecture alternative 'x86_64'", match_x86_64_alias),
    AssetMatcher("macOS alternative without architecture", match_macos_alias_any_arch),
    AssetMatcher("any binary for OS", match_os_only),
)


def select_asset(
    assets: Sequence[Asset],
    platform_info: PlatformInfo,
    matchers: Sequence[AssetMatcher] = DEFAULT_MATCHERS,
) -> Optional[Tuple[AssetMatcher, Asset]]:
    """Return the first asset accepted by the earliest matcher, or None."""
    for matcher in matchers:
        LOGGER.info(f"Trying {matcher.description} for {platform_info}")
        for asset in assets:
            if matcher.matches(asset, platform_info):
                return matcher, asset
    return None


def no_match_error(platform_info: PlatformInfo) -> NoMatchingAssetError:
    """Error for a release with no usable asset for this platform."""
    message = f"no suitable binary found for {platform_info}"
    if platform_info.os == "darwin" and platform_info.arch == "amd64":
        message += f". Consider building from source: {BUILD_FROM_SOURCE_HINT}"
    return NoMatchingAssetError(message)


class ReleaseResolver:
    """Finds the asset URL for the current platform in the latest release."""

    def __init__(
        self,
        config: LauncherConfig,
        platform_info: Optional[PlatformInfo] = None,
        token_provider: Optional[TokenProvider] = None,
        matchers: Sequence[AssetMatcher] = DEFAULT_MATCHERS,
    ) -> None:
        self._config = config
        self._platform = platform_info or get_platform_info()
        self._token_provider = token_provider
        self._matchers = matchers

    def _request_headers(self) -> Dict[str, str]:
        headers = {
            "User-Agent": self._config.user_agent,
            "Accept": "application/vnd.github+json",
        }

        # A token raises the API rate limit but is not required
        if self._token_provider is not None:
            try:
                token = self._token_provider()
            except CredentialError as e:
                LOGGER.debug(f"Requesting release info anonymously: {e}")
                token = ""
            if token:
                headers["Authorization"] = f"token {token}"

        return headers

    def fetch_release(self) -> ReleaseInfo:
        """Fetch and parse the latest release listing.

        Raises:
            NetworkError: Transport failure or non-200 status.
            ReleaseParseError: Body is not a valid release document.
        """
        url = self._config.release_api_url
        LOGGER.info(f"Requesting latest release info from: {url}")

        with open_url(
            url,
            headers=self._request_headers(),
            timeout=self._config.request_timeout,
            action="get latest release info",
        ) as response:
            try:
                raw = response.read()
            except OSError as e:
                raise NetworkError(f"failed to get latest release info: {e}") from e

        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ReleaseParseError(f"failed to parse release info: {e}") from e

        return ReleaseInfo.from_dict(data)

    def resolve_asset_url(self) -> str:
        """Return the download URL of the best asset for this platform.

        Raises:
            NetworkError: Release listing could not be fetched.
            ReleaseParseError: Release listing is malformed.
            NoMatchingAssetError: No asset fits this OS/architecture.
        """
        release = self.fetch_release()

        LOGGER.info(f"Found release {release.tag_name or '(untagged)'} with {len(release.assets)} assets:")
        for asset in release.assets:
            LOGGER.info(f"  - {asset.name}")

        LOGGER.info(f"Looking for {self._config.binary_name} asset for {self._platform}")
        selected = select_asset(release.assets, self._platform, self._matchers)
        if selected is None:
            raise no_match_error(self._platform)

        matcher, asset = selected
        LOGGER.info(f"Found matching asset ({matcher.description}): {asset.name}")
        return asset.download_url
