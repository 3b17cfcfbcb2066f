"""
Signed URL construction for stored files.

URLs have the shape

    <host>/<mount point...>/<token>/<backend>/<segments...>/<id>/<filename>[.<format>]

where the token signs everything after it. Building a URL never contacts the
backend and involves no clock or randomness, so identical inputs always give
an identical URL.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any
from urllib.parse import quote_plus, urlsplit, urlunsplit

from depot.core.exceptions import ConfigurationError
from depot.core.logging import get_logger
from depot.services.storage.registry import BackendRegistry
from depot.services.urls.signer import Signer

if TYPE_CHECKING:
    from depot.services.storage.file import Attacher, StoredFile

logger = get_logger(__name__)

Prefix = str | Sequence[str]


def join_path(*segments: str) -> str:
    """
    Join path segments with exactly one slash between each pair.

    A leading empty segment produces an absolute path.
    """
    if not segments:
        return ""

    path = segments[0]
    for segment in segments[1:]:
        path = path.rstrip("/") + "/" + segment.lstrip("/")
    return path


def escape_filename(filename: str) -> str:
    """
    Form-encode a filename for use as a path segment.

    Spaces become "+". Only letters, digits and "*-._" are left bare.
    """
    return quote_plus(filename, safe="*").replace("~", "%7E")


def _prefix_segments(prefix: Prefix) -> list[str]:
    if isinstance(prefix, str):
        return [prefix] if prefix else []
    return [str(segment) for segment in prefix]


class UrlBuilder:
    """Builds signed, deterministic URLs for stored files."""

    def __init__(
        self,
        registry: BackendRegistry,
        signer: Signer,
        host: str | None = None,
        mount_point: Prefix | None = None,
    ) -> None:
        """
        Initialize the URL builder.

        Args:
            registry: Registry used to look up the name of a file's backend.
            signer: Signer producing the path token.
            host: Default host, used when a call does not pass one.
            mount_point: Default path prefix, used when a call does not pass one.
        """
        self.registry = registry
        self.signer = signer
        self.host = host
        self.mount_point = mount_point

    def _resolve_host(self, host: str | None) -> tuple[str, str]:
        host = host if host is not None else self.host
        if not host:
            raise ConfigurationError(
                message="No host given and no default host configured",
                details={"setting": "host"},
            )

        parts = urlsplit(host)
        if not parts.scheme or not parts.netloc:
            raise ConfigurationError(
                message=f"Host must include a scheme and network location: {host}",
                details={"host": host},
            )
        return parts.scheme, parts.netloc

    def _resolve_prefix(self, prefix: Prefix | None) -> list[str]:
        prefix = prefix if prefix is not None else self.mount_point
        if prefix is None:
            raise ConfigurationError(
                message="No prefix given and no default mount point configured",
                details={"setting": "mount_point"},
            )
        return _prefix_segments(prefix)

    def build(
        self,
        file: "StoredFile",
        *segments: Any,
        prefix: Prefix | None = None,
        filename: str | None = None,
        format: str | None = None,
        host: str | None = None,
        attacher: "Attacher | None" = None,
    ) -> str:
        """
        Build a signed URL for a file.

        Args:
            file: The file to link to.
            *segments: Extra path segments placed between the backend name
                and the file id.
            prefix: Path prefix; defaults to the configured mount point.
            filename: Filename for the last segment; defaults to the
                attacher's basename, then the file id.
            format: Extension appended to the filename; defaults to the
                attacher's extension.
            host: Host for the URL; defaults to the configured host.
            attacher: Source of filename defaults; defaults to the file's own.

        Returns:
            Fully qualified URL.

        Raises:
            ConfigurationError: If no host or prefix can be resolved.
            BackendNotRegisteredError: If the file's backend has no name.
        """
        scheme, netloc = self._resolve_host(host)
        prefix_segments = self._resolve_prefix(prefix)

        if attacher is None:
            attacher = getattr(file, "attacher", None)

        if filename is None:
            filename = getattr(attacher, "basename", None)
        if filename is None:
            filename = str(file.id)
        if format is None:
            format = getattr(attacher, "extension", None)

        backend_name = self.registry.name_for(file.backend)

        filename = escape_filename(filename)
        if format is not None:
            filename = f"{filename}.{format}"

        base_path = join_path(
            "",
            backend_name,
            *(str(segment) for segment in segments),
            str(file.id),
            filename,
        )
        token = self.signer.sign(base_path)
        path = join_path("", *prefix_segments, token, base_path)

        logger.debug("url_built", backend=backend_name, id=file.id)
        return urlunsplit((scheme, netloc, path, "", ""))

    def verify(self, url: str, prefix: Prefix | None = None) -> bool:
        """
        Check the token embedded in a URL or URL path.

        Args:
            url: A URL, or just its path, as produced by build().
            prefix: Path prefix the URL was built with; defaults to the
                configured mount point.

        Returns:
            True if the token matches the rest of the path.
        """
        path = urlsplit(url).path
        parts = path.lstrip("/").split("/")

        for segment in self._resolve_prefix(prefix):
            expected = segment.strip("/").split("/")
            if parts[: len(expected)] != expected:
                return False
            parts = parts[len(expected):]

        if len(parts) < 2:
            return False

        token, rest = parts[0], parts[1:]
        return self.signer.verify(join_path("", *rest), token)
