"""
URL builder factory.

Creates the signer and URL builder from application settings.
"""

from depot.core.config import Settings, get_settings
from depot.services.storage.factory import get_backend_registry
from depot.services.urls.builder import UrlBuilder
from depot.services.urls.signer import HmacSigner, Signer

# Singleton instance
_url_builder: UrlBuilder | None = None


def create_signer(settings: Settings | None = None) -> Signer:
    """Create a signer keyed by the configured secret."""
    if settings is None:
        settings = get_settings()

    return HmacSigner(settings.secret_key, digest=settings.signing_digest)


def get_url_builder(settings: Settings | None = None) -> UrlBuilder:
    """
    Get the configured URL builder.

    The builder resolves backend names through the default backend registry
    and falls back to the configured host and mount point.

    Args:
        settings: Application settings. Uses default if None.

    Returns:
        Configured UrlBuilder instance.
    """
    global _url_builder

    if _url_builder is not None:
        return _url_builder

    if settings is None:
        settings = get_settings()

    _url_builder = UrlBuilder(
        registry=get_backend_registry(settings),
        signer=create_signer(settings),
        host=settings.host,
        mount_point=settings.mount_point,
    )
    return _url_builder


def reset_url_builder() -> None:
    """Reset the URL builder singleton (for testing)."""
    global _url_builder
    _url_builder = None
