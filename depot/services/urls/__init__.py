"""Signed, deterministic download URLs for stored files."""

from depot.services.urls.builder import UrlBuilder
from depot.services.urls.factory import get_url_builder
from depot.services.urls.signer import HmacSigner, Signer

__all__ = ["HmacSigner", "Signer", "UrlBuilder", "get_url_builder"]
