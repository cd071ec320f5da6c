# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package oauth implements the OAuth2 authorization-code flow for Passless.

This package provides:
- Authorization URL building per provider
- Code-for-token exchange and profile fetch over aiohttp
- A provider registry (google, yandex)
"""

from .types import OAuthTokenResponse, OAuthResult
from .client import OAuthHTTPClient
from .providers import (
    OAuthProvider,
    GoogleProvider,
    YandexProvider,
    register_provider,
    get_provider_class,
    supported_providers,
)

__all__ = [
    'OAuthTokenResponse',
    'OAuthResult',
    'OAuthHTTPClient',
    'OAuthProvider',
    'GoogleProvider',
    'YandexProvider',
    'register_provider',
    'get_provider_class',
    'supported_providers',
]
