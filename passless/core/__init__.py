# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package core provides configuration and the Passless facade.
"""

from .config import (
    Config,
    OAuthClientConfig,
    GoogleConfig,
    YandexConfig,
    PasskeyConfig,
    HTTPConfig,
)
from .passless import Passless, create_passless

__all__ = [
    'Config',
    'OAuthClientConfig',
    'GoogleConfig',
    'YandexConfig',
    'PasskeyConfig',
    'HTTPConfig',
    'Passless',
    'create_passless',
]
