# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Utility package with configuration and encoding helpers for Passless.
"""

from .config import get_config_value, normalize_config_key, load_config_file
from .encoding import url_safe_encode, url_safe_decode, decode_client_data

__all__ = [
    'get_config_value',
    'normalize_config_key',
    'load_config_file',
    'url_safe_encode',
    'url_safe_decode',
    'decode_client_data',
]
