"""
Encoding helpers shared by the passkey package.
"""

import base64
import binascii
import json
from typing import Any, Dict, Union


def url_safe_encode(data: Union[str, bytes]) -> str:
    """Encode data to unpadded URL-safe base64 string."""
    if isinstance(data, str):
        data = data.encode('utf-8')

    return base64.urlsafe_b64encode(data).decode('ascii').rstrip('=')


def url_safe_decode(encoded: str) -> bytes:
    """Decode URL-safe base64 string to bytes."""
    # Add padding if needed
    padding = 4 - (len(encoded) % 4)
    if padding != 4:
        encoded += '=' * padding

    try:
        return base64.urlsafe_b64decode(encoded)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid URL-safe base64 data: {e}")


def decode_client_data(client_data_json: str) -> Dict[str, Any]:
    """Decode a base64url ``clientDataJSON`` value into a dictionary."""
    try:
        data = json.loads(url_safe_decode(client_data_json))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValueError(f"Invalid clientDataJSON: {e}")
    if not isinstance(data, dict):
        raise ValueError("Invalid clientDataJSON: not a JSON object")
    return data
