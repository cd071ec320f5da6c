# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package passkey handles WebAuthn registration and authentication ceremonies.

Cryptographic work is delegated to the webauthn library; this package keeps
challenge and credential records.
"""

from webauthn import options_to_json

from .types import (
    ChallengeRecord,
    CredentialRecord,
    RegistrationVerification,
    AuthenticationVerification,
)
from .manager import PasskeyManager

__all__ = [
    'ChallengeRecord',
    'CredentialRecord',
    'RegistrationVerification',
    'AuthenticationVerification',
    'PasskeyManager',
    'options_to_json',
]
