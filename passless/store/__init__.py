# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Package store provides the key-value storage used for passkey records.

This package includes:
- KeyValueStore, the async get/set/delete/values interface
- MemoryStore for development and testing
- RedisStore for deployments sharing records between processes
"""

from .types import KeyValueStore
from .memory import MemoryStore
from .redis_store import RedisStore

__all__ = [
    'KeyValueStore',
    'MemoryStore',
    'RedisStore',
]
