"""
Key store backends.
Each backend opens scoped sessions on a token and hands out block ciphers.
"""

from configseal.keystores.base import BlockCipher, KeySession, KeyStore
from configseal.keystores.aes import AesKey
from configseal.keystores.memory import MemoryKeyStore
from configseal.keystores.file import FileKeyStore

__all__ = [
    "BlockCipher",
    "KeySession",
    "KeyStore",
    "AesKey",
    "MemoryKeyStore",
    "FileKeyStore",
]
