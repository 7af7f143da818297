"""
Lazy Secret-Resolving View
Decrypt wrapped config values at the moment they are read.

A host usually assembles its configuration before it can build the cipher
(the key store may itself be configured from those same sources). So the
view is created with a *provider* of the Envelope, not the Envelope itself,
and asks for it on the first string read:

    config = LayeredConfig([DictSource("app", {"db": {"password": "HCENC(...)"}})])
    provider = LazyProvider(lambda: build_envelope(settings))
    install_decryption(config, provider)

    config.get("db.password")   # -> plaintext

Until the provider can deliver, reads return the raw string. Non-string
values and unwrapped strings pass through untouched.
"""

import logging
import threading
from abc import abstractmethod
from collections.abc import Iterator, Mapping
from typing import Any, Callable, Generic, TypeVar

from configseal.errors import CryptoError, NotReadyError


logger = logging.getLogger(__name__)

T = TypeVar("T")


class LazyProvider(Generic[T]):
    """
    Single-assignment cell filled by a factory on first use.

    The factory runs at most once successfully, even when many threads ask
    at the same time. If it raises, nothing is stored and the next get()
    tries again. Once filled, get() does not take the lock.

    Args:
        factory: Zero-argument callable producing the value.
    """

    def __init__(self, factory: Callable[[], T]):
        self._factory = factory
        self._lock = threading.Lock()
        self._value: T | None = None
        self._resolved = False

    def get(self) -> T:
        # _value is assigned before _resolved, so a reader that sees
        # _resolved also sees a fully built value
        if self._resolved:
            return self._value
        with self._lock:
            if not self._resolved:
                self._value = self._factory()
                self._resolved = True
                logger.debug("Lazy provider resolved")
        return self._value

    @property
    def is_resolved(self) -> bool:
        return self._resolved


class KeyValueSource(Mapping):
    """
    A named, read-only, enumerable key-value source.

    Subclasses implement get() and list_keys(); the Mapping protocol
    (source[key], iteration, len, `in`) is derived from them.
    """

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Value for key, or default if absent."""

    @abstractmethod
    def list_keys(self) -> list[str]:
        """All keys this source holds."""

    def __getitem__(self, key: str) -> Any:
        if key not in self:
            raise KeyError(key)
        return self.get(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.list_keys())

    def __len__(self) -> int:
        return len(self.list_keys())

    def __contains__(self, key) -> bool:
        return key in self.list_keys()

    def __repr__(self):
        return f"{self.__class__.__name__}(name={self.name!r})"


def _flatten(data: dict, parent: str = "") -> dict[str, Any]:
    """{"db": {"user": "x"}} -> {"db.user": "x"}"""
    flat = {}
    for key, value in data.items():
        full_key = f"{parent}.{key}" if parent else str(key)
        if isinstance(value, dict):
            flat.update(_flatten(value, full_key))
        else:
            flat[full_key] = value
    return flat


class DictSource(KeyValueSource):
    """
    Source over a (possibly nested) dict. Nested keys are joined with dots.

    Args:
        name: Source name, unique within a LayeredConfig.
        data: The values.
    """

    def __init__(self, name: str, data: dict):
        super().__init__(name)
        self._data = _flatten(data)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def list_keys(self) -> list[str]:
        return list(self._data)

    def __contains__(self, key) -> bool:
        return key in self._data


class ResolvingSource(KeyValueSource):
    """
    Transparent decorator over a source that decrypts wrapped string values.

    Args:
        delegate: The source to read from.
        provider: Produces the Envelope (anything with get()). May not be
            ready yet; NotReadyError or CryptoError from it means "not yet".
    """

    def __init__(self, delegate: KeyValueSource, provider: LazyProvider):
        super().__init__(delegate.name)
        self.delegate = delegate
        self.provider = provider

    def get(self, key: str, default: Any = None) -> Any:
        value = self.delegate.get(key, default)
        if not isinstance(value, str):
            return value

        try:
            envelope = self.provider.get()
        except (NotReadyError, CryptoError) as e:
            logger.debug("Envelope not available yet (%s), returning raw value for %s", e, key)
            return value

        return envelope.decrypt_if_wrapped(value)

    def list_keys(self) -> list[str]:
        return self.delegate.list_keys()

    def __contains__(self, key) -> bool:
        return key in self.delegate


class LayeredConfig:
    """
    Ordered stack of sources. The first source holding a key wins.

    Args:
        sources: Initial sources, highest precedence first.
    """

    def __init__(self, sources: list[KeyValueSource] = None):
        self._sources: list[KeyValueSource] = []
        self._lock = threading.Lock()
        for source in sources or []:
            self.add_last(source)

    @property
    def sources(self) -> list[KeyValueSource]:
        return list(self._sources)

    def _check_unique(self, name: str):
        if any(s.name == name for s in self._sources):
            raise ValueError(f"A source named '{name}' already exists")

    def add_first(self, source: KeyValueSource):
        with self._lock:
            self._check_unique(source.name)
            self._sources.insert(0, source)

    def add_last(self, source: KeyValueSource):
        with self._lock:
            self._check_unique(source.name)
            self._sources.append(source)

    def replace(self, name: str, source: KeyValueSource):
        """Swap the source called name for another, keeping its position."""
        with self._lock:
            for i, existing in enumerate(self._sources):
                if existing.name == name:
                    self._sources[i] = source
                    return
        raise KeyError(f"No source named '{name}'")

    def get(self, key: str, default: Any = None) -> Any:
        for source in self._sources:
            if key in source:
                return source.get(key)
        return default

    def list_keys(self) -> list[str]:
        seen = {}
        for source in self._sources:
            for key in source.list_keys():
                seen.setdefault(key, None)
        return list(seen)


def install_decryption(config: LayeredConfig, provider: LazyProvider) -> int:
    """
    Wrap every source in config with a ResolvingSource.

    Sources that already are one are skipped, so calling this again after
    a reload or recomposition never double-wraps.

    Returns:
        How many sources were wrapped.
    """
    wrapped = 0
    for source in config.sources:
        if isinstance(source, ResolvingSource):
            continue
        config.replace(source.name, ResolvingSource(source, provider))
        wrapped += 1

    logger.info("Installed decryption on %d config source(s)", wrapped)
    return wrapped
