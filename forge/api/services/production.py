"""
Production log and asset vault.

Both registries belong to one explicitly constructed `Production` object.
`get_production()` hands out the process-wide instance.
"""
import itertools
import logging
import random
import string
import threading
import time
from collections import deque
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..models.models import AssetRecord

logger = logging.getLogger(__name__)

LOG_CAPACITY = 200

_ID_ALPHABET = string.digits + string.ascii_lowercase

LogObserver = Callable[[List[str]], Any]
AssetObserver = Callable[[List[AssetRecord]], Any]


class Subscription:
    """Handle returned by subscribe(). Calling it (or cancel()) detaches the observer."""

    def __init__(self, registry: Optional["ObserverRegistry"] = None, handle: Optional[int] = None):
        self._registry = registry
        self._handle = handle

    @property
    def active(self) -> bool:
        return self._registry is not None and self._registry.is_registered(self._handle)

    def cancel(self) -> None:
        if self._registry is not None:
            self._registry.remove(self._handle)

    def __call__(self) -> None:
        self.cancel()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.cancel()
        return False


class ObserverRegistry:
    """Handle -> callback mapping, iterated in registration order."""

    def __init__(self):
        self._observers: Dict[int, Callable] = {}
        self._handles = itertools.count(1)
        self._lock = threading.RLock()

    def add(self, observer: Callable) -> int:
        with self._lock:
            for handle, registered in self._observers.items():
                if registered is observer:
                    return handle
            handle = next(self._handles)
            self._observers[handle] = observer
            return handle

    def remove(self, handle: Optional[int]) -> None:
        with self._lock:
            self._observers.pop(handle, None)

    def is_registered(self, handle: Optional[int]) -> bool:
        with self._lock:
            return handle in self._observers

    def snapshot(self) -> List[Callable]:
        with self._lock:
            return list(self._observers.values())

    def __len__(self) -> int:
        return len(self._observers)


class LogStore:
    def __init__(self, capacity: int = LOG_CAPACITY, clock: Callable[[], datetime] = datetime.now):
        # never above LOG_CAPACITY, never below one entry
        self._entries: deque = deque(maxlen=max(1, min(capacity, LOG_CAPACITY)))
        self._clock = clock
        self._lock = threading.RLock()
        self.observers = ObserverRegistry()

    def _format(self, message: str) -> str:
        # %X is the locale's time representation
        return f"[{self._clock().strftime('%X')}] {message}"

    def push(self, message: str) -> None:
        entry = self._format(message)
        with self._lock:
            self._entries.appendleft(entry)
            entries = list(self._entries)
            observers = self.observers.snapshot()
        for observer in observers:
            observer(list(entries))

    def subscribe(self, observer: LogObserver) -> Subscription:
        handle = self.observers.add(observer)
        observer(self.snapshot())
        return Subscription(self.observers, handle)

    def snapshot(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


class AssetVault:
    def __init__(self, now_ms: Callable[[], int] = lambda: int(time.time() * 1000)):
        self._assets: List[AssetRecord] = []
        self._ids: set = set()
        self._now_ms = now_ms
        self._lock = threading.RLock()

    def _new_id(self, timestamp: int) -> str:
        while True:
            suffix = "".join(random.choices(_ID_ALPHABET, k=5))
            asset_id = f"ASSET-{timestamp}-{suffix}"
            if asset_id not in self._ids:
                return asset_id

    def save(
        self,
        type: str,
        title: str,
        data: str,
        module: str,
        lead_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> AssetRecord:
        timestamp = self._now_ms()
        with self._lock:
            asset = AssetRecord(
                id=self._new_id(timestamp),
                type=type,
                title=title,
                data=data,
                module=module,
                timestamp=timestamp,
                lead_id=lead_id,
                metadata=metadata,
            )
            self._assets.append(asset)
            self._ids.add(asset.id)
        return asset.model_copy(deep=True)

    def subscribe(self, observer: AssetObserver) -> Subscription:
        # one-shot: later saves are not pushed to the observer
        observer(self.snapshot())
        return Subscription()

    def delete(self, asset_id: str) -> bool:
        with self._lock:
            for i, asset in enumerate(self._assets):
                if asset.id == asset_id:
                    del self._assets[i]
                    self._ids.discard(asset_id)
                    return True
        return False

    def clear(self) -> None:
        with self._lock:
            self._assets.clear()
            self._ids.clear()

    def import_records(self, records: Iterable[Any]) -> int:
        """Append validated records whose id is not already in the vault. Returns the count added."""
        incoming = [r if isinstance(r, AssetRecord) else AssetRecord.model_validate(r) for r in records]
        added = 0
        with self._lock:
            for record in incoming:
                if record.id in self._ids:
                    continue
                self._assets.append(record.model_copy(deep=True))
                self._ids.add(record.id)
                added += 1
        return added

    def get(self, asset_id: str) -> Optional[AssetRecord]:
        with self._lock:
            for asset in self._assets:
                if asset.id == asset_id:
                    return asset.model_copy(deep=True)
        return None

    def snapshot(self) -> List[AssetRecord]:
        with self._lock:
            return [a.model_copy(deep=True) for a in self._assets]

    def __len__(self) -> int:
        return len(self._assets)


class Production:
    """Owns the production log and the asset vault for one process or session."""

    def __init__(self, log_store: Optional[LogStore] = None, vault: Optional[AssetVault] = None):
        self.log_store = log_store or LogStore()
        self.vault = vault or AssetVault()

    def push_log(self, message: str) -> None:
        self.log_store.push(message)

    def subscribe_to_logs(self, observer: LogObserver) -> Subscription:
        return self.log_store.subscribe(observer)

    def logs(self) -> List[str]:
        return self.log_store.snapshot()

    def save_asset(
        self,
        type: str,
        title: str,
        data: str,
        module: str,
        lead_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> AssetRecord:
        asset = self.vault.save(type, title, data, module, lead_id=lead_id, metadata=metadata)
        logger.debug("asset saved id=%s type=%s module=%s", asset.id, asset.type, module)
        return asset

    def subscribe_to_assets(self, observer: AssetObserver) -> Subscription:
        return self.vault.subscribe(observer)

    def assets(self) -> List[AssetRecord]:
        return self.vault.snapshot()

    def delete_asset(self, asset_id: str) -> bool:
        return self.vault.delete(asset_id)

    def clear_vault(self) -> None:
        self.vault.clear()

    def import_vault(self, records: Iterable[Any]) -> int:
        return self.vault.import_records(records)


_production: Optional[Production] = None
_production_lock = threading.Lock()


def get_production() -> Production:
    global _production
    if _production is None:
        with _production_lock:
            if _production is None:
                _production = Production()
    return _production
