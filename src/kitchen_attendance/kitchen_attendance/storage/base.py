from __future__ import annotations

from typing import Optional, Protocol


class KeyValueStorage(Protocol):
    """Port for the kiosk's local key-value storage.

    Values are opaque strings (JSON documents for collections), mirroring the
    browser local storage of the kiosk web page.
    """

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError
