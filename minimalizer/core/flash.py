"""
Flash messages stored in the Starlette session

Messages assigned through :class:`Flash` survive exactly one redirect: they
are written to the session and become the incoming messages of the next
request. Messages assigned through ``flash.now`` are only visible while the
current response is rendered.
"""
from typing import Any, Dict, Iterator, MutableMapping, Optional

FLASH_SESSION_KEY = "_flash"


class FlashNow:
    """Messages for the current request only"""

    def __init__(self, flash: "Flash"):
        object.__setattr__(self, "_flash", flash)

    def __setitem__(self, key: str, value: Any):
        self._flash._set_now(key, value)

    def __getitem__(self, key: str) -> Any:
        return self._flash[key]

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._flash.get(name)

    def __setattr__(self, name: str, value: Any):
        self[name] = value


class Flash:
    """Request flash backed by a session mapping"""

    def __init__(self, session: Optional[MutableMapping[str, Any]] = None):
        session = {} if session is None else session
        incoming = session.pop(FLASH_SESSION_KEY, None) or {}
        object.__setattr__(self, "_session", session)
        object.__setattr__(self, "_incoming", dict(incoming))
        object.__setattr__(self, "_outgoing", {})
        object.__setattr__(self, "_now", {})
        object.__setattr__(self, "now", FlashNow(self))

    @classmethod
    def from_request(cls, request) -> "Flash":
        """Reuse the flash attached to a request, creating it on first use"""
        flash = getattr(request.state, "flash", None)
        if flash is None:
            session = request.session if "session" in request.scope else None
            flash = cls(session)
            request.state.flash = flash
        return flash

    # Persisted messages
    def __setitem__(self, key: str, value: Any):
        self._now.pop(key, None)
        if value is None:
            self._outgoing.pop(key, None)
            self._incoming.pop(key, None)
        else:
            self._outgoing[key] = value
        self._write_session()

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self.get(name)

    def __setattr__(self, name: str, value: Any):
        self[name] = value

    def __contains__(self, key: str) -> bool:
        return key in self.to_dict()

    def __iter__(self) -> Iterator[str]:
        return iter(self.to_dict())

    def __len__(self) -> int:
        return len(self.to_dict())

    def get(self, key: str, default: Any = None) -> Any:
        for layer in (self._now, self._outgoing, self._incoming):
            if key in layer:
                return layer[key]
        return default

    def keys(self):
        return self.to_dict().keys()

    def items(self):
        return self.to_dict().items()

    def to_dict(self) -> Dict[str, Any]:
        merged = dict(self._incoming)
        merged.update(self._outgoing)
        merged.update(self._now)
        return merged

    def discard(self, key: Optional[str] = None):
        """Stop a message (or all) from reaching the next request"""
        if key is None:
            self._outgoing.clear()
        else:
            self._outgoing.pop(key, None)
        self._write_session()

    def keep(self, key: Optional[str] = None):
        """Carry incoming messages (or one) over to the next request"""
        if key is None:
            for name, value in self._incoming.items():
                self._outgoing.setdefault(name, value)
        elif key in self._incoming:
            self._outgoing.setdefault(key, self._incoming[key])
        self._write_session()

    def _set_now(self, key: str, value: Any):
        if value is None:
            self._now.pop(key, None)
        else:
            self._now[key] = value

    def _write_session(self):
        if self._outgoing:
            self._session[FLASH_SESSION_KEY] = dict(self._outgoing)
        else:
            self._session.pop(FLASH_SESSION_KEY, None)

    def __repr__(self):
        return f"<Flash {self.to_dict()!r}>"
