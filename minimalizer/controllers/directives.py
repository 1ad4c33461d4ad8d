"""
Resource references and the response decisions made about them
"""
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple, Union

from minimalizer.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class Single:
    """A bare resource: the subject is the reference itself"""
    ref: Any

    @property
    def parts(self) -> Tuple[Any, ...]:
        return (self.ref,)

    @property
    def subject(self) -> Any:
        return self.ref

    @property
    def prefix(self) -> Tuple[Any, ...]:
        return ()


@dataclass(frozen=True)
class Chain:
    """An ordered path of namespaces and parents ending at the subject

    ``("admin", post, comment)`` has ``comment`` as its subject and
    ``("admin", post)`` as its prefix.
    """
    refs: Tuple[Any, ...]

    @property
    def parts(self) -> Tuple[Any, ...]:
        return self.refs

    @property
    def _subject_index(self) -> int:
        for index in range(len(self.refs) - 1, -1, -1):
            if not isinstance(self.refs[index], str):
                return index
        raise ConfigurationError(f"Resource chain {self.refs!r} has no resource in it")

    @property
    def subject(self) -> Any:
        return self.refs[self._subject_index]

    @property
    def prefix(self) -> Tuple[Any, ...]:
        return self.refs[:self._subject_index]


ResourceRef = Union[Single, Chain]


def resolve(value: Any) -> ResourceRef:
    """Turn a controller argument into a Single or Chain reference"""
    if isinstance(value, (Single, Chain)):
        return value
    if isinstance(value, (list, tuple)):
        return Chain(tuple(value))
    return Single(value)


@dataclass(frozen=True)
class Redirect:
    location: str
    message: Optional[str] = None
    status_code: int = 302


@dataclass(frozen=True)
class Render:
    template: str
    status_code: int = 200
    message: Optional[str] = None


Directive = Union[Redirect, Render]


def _is_url(value: str) -> bool:
    return value.startswith("/") or "://" in value


def polymorphic_path(location: Any) -> str:
    """Build a path from a string, a resource or a resource chain

    Strings are literal segments (namespaces or collection names), records
    contribute ``<plural>/<id>`` (just ``<plural>`` while unsaved), and
    collections or model classes contribute ``<plural>``.
    """
    if isinstance(location, str) and _is_url(location):
        return location

    segments = []
    for part in resolve(location).parts:
        if isinstance(part, str):
            segments.append(part.strip("/"))
        elif isinstance(part, type) and hasattr(part, "model_name"):
            segments.append(part.model_name.route_key)
        elif hasattr(part, "to_param") and hasattr(part, "model_name"):
            segments.append(type(part).model_name.route_key)
            param = part.to_param()
            if param is not None:
                segments.append(param)
        elif hasattr(part, "model_name") and hasattr(part, "records"):
            model_name = part.model_name
            if model_name is None:
                raise ConfigurationError("Cannot build a path for an empty, untyped collection")
            segments.append(model_name.route_key)
        else:
            raise ConfigurationError(f"Cannot build a path from {part!r}")

    return "/" + "/".join(segment for segment in segments if segment)


def plural_root(prefix: Sequence[Any], model_class: type) -> list:
    """The collection location for a subject: its prefix plus its plural name"""
    return list(prefix) + [model_class.model_name.plural]
