"""
Per-request controller object wrapping a Starlette request
"""
import re
from typing import Any, Dict, List, Mapping, Optional

from fastapi import Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
from starlette.responses import Response

from minimalizer.controllers.directives import Directive, polymorphic_path
from minimalizer.core.config import get_settings
from minimalizer.core.database import get_db
from minimalizer.core.flash import Flash
from minimalizer.core.i18n import get_translator
from minimalizer.core.logging_config import LoggingConfig
from minimalizer.core.templates import render_template

logger = LoggingConfig.get_logger(__name__)


def _default_controller_path(class_name: str) -> str:
    name = re.sub(r"Controller$", "", class_name) or class_name
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


class BaseController:
    """State for one action: request, flash, session and the emitted response

    Subclasses set ``controller_path`` (e.g. ``"admin/comments"``) when the
    default derived from the class name does not match their templates and
    translations.
    """

    controller_path: Optional[str] = None

    def __init__(self, request: Request, action_name: str, db: Optional[Session] = None):
        self.request = request
        self.action_name = action_name
        self.db = db
        self.flash = Flash.from_request(request)
        self.response: Optional[Response] = None
        self.directive: Optional[Directive] = None
        self.resource: Any = None
        if self.controller_path is None:
            self.controller_path = _default_controller_path(type(self).__name__)

    @classmethod
    def for_action(cls, action_name: str):
        """FastAPI dependency that builds the controller for a route"""
        def dependency(request: Request, db: Session = Depends(get_db)):
            return cls(request, action_name, db=db)
        dependency.__name__ = f"{cls.__name__}_{action_name}"
        return dependency

    def local_translation_scope(self) -> str:
        parts: List[str] = [p for p in (self.controller_path or "").split("/") if p]
        parts.append(self.action_name)
        return ".".join(part for part in parts if part)

    def translate(self, key: str, values: Optional[Mapping[str, Any]] = None) -> str:
        """Translate; keys starting with "." are relative to this action"""
        if key.startswith("."):
            return get_translator().translate(key[1:], values, scope=self.local_translation_scope())
        return get_translator().translate(key, values)

    def t(self, key: str, **values) -> str:
        return self.translate(key, values)

    def template_path(self, template: str) -> str:
        """Qualify a view name with the controller path and template suffix"""
        name = template if "/" in template else f"{self.controller_path}/{template}"
        if "." not in name.rsplit("/", 1)[-1]:
            name = f"{name}{get_settings().template_suffix}"
        return name

    def url_for(self, location: Any) -> str:
        return polymorphic_path(location)

    def template_context(self) -> Dict[str, Any]:
        return {"controller": self, "resource": self.resource}

    def render(self, template: str, status_code: int = 200, **context) -> Response:
        name = self.template_path(template)
        self.response = render_template(
            name,
            {**self.template_context(), **context},
            self.request,
            status_code=status_code,
        )
        return self.response

    def redirect_to(self, location: Any, status_code: Optional[int] = None) -> Response:
        url = self.url_for(location)
        self.response = RedirectResponse(url, status_code=status_code or get_settings().redirect_status_code)
        return self.response
