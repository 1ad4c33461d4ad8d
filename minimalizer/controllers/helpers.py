"""
Flash and redirect boilerplate for CRUD actions
"""
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Union

from sqlalchemy.orm import object_session
from starlette.responses import Response

from minimalizer.controllers.directives import Redirect, Render, plural_root, resolve
from minimalizer.core.config import get_settings
from minimalizer.core.exceptions import ConfigurationError
from minimalizer.core.logging_config import LoggingConfig
from minimalizer.core.templates import template_exists

logger = LoggingConfig.get_logger(__name__)

# Conventional view re-rendered when an action's save fails
DEFAULT_TEMPLATES = {
    "create": "new",
    "update": "edit",
    "destroy": "delete",
}

Callbacks = Union[str, Callable, Iterable[Union[str, Callable]], None]
Prepare = Callable[[Any, dict], None]


class ControllerHelpers:
    """Mixin for controllers; expects the attributes of ``BaseController``"""

    @classmethod
    def new_actions(cls) -> List[str]:
        """Actions that build a new record

            if controller.action_name in controller.new_actions():
                controller.resource = Post()
        """
        return ["new", "create"]

    @classmethod
    def member_actions(cls) -> List[str]:
        """Actions that load an existing record"""
        return ["show", "edit", "update", "delete", "destroy"]

    def respond_to_boolean(
        self,
        condition: Any,
        location: Any = None,
        template: Optional[str] = None,
        redirect: Any = False,
        on_succeed: Callbacks = (),
        on_fail: Callbacks = (),
        notice: Any = True,
        alert: Any = True,
    ) -> Optional[Response]:
        """Respond to a boolean condition.

        If the condition is truthful, set the notice flash and redirect to
        ``location`` when one is given.

        If it is not, set the alert flash for the current render and render
        ``template`` or the conventional view for the action (create renders
        "new", update renders "edit", destroy renders "delete") with status
        422. Other actions render the view named after the action. Pass
        ``redirect`` to redirect there instead, or ``redirect=True`` to
        redirect to ``location``.

        ``notice`` and ``alert`` default to the translations of ".notice" and
        ".alert" under the action scope. Pass a string to use it directly, a
        mapping to use it as the translation values (``_html=True`` selects
        the "_html" key), or a false value to skip the message.

        ``on_succeed`` and ``on_fail`` name controller methods (or are
        callables) run after the response is decided.
        """
        settings = get_settings()

        if condition:
            message = self.translate_key("notice", notice)
            self.flash.notice = message
            self.response = None
            if location is not None:
                self.redirect_to(location)
                self.directive = Redirect(self.url_for(location), message, settings.redirect_status_code)
            logger.debug(
                f"{self.controller_path}#{self.action_name} succeeded",
                extra={"location": self._response_location()}
            )
            self._run_callbacks(on_succeed)
            return self.response

        if redirect:
            message = self.translate_key("alert", alert)
            self.flash.alert = message
            if redirect is not True:
                location = redirect
            self.response = None
            if location is not None:
                self.redirect_to(location)
                self.directive = Redirect(self.url_for(location), message, settings.redirect_status_code)
            logger.debug(
                f"{self.controller_path}#{self.action_name} failed, redirecting",
                extra={"location": self._response_location()}
            )
        else:
            message = self.translate_key("alert", alert)
            self.flash.now.alert = message
            template = template or self.default_template()
            self.render(template, status_code=settings.failure_status_code)
            self.directive = Render(self.template_path(template), settings.failure_status_code, message)
            logger.debug(
                f"{self.controller_path}#{self.action_name} failed, rendering {template}",
                extra={"status_code": settings.failure_status_code}
            )

        self._run_callbacks(on_fail)
        return self.response

    def respond_to_resource(
        self,
        resource_chain: Any,
        method: str,
        arguments: Any = None,
        prepare: Optional[Prepare] = None,
        **options,
    ) -> Optional[Response]:
        """Respond to the boolean result of a model's method.

        The model is the subject of the resource chain; unless ``location``
        is given the chain itself is the redirect location.

            controller.respond_to_resource(("admin", post), "update", {"title": "New"})

        ``prepare(model, options)`` runs before the method and may adjust
        the model or the options. See ``respond_to_boolean`` for the options.
        """
        model = resolve(resource_chain).subject
        self.resource = model

        if prepare is not None:
            prepare(model, options)

        if options.get("location") is None:
            options["location"] = resource_chain

        operation = getattr(model, method)
        if arguments is None:
            outcome = operation()
        elif isinstance(arguments, tuple):
            outcome = operation(*arguments)
        else:
            outcome = operation(arguments)

        if not outcome:
            errors = getattr(model, "errors", None)
            logger.info(
                f"{type(model).__name__}.{method} failed in {self.controller_path}#{self.action_name}",
                extra={"fields": list(errors) if errors is not None else []}
            )

        return self.respond_to_boolean(outcome, **options)

    def create_resource(
        self,
        resource_chain: Any,
        attributes: Optional[Mapping[str, Any]],
        context: Optional[str] = None,
        **options,
    ) -> Optional[Response]:
        """Assign attributes to a new model and save it under ``context``"""
        extra_prepare = options.pop("prepare", None)

        def prepare(model, opts):
            model.assign_attributes(attributes)
            if self.db is not None and object_session(model) is None:
                self.db.add(model)
            if extra_prepare is not None:
                extra_prepare(model, opts)

        return self.respond_to_resource(resource_chain, "save", (context,), prepare=prepare, **options)

    def update_resource(self, resource_chain: Any, attributes: Mapping[str, Any], **options) -> Optional[Response]:
        return self.respond_to_resource(resource_chain, "update", dict(attributes), **options)

    def destroy_resource(self, resource_chain: Any, **options) -> Optional[Response]:
        """Destroy a model and redirect to its collection.

        When the action has no "delete" view to re-render, a failure
        redirects back to the resource with the alert.
        """
        ref = resolve(resource_chain)
        extra_prepare = options.pop("prepare", None)

        def prepare(model, opts):
            if opts.get("location") is None:
                opts["location"] = plural_root(ref.prefix, type(model))
            self._redirect_without_view(opts, list(ref.parts))
            if extra_prepare is not None:
                extra_prepare(model, opts)

        return self.respond_to_resource(resource_chain, "destroy", prepare=prepare, **options)

    def enable_resource(self, resource_chain: Any, attribute: str, **options) -> Optional[Response]:
        """Set a boolean attribute to True; redirects whether or not it saved"""
        options.setdefault("redirect", True)
        return self.respond_to_resource(resource_chain, "update", {attribute: True}, **options)

    def disable_resource(self, resource_chain: Any, attribute: str, **options) -> Optional[Response]:
        """Set a boolean attribute to False; redirects whether or not it saved"""
        options.setdefault("redirect", True)
        return self.respond_to_resource(resource_chain, "update", {attribute: False}, **options)

    def mass_update_resources(
        self,
        resources_chain: Any,
        attributes: Mapping[Any, Mapping[str, Any]],
        permit: Optional[Sequence[str]] = None,
        **options,
    ) -> Optional[Response]:
        """Update several records of a collection at once.

        ``attributes`` maps record ids to attribute mappings; ``permit``
        limits each mapping to the listed names. Succeeds only when every
        record saves. Without ``location`` the redirect goes to the plural
        root of the collection, which needs at least one record. A failure
        renders the action view when it exists and redirects otherwise.
        """
        ref = resolve(resources_chain)
        ids = list(attributes.keys())
        values = [dict(value) for value in attributes.values()]
        if permit is not None:
            allowed = set(permit)
            values = [{k: v for k, v in value.items() if k in allowed} for value in values]

        def prepare(models, opts):
            if opts.get("location") is None:
                first = models.first()
                if first is None:
                    raise ConfigurationError(
                        "Cannot derive a redirect location from an empty collection; pass location="
                    )
                opts["location"] = plural_root(ref.prefix, type(first))
            self._redirect_without_view(opts, True)

        return self.respond_to_resource(resources_chain, "update", (ids, values), prepare=prepare, **options)

    def reorder_resources(
        self,
        resources_chain: Any,
        ids: Sequence[Any],
        attribute: str = "position",
        start: int = 1,
        **options,
    ) -> Optional[Response]:
        """Store each record's index in ``ids`` into ``attribute``"""
        attributes = {
            record_id: {attribute: index}
            for index, record_id in enumerate(ids, start=start)
        }
        return self.mass_update_resources(resources_chain, attributes, **options)

    def translate_key(self, key: str, value: Any) -> Optional[str]:
        """Message for a flash key: literal strings pass through, mappings
        become translation values and other true values use the plain
        ".key" translation.
        """
        if isinstance(value, str):
            return value
        if isinstance(value, Mapping):
            values = dict(value)
            html = values.pop("_html", False)
            return self.translate(f".{key}{'_html' if html else ''}", values)
        if value:
            return self.t(f".{key}")
        return None

    def default_template(self) -> str:
        """View re-rendered when the current action fails"""
        return DEFAULT_TEMPLATES.get(self.action_name, self.action_name)

    def _redirect_without_view(self, opts: dict, redirect: Any):
        if opts.get("template") or opts.get("redirect"):
            return
        if not template_exists(self.template_path(self.default_template())):
            opts["redirect"] = redirect

    def _response_location(self) -> Optional[str]:
        if self.response is None:
            return None
        return self.response.headers.get("location")

    def _run_callbacks(self, callbacks: Callbacks):
        if callbacks is None:
            return
        if isinstance(callbacks, str) or callable(callbacks):
            callbacks = [callbacks]
        for callback in callbacks:
            if callable(callback):
                callback()
                continue
            method = getattr(self, callback, None)
            if method is None or not callable(method):
                raise ConfigurationError(f"{type(self).__name__} has no callback method '{callback}'")
            method()
