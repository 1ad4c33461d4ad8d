"""
Template rendering utilities
"""
from functools import lru_cache

from fastapi import Request
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateNotFound

from minimalizer.core.config import get_settings
from minimalizer.core.flash import Flash
from minimalizer.core.i18n import get_translator


@lru_cache()
def get_templates() -> Jinja2Templates:
    """Get cached FastAPI templates instance for the configured directory"""
    settings = get_settings()
    templates = Jinja2Templates(directory=str(settings.templates_path))
    templates.env.globals["t"] = get_translator().t
    return templates


def template_exists(template_name: str) -> bool:
    """Check whether the loader can find a template"""
    env = get_templates().env
    try:
        env.loader.get_source(env, template_name)
    except TemplateNotFound:
        return False
    return True


def render_template(template_name: str, context: dict, request: Request, status_code: int = 200):
    """Render template with the request flash in its context"""
    return get_templates().TemplateResponse(
        request,
        template_name,
        {"flash": Flash.from_request(request), **context},
        status_code=status_code,
    )
