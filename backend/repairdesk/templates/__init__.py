"""
Notification Templates Package

Locale catalogs and the renderer for in-app notification text.
"""
from .notification_templates import (
    NOTIFICATION_TEMPLATES,
    TemplateRenderer,
    get_template_key,
    build_template_params,
    interpolate
)

__all__ = [
    "NOTIFICATION_TEMPLATES",
    "TemplateRenderer",
    "get_template_key",
    "build_template_params",
    "interpolate"
]
