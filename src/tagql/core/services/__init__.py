"""Domain services for tagql."""

from tagql.core.services.compiler import (
    OperationFactory,
    OperationTemplate,
    TemplateCompiler,
    TemplateError,
)
from tagql.core.services.dispatcher import Dispatcher, create_dispatcher
from tagql.core.services.interpolation import render

__all__ = [
    "TemplateCompiler",
    "TemplateError",
    "OperationFactory",
    "OperationTemplate",
    "render",
    "Dispatcher",
    "create_dispatcher",
]
