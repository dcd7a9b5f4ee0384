from ._api.openapi import (
    OpenApi,
    Info,
    Components,
    Reference,
    ReferenceOr,
    is_reference,
    as_item,
    Callback,
    Example,
    Header,
    Link,
    MediaType,
    Operation,
    Parameter,
    ParameterLocation,
    PathItem,
    RequestBody,
    Response,
    Responses,
    Schema,
    SecurityScheme,
    SecuritySchemeType,
)
from .resolve import resolve_reference, resolve_pointer, resolve_chain, MAX_HOPS

__version__ = "0.1.0"
