from typing import Any, TextIO
from dataclasses import MISSING, Field, fields, is_dataclass
from enum import Enum
from yaml import safe_load, YAMLError

from ._api.openapi import OpenApi, Reference
from .exception import DocumentException


def load_dict(data: Any) -> OpenApi:
    return OpenApi.from_dict(data)


def load_file(file: TextIO) -> OpenApi:
    """Loads an OpenAPI document, JSON being a subset of YAML both are accepted"""
    try:
        data = safe_load(file)
    except YAMLError as e:
        raise DocumentException(f"Invalid document: {e}")
    return load_dict(data)


def _is_default(f: Field, value: Any) -> bool:
    # Strings and nested objects are always written, required keys like "openapi" keep their value
    if value is None:
        return True
    if not isinstance(value, (bool, dict, list)):
        return False
    if f.default is not MISSING:
        return value == f.default
    if f.default_factory is not MISSING:
        return value == f.default_factory()
    return False


def to_json_data(value: Any) -> Any:
    """
    Converts model objects back into OpenAPI json data.
    Fields are written under their OpenAPI key (metadata "json"), fields marked
    "inline" are merged into the enclosing object and unset fields, empty
    containers and flags holding their default are left out.
    """
    if isinstance(value, Reference):
        return {'$ref': value.ref}
    if is_dataclass(value):
        result = {}
        for f in fields(value):
            v = getattr(value, f.name)
            if _is_default(f, v):
                continue
            if f.metadata.get("inline"):
                result.update(to_json_data(v))
            else:
                result[f.metadata.get("json", f.name)] = to_json_data(v)
        return result
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: to_json_data(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_json_data(i) for i in value]
    return value
