# Read-only model of an OpenAPI 3 document
# See: https://github.com/OAI/OpenAPI-Specification/blob/main/versions/3.0.3.md

from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, TypeVar, Union
from dataclasses import dataclass, field
from enum import Enum
import re
import warnings

from openapi_refs.exception import DocumentException
from .parse_util import assert_type, safe_dict_lookup

T = TypeVar("T")


@dataclass
class Reference:
    ref: str


ReferenceOr = Union[Reference, T]


def is_reference(node: Any) -> bool:
    return isinstance(node, Reference)


def as_item(node: Optional[ReferenceOr[T]]) -> Optional[T]:
    if node is None or isinstance(node, Reference):
        return None
    return node


def _parse_reference_or(data: Any, json_path: str, parse: Callable[[Any, str], T]) -> ReferenceOr[T]:
    assert_type(data, dict, json_path)
    if '$ref' in data:
        return Reference(safe_dict_lookup(data, '$ref', str, json_path))
    return parse(data, json_path)


def _parse_optional(data: dict, key: str, json_path: str, parse: Callable[[Any, str], T]) -> Optional[ReferenceOr[T]]:
    if key not in data:
        return None
    return _parse_reference_or(data[key], json_path + '.' + key, parse)


def _parse_map(data: dict, key: str, json_path: str, parse: Callable[[Any, str], T]) -> Dict[str, ReferenceOr[T]]:
    entries = safe_dict_lookup(data, key, dict, json_path, {})
    json_path = json_path + '.' + key
    return {str(k): _parse_reference_or(v, json_path + '.' + str(k), parse) for k, v in entries.items()}


def _parse_list(data: dict, key: str, json_path: str, parse: Callable[[Any, str], T]) -> List[ReferenceOr[T]]:
    entries = safe_dict_lookup(data, key, list, json_path, [])
    json_path = json_path + '.' + key
    return [_parse_reference_or(v, json_path + '.' + str(i), parse) for i, v in enumerate(entries)]


def _parse_enum(enum_cls, data: dict, key: str, json_path: str):
    value = safe_dict_lookup(data, key, str, json_path)
    try:
        return enum_cls(value)
    except ValueError:
        raise DocumentException('Invalid value "{}" for "{}" at {}, must be one of {}'.format(
            value, key, json_path, [i.value for i in enum_cls]))


@dataclass
class Info:
    title: str
    version: str

    @classmethod
    def from_dict(cls, data: Any, json_path: str) -> "Info":
        return cls(
            title=safe_dict_lookup(data, 'title', str, json_path),
            version=safe_dict_lookup(data, 'version', str, json_path),
        )


@dataclass
class Schema:
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    format: Optional[str] = None
    nullable: bool = False
    enum: Optional[List[Any]] = None
    required: List[str] = field(default_factory=list)
    properties: Dict[str, "ReferenceOr[Schema]"] = field(default_factory=dict)
    additional_properties: Union[bool, "ReferenceOr[Schema]", None] = field(
        default=None, metadata={"json": "additionalProperties"})
    items: Optional["ReferenceOr[Schema]"] = None
    all_of: List["ReferenceOr[Schema]"] = field(default_factory=list, metadata={"json": "allOf"})
    any_of: List["ReferenceOr[Schema]"] = field(default_factory=list, metadata={"json": "anyOf"})
    one_of: List["ReferenceOr[Schema]"] = field(default_factory=list, metadata={"json": "oneOf"})
    not_: Optional["ReferenceOr[Schema]"] = field(default=None, metadata={"json": "not"})

    def sub_schemas(self) -> Iterator[Tuple[str, "ReferenceOr[Schema]"]]:
        """Yields (relative json path, node) for every directly nested schema"""
        for name, prop in self.properties.items():
            yield 'properties.' + name, prop
        if self.additional_properties is not None and not isinstance(self.additional_properties, bool):
            yield 'additionalProperties', self.additional_properties
        if self.items is not None:
            yield 'items', self.items
        for key, nodes in (('allOf', self.all_of), ('anyOf', self.any_of), ('oneOf', self.one_of)):
            for i, node in enumerate(nodes):
                yield f'{key}.{i}', node
        if self.not_ is not None:
            yield 'not', self.not_

    @classmethod
    def from_dict(cls, data: Any, json_path: str) -> "Schema":
        assert_type(data, dict, json_path)
        additional_properties = data.get('additionalProperties')
        if isinstance(additional_properties, dict):
            additional_properties = _parse_reference_or(
                additional_properties, json_path + '.additionalProperties', Schema.from_dict)
        elif additional_properties is not None:
            assert_type(additional_properties, bool, json_path + '.additionalProperties')
        return cls(
            title=safe_dict_lookup(data, 'title', str, json_path, None),
            description=safe_dict_lookup(data, 'description', str, json_path, None),
            type=safe_dict_lookup(data, 'type', str, json_path, None),
            format=safe_dict_lookup(data, 'format', str, json_path, None),
            nullable=safe_dict_lookup(data, 'nullable', bool, json_path, False),
            enum=safe_dict_lookup(data, 'enum', list, json_path, None),
            required=safe_dict_lookup(data, 'required', list, json_path, []),
            properties=_parse_map(data, 'properties', json_path, Schema.from_dict),
            additional_properties=additional_properties,
            items=_parse_optional(data, 'items', json_path, Schema.from_dict),
            all_of=_parse_list(data, 'allOf', json_path, Schema.from_dict),
            any_of=_parse_list(data, 'anyOf', json_path, Schema.from_dict),
            one_of=_parse_list(data, 'oneOf', json_path, Schema.from_dict),
            not_=_parse_optional(data, 'not', json_path, Schema.from_dict),
        )


@dataclass
class Example:
    summary: Optional[str] = None
    description: Optional[str] = None
    value: Any = None
    external_value: Optional[str] = field(default=None, metadata={"json": "externalValue"})

    @classmethod
    def from_dict(cls, data: Any, json_path: str) -> "Example":
        assert_type(data, dict, json_path)
        if 'value' in data and 'externalValue' in data:
            raise DocumentException("value and externalValue are mutually exclusive at {}".format(json_path))
        return cls(
            summary=safe_dict_lookup(data, 'summary', str, json_path, None),
            description=safe_dict_lookup(data, 'description', str, json_path, None),
            value=data.get('value'),
            external_value=safe_dict_lookup(data, 'externalValue', str, json_path, None),
        )


@dataclass
class MediaType:
    schema: Optional[ReferenceOr[Schema]] = None
    example: Any = None
    examples: Dict[str, ReferenceOr[Example]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any, json_path: str) -> "MediaType":
        assert_type(data, dict, json_path)
        if 'encoding' in data:
            warnings.warn(f"Ignoring encoding at {json_path}")
        return cls(
            schema=_parse_optional(data, 'schema', json_path, Schema.from_dict),
            example=data.get('example'),
            examples=_parse_map(data, 'examples', json_path, Example.from_dict),
        )


def _parse_content(data: dict, json_path: str) -> Dict[str, MediaType]:
    content = safe_dict_lookup(data, 'content', dict, json_path, {})
    return {str(k): MediaType.from_dict(v, json_path + '.content.' + str(k)) for k, v in content.items()}


@dataclass
class Header:
    description: Optional[str] = None
    required: bool = False
    deprecated: bool = False
    schema: Optional[ReferenceOr[Schema]] = None
    content: Dict[str, MediaType] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any, json_path: str) -> "Header":
        assert_type(data, dict, json_path)
        if 'name' in data or 'in' in data:
            warnings.warn(f"Header must not specify name or in, ignoring them at {json_path}")
        return cls(
            description=safe_dict_lookup(data, 'description', str, json_path, None),
            required=safe_dict_lookup(data, 'required', bool, json_path, False),
            deprecated=safe_dict_lookup(data, 'deprecated', bool, json_path, False),
            schema=_parse_optional(data, 'schema', json_path, Schema.from_dict),
            content=_parse_content(data, json_path),
        )


@dataclass
class Link:
    operation_id: Optional[str] = field(default=None, metadata={"json": "operationId"})
    operation_ref: Optional[str] = field(default=None, metadata={"json": "operationRef"})
    parameters: Dict[str, Any] = field(default_factory=dict)
    request_body: Any = field(default=None, metadata={"json": "requestBody"})
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, json_path: str) -> "Link":
        assert_type(data, dict, json_path)
        if 'operationId' in data and 'operationRef' in data:
            raise DocumentException("operationId and operationRef are mutually exclusive at {}".format(json_path))
        return cls(
            operation_id=safe_dict_lookup(data, 'operationId', str, json_path, None),
            operation_ref=safe_dict_lookup(data, 'operationRef', str, json_path, None),
            parameters=safe_dict_lookup(data, 'parameters', dict, json_path, {}),
            request_body=data.get('requestBody'),
            description=safe_dict_lookup(data, 'description', str, json_path, None),
        )


@dataclass
class Response:
    description: str = ''
    headers: Dict[str, ReferenceOr[Header]] = field(default_factory=dict)
    content: Dict[str, MediaType] = field(default_factory=dict)
    links: Dict[str, ReferenceOr[Link]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any, json_path: str) -> "Response":
        assert_type(data, dict, json_path)
        return cls(
            description=safe_dict_lookup(data, 'description', str, json_path),
            headers=_parse_map(data, 'headers', json_path, Header.from_dict),
            content=_parse_content(data, json_path),
            links=_parse_map(data, 'links', json_path, Link.from_dict),
        )


@dataclass
class Responses:
    default: Optional[ReferenceOr[Response]] = None
    responses: Dict[str, ReferenceOr[Response]] = field(default_factory=dict, metadata={"inline": True})

    def get(self, code: Union[int, str]) -> Optional[ReferenceOr[Response]]:
        return self.responses.get(str(code))

    @classmethod
    def from_dict(cls, data: Any, json_path: str) -> "Responses":
        assert_type(data, dict, json_path)
        default = None
        responses: Dict[str, ReferenceOr[Response]] = {}
        for code, value in data.items():
            # YAML turns unquoted status codes into integers
            code = str(code)
            if code.startswith('x-'):
                continue
            node = _parse_reference_or(value, json_path + '.' + code, Response.from_dict)
            if code == 'default':
                default = node
            else:
                responses[code] = node
        return cls(default=default, responses=responses)


class ParameterLocation(Enum):
    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


@dataclass
class Parameter:
    name: str
    location: ParameterLocation = field(metadata={"json": "in"})
    description: Optional[str] = None
    required: bool = False
    deprecated: bool = False
    style: Optional[str] = None
    explode: Optional[bool] = None
    schema: Optional[ReferenceOr[Schema]] = None
    content: Dict[str, MediaType] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any, json_path: str) -> "Parameter":
        assert_type(data, dict, json_path)
        location = _parse_enum(ParameterLocation, data, 'in', json_path)
        return cls(
            name=safe_dict_lookup(data, 'name', str, json_path),
            location=location,
            description=safe_dict_lookup(data, 'description', str, json_path, None),
            required=safe_dict_lookup(data, 'required', bool, json_path, location == ParameterLocation.PATH),
            deprecated=safe_dict_lookup(data, 'deprecated', bool, json_path, False),
            style=safe_dict_lookup(data, 'style', str, json_path, None),
            explode=safe_dict_lookup(data, 'explode', bool, json_path, None),
            schema=_parse_optional(data, 'schema', json_path, Schema.from_dict),
            content=_parse_content(data, json_path),
        )


@dataclass
class RequestBody:
    description: Optional[str] = None
    content: Dict[str, MediaType] = field(default_factory=dict)
    required: bool = False

    @classmethod
    def from_dict(cls, data: Any, json_path: str) -> "RequestBody":
        assert_type(data, dict, json_path)
        return cls(
            description=safe_dict_lookup(data, 'description', str, json_path, None),
            content=_parse_content(data, json_path),
            required=safe_dict_lookup(data, 'required', bool, json_path, False),
        )


class SecuritySchemeType(Enum):
    API_KEY = "apiKey"
    HTTP = "http"
    MUTUAL_TLS = "mutualTLS"
    OAUTH2 = "oauth2"
    OPEN_ID_CONNECT = "openIdConnect"


@dataclass
class SecurityScheme:
    type: SecuritySchemeType
    description: Optional[str] = None
    name: Optional[str] = None
    location: Optional[str] = field(default=None, metadata={"json": "in"})
    scheme: Optional[str] = None
    bearer_format: Optional[str] = field(default=None, metadata={"json": "bearerFormat"})
    flows: Dict[str, Any] = field(default_factory=dict)
    open_id_connect_url: Optional[str] = field(default=None, metadata={"json": "openIdConnectUrl"})

    @classmethod
    def from_dict(cls, data: Any, json_path: str) -> "SecurityScheme":
        assert_type(data, dict, json_path)
        return cls(
            type=_parse_enum(SecuritySchemeType, data, 'type', json_path),
            description=safe_dict_lookup(data, 'description', str, json_path, None),
            name=safe_dict_lookup(data, 'name', str, json_path, None),
            location=safe_dict_lookup(data, 'in', str, json_path, None),
            scheme=safe_dict_lookup(data, 'scheme', str, json_path, None),
            bearer_format=safe_dict_lookup(data, 'bearerFormat', str, json_path, None),
            flows=safe_dict_lookup(data, 'flows', dict, json_path, {}),
            open_id_connect_url=safe_dict_lookup(data, 'openIdConnectUrl', str, json_path, None),
        )


@dataclass
class Operation:
    operation_id: Optional[str] = field(default=None, metadata={"json": "operationId"})
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    parameters: List[ReferenceOr[Parameter]] = field(default_factory=list)
    request_body: Optional[ReferenceOr[RequestBody]] = field(default=None, metadata={"json": "requestBody"})
    responses: Responses = field(default_factory=Responses)
    callbacks: Dict[str, ReferenceOr["Callback"]] = field(default_factory=dict)
    deprecated: bool = False

    @classmethod
    def from_dict(cls, data: Any, json_path: str) -> "Operation":
        assert_type(data, dict, json_path)
        return cls(
            operation_id=safe_dict_lookup(data, 'operationId', str, json_path, None),
            summary=safe_dict_lookup(data, 'summary', str, json_path, None),
            description=safe_dict_lookup(data, 'description', str, json_path, None),
            tags=safe_dict_lookup(data, 'tags', list, json_path, []),
            parameters=_parse_list(data, 'parameters', json_path, Parameter.from_dict),
            request_body=_parse_optional(data, 'requestBody', json_path, RequestBody.from_dict),
            responses=Responses.from_dict(
                safe_dict_lookup(data, 'responses', dict, json_path, {}), json_path + '.responses'),
            callbacks=_parse_map(data, 'callbacks', json_path, Callback.from_dict),
            deprecated=safe_dict_lookup(data, 'deprecated', bool, json_path, False),
        )


METHODS = ['get', 'put', 'post', 'delete', 'options', 'head', 'patch', 'trace']


@dataclass
class PathItem:
    summary: Optional[str] = None
    description: Optional[str] = None
    parameters: List[ReferenceOr[Parameter]] = field(default_factory=list)
    get: Optional[Operation] = None
    put: Optional[Operation] = None
    post: Optional[Operation] = None
    delete: Optional[Operation] = None
    options: Optional[Operation] = None
    head: Optional[Operation] = None
    patch: Optional[Operation] = None
    trace: Optional[Operation] = None

    def operations(self) -> Iterator[Tuple[str, Operation]]:
        for method in METHODS:
            operation = getattr(self, method)
            if operation is not None:
                yield method, operation

    @classmethod
    def from_dict(cls, data: Any, json_path: str) -> "PathItem":
        assert_type(data, dict, json_path)
        operations: Dict[str, Operation] = {}
        for key, value in data.items():
            key = str(key)
            if key in METHODS:
                operations[key] = Operation.from_dict(value, json_path + '.' + key)
            elif key not in ('summary', 'description', 'parameters', 'servers') and not key.startswith('x-'):
                warnings.warn(f"Ignoring unknown key '{key}' at {json_path}")
        return cls(
            summary=safe_dict_lookup(data, 'summary', str, json_path, None),
            description=safe_dict_lookup(data, 'description', str, json_path, None),
            parameters=_parse_list(data, 'parameters', json_path, Parameter.from_dict),
            **operations,
        )


@dataclass
class Callback:
    expressions: Dict[str, ReferenceOr[PathItem]] = field(default_factory=dict, metadata={"inline": True})

    @classmethod
    def from_dict(cls, data: Any, json_path: str) -> "Callback":
        assert_type(data, dict, json_path)
        return cls(
            expressions={
                str(k): _parse_reference_or(v, json_path + '.' + str(k), PathItem.from_dict)
                for k, v in data.items() if not str(k).startswith('x-')
            }
        )


@dataclass
class Components:
    callbacks: Dict[str, ReferenceOr[Callback]] = field(default_factory=dict)
    examples: Dict[str, ReferenceOr[Example]] = field(default_factory=dict)
    headers: Dict[str, ReferenceOr[Header]] = field(default_factory=dict)
    links: Dict[str, ReferenceOr[Link]] = field(default_factory=dict)
    parameters: Dict[str, ReferenceOr[Parameter]] = field(default_factory=dict)
    request_bodies: Dict[str, ReferenceOr[RequestBody]] = field(default_factory=dict, metadata={"json": "requestBodies"})
    responses: Dict[str, ReferenceOr[Response]] = field(default_factory=dict)
    schemas: Dict[str, ReferenceOr[Schema]] = field(default_factory=dict)
    security_schemes: Dict[str, ReferenceOr[SecurityScheme]] = field(
        default_factory=dict, metadata={"json": "securitySchemes"})

    @classmethod
    def from_dict(cls, data: Any, json_path: str) -> "Components":
        assert_type(data, dict, json_path)
        return cls(
            callbacks=_parse_map(data, 'callbacks', json_path, Callback.from_dict),
            examples=_parse_map(data, 'examples', json_path, Example.from_dict),
            headers=_parse_map(data, 'headers', json_path, Header.from_dict),
            links=_parse_map(data, 'links', json_path, Link.from_dict),
            parameters=_parse_map(data, 'parameters', json_path, Parameter.from_dict),
            request_bodies=_parse_map(data, 'requestBodies', json_path, RequestBody.from_dict),
            responses=_parse_map(data, 'responses', json_path, Response.from_dict),
            schemas=_parse_map(data, 'schemas', json_path, Schema.from_dict),
            security_schemes=_parse_map(data, 'securitySchemes', json_path, SecurityScheme.from_dict),
        )


@dataclass
class OpenApi:
    openapi: str = '3.0.3'
    info: Info = field(default_factory=lambda: Info(title='', version=''))
    paths: Dict[str, ReferenceOr[PathItem]] = field(default_factory=dict)
    components: Optional[Components] = None

    @classmethod
    def from_dict(cls, data: Any) -> "OpenApi":
        assert_type(data, dict, '')
        version = safe_dict_lookup(data, 'openapi', str, '')
        if re.fullmatch(r"3\.0\.\d+", version) is None:
            raise DocumentException(f"Unsupported OpenAPI version {version}, only 3.0.x is supported")
        components = safe_dict_lookup(data, 'components', dict, '', None)
        return cls(
            openapi=version,
            info=Info.from_dict(safe_dict_lookup(data, 'info', dict, ''), 'info'),
            paths={
                str(path_name): _parse_reference_or(path_item, 'paths.' + str(path_name), PathItem.from_dict)
                for path_name, path_item in safe_dict_lookup(data, 'paths', dict, '', {}).items()
                if not str(path_name).startswith('x-')
            },
            components=Components.from_dict(components, 'components') if components is not None else None,
        )
