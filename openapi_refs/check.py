from typing import Any, Callable, Dict, Iterator, Optional
from dataclasses import dataclass

from ._api.openapi import (
    OpenApi,
    Reference,
    Callback,
    Example,
    Header,
    Link,
    MediaType,
    Operation,
    Parameter,
    PathItem,
    RequestBody,
    Response,
    Schema,
    SecurityScheme,
)
from .config import CheckConfig
from .exception import ResolutionException, UnknownCategoryException
from .resolve import CATEGORIES, category_for, category_of, resolve_chain
from .result import CheckResult, Level, start, write, abort


@dataclass
class ReferenceSite:
    # json path of the reference node, e.g. "paths./pets.get.responses.200"
    location: str
    # pointer of the enclosing component or json path of the enclosing path item
    owner: str
    reference: Reference
    cls: type


def _visit(node: Any, cls: type, location: str, owner: str) -> Iterator[ReferenceSite]:
    if isinstance(node, Reference):
        yield ReferenceSite(location, owner, node, cls)
    else:
        yield from _visitors[cls](node, location, owner)


def _visit_all(nodes: Dict[str, Any], cls: type, location: str, owner: str) -> Iterator[ReferenceSite]:
    for key, node in nodes.items():
        yield from _visit(node, cls, f"{location}.{key}", owner)


def _visit_schema(schema: Schema, location: str, owner: str) -> Iterator[ReferenceSite]:
    for rel, node in schema.sub_schemas():
        yield from _visit(node, Schema, f"{location}.{rel}", owner)


def _visit_content(content: Dict[str, MediaType], location: str, owner: str) -> Iterator[ReferenceSite]:
    for media_type, media in content.items():
        path = f"{location}.content.{media_type}"
        if media.schema is not None:
            yield from _visit(media.schema, Schema, path + ".schema", owner)
        yield from _visit_all(media.examples, Example, path + ".examples", owner)


def _visit_header(header: Header, location: str, owner: str) -> Iterator[ReferenceSite]:
    if header.schema is not None:
        yield from _visit(header.schema, Schema, location + ".schema", owner)
    yield from _visit_content(header.content, location, owner)


def _visit_parameter(parameter: Parameter, location: str, owner: str) -> Iterator[ReferenceSite]:
    if parameter.schema is not None:
        yield from _visit(parameter.schema, Schema, location + ".schema", owner)
    yield from _visit_content(parameter.content, location, owner)


def _visit_request_body(body: RequestBody, location: str, owner: str) -> Iterator[ReferenceSite]:
    yield from _visit_content(body.content, location, owner)


def _visit_response(response: Response, location: str, owner: str) -> Iterator[ReferenceSite]:
    yield from _visit_all(response.headers, Header, location + ".headers", owner)
    yield from _visit_content(response.content, location, owner)
    yield from _visit_all(response.links, Link, location + ".links", owner)


def _visit_operation(operation: Operation, location: str, owner: str) -> Iterator[ReferenceSite]:
    for i, parameter in enumerate(operation.parameters):
        yield from _visit(parameter, Parameter, f"{location}.parameters.{i}", owner)
    if operation.request_body is not None:
        yield from _visit(operation.request_body, RequestBody, location + ".requestBody", owner)
    if operation.responses.default is not None:
        yield from _visit(operation.responses.default, Response, location + ".responses.default", owner)
    yield from _visit_all(operation.responses.responses, Response, location + ".responses", owner)
    yield from _visit_all(operation.callbacks, Callback, location + ".callbacks", owner)


def _visit_path_item(item: PathItem, location: str, owner: str) -> Iterator[ReferenceSite]:
    for i, parameter in enumerate(item.parameters):
        yield from _visit(parameter, Parameter, f"{location}.parameters.{i}", owner)
    for method, operation in item.operations():
        yield from _visit_operation(operation, f"{location}.{method}", owner)


def _visit_callback(callback: Callback, location: str, owner: str) -> Iterator[ReferenceSite]:
    yield from _visit_all(callback.expressions, PathItem, location, owner)


def _visit_nothing(node: Any, location: str, owner: str) -> Iterator[ReferenceSite]:
    return iter(())


_visitors: Dict[type, Callable[[Any, str, str], Iterator[ReferenceSite]]] = {
    Callback: _visit_callback,
    Example: _visit_nothing,
    Header: _visit_header,
    Link: _visit_nothing,
    Parameter: _visit_parameter,
    PathItem: _visit_path_item,
    RequestBody: _visit_request_body,
    Response: _visit_response,
    Schema: _visit_schema,
    SecurityScheme: _visit_nothing,
}


def iter_references(doc: OpenApi) -> Iterator[ReferenceSite]:
    """Yields every reference in the document along with the type expected at its location"""
    for path, item in doc.paths.items():
        location = "paths." + path
        yield from _visit(item, PathItem, location, location)
    if doc.components is None:
        return
    for category in CATEGORIES:
        for name, node in category.entries(doc.components).items():
            location = f"components.{category.segment}.{name}"
            yield from _visit(node, category.cls, location, category.pointer(name))


def _check_site(doc: OpenApi, site: ReferenceSite, config: CheckConfig):
    pointer = site.reference.ref
    try:
        category_for(site.cls)
    except UnknownCategoryException:
        write(CheckResult(f"{site.cls.__name__} references cannot be resolved, skipping", Level.WARNING))
        return
    try:
        item, chain = resolve_chain(doc, pointer, site.cls, config.max_hops)
    except ResolutionException as e:
        abort(CheckResult(str(e), Level.ERROR, chain=e.chain))
    if item is None:
        target = category_of(chain[-1])
        if target is not None and target.cls is not site.cls:
            abort(CheckResult(
                f"Expected a {site.cls.__name__}, but {chain[-1]} refers to {target.segment}", Level.ERROR, chain=chain))
        abort(CheckResult("Cannot resolve {}".format(" -> ".join(chain)), Level.ERROR, chain=chain))
    write(CheckResult("Resolved via {}".format(" -> ".join(chain)), chain=chain))


def check_references(doc: OpenApi, config: Optional[CheckConfig] = None) -> CheckResult:
    if config is None:
        config = CheckConfig()
    with start("Check references") as result:
        for site in iter_references(doc):
            if config.filter and not config.filter.selects(site.reference.ref):
                continue
            header = CheckResult(f"{site.reference.ref} at {site.location}", pointer=site.reference.ref, location=site.location)
            with start(header):
                _check_site(doc, site, config)
    return result
