"""
Resolves pointers of the form ``#/components/<category>/<name>`` against an
OpenAPI document.

Only this three segment scheme is supported: the name is the whole remaining
tail of the pointer, so ``#/components/schemas/a/b`` looks up the key ``a/b``
and never descends into the schema ``a``.

Resolved objects are returned as-is, i.e. they are the objects owned by the
document and must be treated as read-only.
"""

from typing import Dict, List, Optional, Tuple, Type, TypeVar
from dataclasses import dataclass

from ._api.openapi import (
    OpenApi,
    Components,
    Reference,
    ReferenceOr,
    Callback,
    Example,
    Header,
    Link,
    Parameter,
    RequestBody,
    Response,
    Schema,
    SecurityScheme,
)
from .exception import ReferenceCycleException, ResolutionDepthException, UnknownCategoryException

T = TypeVar("T")

POINTER_PREFIX = "#/"
COMPONENTS_SEGMENT = "components"

# Upper bound on pointer hops for a single resolution
MAX_HOPS = 32


@dataclass(frozen=True)
class Category:
    segment: str
    attribute: str
    cls: type

    def entries(self, components: Components) -> Dict[str, ReferenceOr]:
        return getattr(components, self.attribute)

    def pointer(self, name: str) -> str:
        return f"{POINTER_PREFIX}{COMPONENTS_SEGMENT}/{self.segment}/{name}"


CATEGORIES: Tuple[Category, ...] = (
    Category("callbacks", "callbacks", Callback),
    Category("examples", "examples", Example),
    Category("headers", "headers", Header),
    Category("links", "links", Link),
    Category("parameters", "parameters", Parameter),
    Category("requestBodies", "request_bodies", RequestBody),
    Category("responses", "responses", Response),
    Category("schemas", "schemas", Schema),
    Category("securitySchemes", "security_schemes", SecurityScheme),
)

_by_type: Dict[type, Category] = {i.cls: i for i in CATEGORIES}
_by_segment: Dict[str, Category] = {i.segment: i for i in CATEGORIES}


def category_for(cls: Type[T]) -> Category:
    try:
        return _by_type[cls]
    except KeyError:
        raise UnknownCategoryException(f"{cls.__name__} is not a component category")


def category_of(pointer: str) -> Optional[Category]:
    """Returns the category a pointer addresses, or None if it addresses none"""
    if not pointer.startswith(POINTER_PREFIX):
        return None
    root_segment, sep, rest = pointer[len(POINTER_PREFIX):].partition('/')
    if not sep or root_segment != COMPONENTS_SEGMENT:
        return None
    segment, sep, _ = rest.partition('/')
    if not sep:
        return None
    return _by_segment.get(segment)


def _lookup_components(components: Components, path: str, category: Category) -> Optional[ReferenceOr]:
    segment, sep, name = path.partition('/')
    if not sep or segment != category.segment:
        return None
    return category.entries(components).get(name)


def _lookup_document(root: OpenApi, pointer: str, category: Category) -> Optional[ReferenceOr]:
    # Returns the node stored under pointer, which may be another Reference
    if not pointer.startswith(POINTER_PREFIX):
        return None
    root_segment, sep, rest = pointer[len(POINTER_PREFIX):].partition('/')
    if not sep:
        return None
    if root_segment == COMPONENTS_SEGMENT:
        if root.components is None:
            return None
        return _lookup_components(root.components, rest, category)
    return None


def resolve_chain(root: OpenApi, pointer: str, cls: Type[T], max_hops: int = MAX_HOPS) -> Tuple[Optional[T], List[str]]:
    """
    Follows pointer until an inline object is found.
    Returns the object (None if not found) together with every pointer visited.
    Raises ReferenceCycleException if a pointer is visited twice and
    ResolutionDepthException if more than max_hops pointers are followed,
    the initial pointer counting as the first one.
    """
    if max_hops < 1:
        raise ValueError(f"max_hops must be at least 1, got {max_hops}")
    category = category_for(cls)
    chain: List[str] = []
    while True:
        if pointer in chain:
            raise ReferenceCycleException(chain + [pointer])
        chain.append(pointer)
        if len(chain) > max_hops:
            raise ResolutionDepthException(chain, max_hops)
        node = _lookup_document(root, pointer, category)
        if node is None:
            return None, chain
        if not isinstance(node, Reference):
            return node, chain
        pointer = node.ref


def resolve_pointer(root: OpenApi, pointer: str, cls: Type[T], max_hops: int = MAX_HOPS) -> Optional[T]:
    return resolve_chain(root, pointer, cls, max_hops)[0]


def resolve_reference(
    node: Optional[ReferenceOr[T]], root: OpenApi, cls: Type[T], max_hops: int = MAX_HOPS
) -> Optional[T]:
    if node is None:
        return None
    if isinstance(node, Reference):
        return resolve_pointer(root, node.ref, cls, max_hops)
    return node
