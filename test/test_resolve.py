from unittest import TestCase

from openapi_refs import (
    OpenApi,
    Components,
    Reference,
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
    as_item,
)
from openapi_refs.resolve import (
    CATEGORIES,
    MAX_HOPS,
    category_for,
    category_of,
    resolve_chain,
    resolve_pointer,
    resolve_reference,
)
from openapi_refs.exception import (
    ReferenceCycleException,
    ResolutionDepthException,
    ResolutionException,
    UnknownCategoryException,
)


def _schemas(**schemas) -> OpenApi:
    return OpenApi(components=Components(schemas=schemas))


class InlineTest(TestCase):

    def test_inline_ignores_document(self):
        schema = Schema(title='x')
        self.assertIs(resolve_reference(schema, OpenApi(), Schema), schema)
        self.assertIs(resolve_reference(schema, None, Schema), schema)

    def test_absent_node(self):
        self.assertIsNone(resolve_reference(None, _schemas(a=Schema()), Schema))

    def test_reference(self):
        a = Schema(title='a')
        doc = _schemas(a=a)
        self.assertIs(resolve_reference(Reference('#/components/schemas/a'), doc, Schema), a)


class DirectLookupTest(TestCase):

    def test_every_category(self):
        items = {
            Callback: Callback(),
            Example: Example(summary='e'),
            Header: Header(description='h'),
            Link: Link(operation_id='op'),
            Parameter: Parameter(name='p', location=ParameterLocation.QUERY),
            RequestBody: RequestBody(description='b'),
            Response: Response(description='r'),
            Schema: Schema(title='s'),
            SecurityScheme: SecurityScheme(type=SecuritySchemeType.HTTP, scheme='bearer'),
        }
        components = Components()
        for category in CATEGORIES:
            category.entries(components)['k'] = items[category.cls]
        doc = OpenApi(components=components)
        for category in CATEGORIES:
            with self.subTest(category=category.segment):
                pointer = f'#/components/{category.segment}/k'
                self.assertIs(resolve_pointer(doc, pointer, category.cls), items[category.cls])
                self.assertIs(resolve_reference(Reference(pointer), doc, category.cls), items[category.cls])

    def test_name_containing_slash(self):
        nested = Schema(title='nested')
        doc = _schemas(**{'a/b': nested})
        self.assertIs(resolve_pointer(doc, '#/components/schemas/a/b', Schema), nested)

    def test_no_sub_path_descent(self):
        doc = _schemas(schema_1=Schema(title='s1', properties={'extra': Schema(title='extra')}))
        self.assertIsNone(resolve_pointer(doc, '#/components/schemas/schema_1/extra', Schema))
        self.assertIsNone(resolve_pointer(doc, '#/components/schemas/schema_1/properties/extra', Schema))


class NotFoundTest(TestCase):

    def setUp(self) -> None:
        self.doc = _schemas(a=Schema(title='a'))

    def test_malformed_prefix(self):
        for pointer in ['components/schemas/a', '/components/schemas/a', '#components/schemas/a', '', '#']:
            with self.subTest(pointer=pointer):
                self.assertIsNone(resolve_pointer(self.doc, pointer, Schema))

    def test_missing_separator(self):
        self.assertIsNone(resolve_pointer(self.doc, '#/components', Schema))
        self.assertIsNone(resolve_pointer(self.doc, '#/components/schemas', Schema))

    def test_wrong_root_segment(self):
        self.assertIsNone(resolve_pointer(self.doc, '#/paths/schemas/a', Schema))
        self.assertIsNone(resolve_pointer(self.doc, '#/Components/schemas/a', Schema))

    def test_unknown_category(self):
        self.assertIsNone(resolve_pointer(self.doc, '#/components/models/a', Schema))
        self.assertIsNone(resolve_pointer(self.doc, '#/components/Schemas/a', Schema))
        self.assertIsNone(resolve_pointer(self.doc, '#/components/request_bodies/a', RequestBody))

    def test_category_mismatch(self):
        self.assertIsNone(resolve_pointer(self.doc, '#/components/schemas/a', Response))

    def test_missing_key(self):
        self.assertIsNone(resolve_pointer(self.doc, '#/components/schemas/b', Schema))
        self.assertIsNone(resolve_pointer(self.doc, '#/components/schemas/', Schema))

    def test_no_components(self):
        self.assertIsNone(resolve_pointer(OpenApi(), '#/components/schemas/a', Schema))

    def test_dangling_chain(self):
        doc = _schemas(a=Reference('#/components/schemas/b'))
        self.assertIsNone(resolve_pointer(doc, '#/components/schemas/a', Schema))

    def test_chain_switching_category(self):
        doc = OpenApi(components=Components(
            schemas={'a': Reference('#/components/responses/r')},
            responses={'r': Response(description='r')},
        ))
        self.assertIsNone(resolve_pointer(doc, '#/components/schemas/a', Schema))


class ChainTest(TestCase):

    def test_transitive(self):
        x = Schema(title='x')
        doc = _schemas(k1=Reference('#/components/schemas/k2'), k2=x)
        self.assertIs(resolve_pointer(doc, '#/components/schemas/k1', Schema), x)
        self.assertIs(resolve_reference(Reference('#/components/schemas/k1'), doc, Schema), x)

    def test_long_chain(self):
        length = 20
        schemas = {f's{i}': Reference(f'#/components/schemas/s{i + 1}') for i in range(length)}
        schemas[f's{length}'] = Schema(title='end')
        doc = _schemas(**schemas)
        item, chain = resolve_chain(doc, '#/components/schemas/s0', Schema)
        self.assertEqual(item.title, 'end')
        self.assertEqual(len(chain), length + 1)
        self.assertEqual(chain[0], '#/components/schemas/s0')
        self.assertEqual(chain[-1], f'#/components/schemas/s{length}')

    def test_chain_of_missing(self):
        doc = _schemas(a=Reference('#/components/schemas/b'))
        item, chain = resolve_chain(doc, '#/components/schemas/a', Schema)
        self.assertIsNone(item)
        self.assertEqual(chain, ['#/components/schemas/a', '#/components/schemas/b'])


class CycleTest(TestCase):

    def test_two_cycle(self):
        doc = _schemas(a=Reference('#/components/schemas/b'), b=Reference('#/components/schemas/a'))
        with self.assertRaises(ReferenceCycleException) as cm:
            resolve_pointer(doc, '#/components/schemas/a', Schema)
        self.assertEqual(cm.exception.chain, [
            '#/components/schemas/a',
            '#/components/schemas/b',
            '#/components/schemas/a',
        ])

    def test_self_cycle(self):
        doc = _schemas(a=Reference('#/components/schemas/a'))
        with self.assertRaises(ReferenceCycleException):
            resolve_reference(Reference('#/components/schemas/a'), doc, Schema)

    def test_cycle_not_at_start(self):
        doc = _schemas(
            a=Reference('#/components/schemas/b'),
            b=Reference('#/components/schemas/c'),
            c=Reference('#/components/schemas/b'),
        )
        with self.assertRaises(ResolutionException):
            resolve_pointer(doc, '#/components/schemas/a', Schema)

    def test_depth_exceeded(self):
        schemas = {f's{i}': Reference(f'#/components/schemas/s{i + 1}') for i in range(10)}
        schemas['s10'] = Schema()
        doc = _schemas(**schemas)
        with self.assertRaises(ResolutionDepthException) as cm:
            resolve_pointer(doc, '#/components/schemas/s0', Schema, max_hops=5)
        self.assertEqual(cm.exception.max_hops, 5)
        self.assertEqual(len(cm.exception.chain), 6)
        # exactly max_hops pointers is fine
        self.assertIsNotNone(resolve_pointer(doc, '#/components/schemas/s0', Schema, max_hops=11))

    def test_default_bound(self):
        schemas = {f's{i}': Reference(f'#/components/schemas/s{i + 1}') for i in range(MAX_HOPS + 1)}
        doc = _schemas(**schemas)
        with self.assertRaises(ResolutionDepthException):
            resolve_pointer(doc, '#/components/schemas/s0', Schema)

    def test_at_least_one_hop(self):
        doc = _schemas(a=Schema())
        self.assertIsNotNone(resolve_pointer(doc, '#/components/schemas/a', Schema, max_hops=1))
        for max_hops in [0, -1]:
            with self.assertRaises(ValueError):
                resolve_pointer(doc, '#/components/schemas/a', Schema, max_hops=max_hops)
            with self.assertRaises(ValueError):
                resolve_chain(doc, '#/components/schemas/a', Schema, max_hops)


class CategoryTest(TestCase):

    def test_category_for(self):
        self.assertEqual(category_for(Schema).segment, 'schemas')
        self.assertEqual(category_for(RequestBody).segment, 'requestBodies')
        self.assertEqual(category_for(SecurityScheme).attribute, 'security_schemes')

    def test_category_for_unknown(self):
        with self.assertRaises(UnknownCategoryException):
            category_for(PathItem)
        with self.assertRaises(UnknownCategoryException):
            resolve_pointer(OpenApi(), '#/components/schemas/a', MediaType)

    def test_category_of(self):
        self.assertIs(category_of('#/components/schemas/a').cls, Schema)
        self.assertIs(category_of('#/components/securitySchemes/a/b').cls, SecurityScheme)
        self.assertIsNone(category_of('#/components/schemas'))
        self.assertIsNone(category_of('#/components/models/a'))
        self.assertIsNone(category_of('#/paths/schemas/a'))
        self.assertIsNone(category_of('components/schemas/a'))

    def test_pointer(self):
        self.assertEqual(category_for(Header).pointer('X-Rate'), '#/components/headers/X-Rate')


class EndToEndTest(TestCase):

    def test_response_and_schema_chain(self):
        openapi = OpenApi(
            paths={
                '/': PathItem(
                    get=Operation(
                        responses=Responses(responses={
                            '200': Reference('#/components/responses/response_1'),
                        })
                    )
                )
            },
            components=Components(
                responses={
                    'response_1': Reference('#/components/responses/response_2'),
                    'response_2': Response(content={
                        'application/json': MediaType(schema=Reference('#/components/schemas/schema_1')),
                    }),
                },
                schemas={
                    'schema_1': Reference('#/components/schemas/schema_2'),
                    'schema_2': Schema(title='schema_2', type='string'),
                },
            ),
        )

        path = as_item(openapi.paths['/'])
        self.assertIsNotNone(path)
        response_200 = path.get.responses.get(200)
        response = resolve_reference(response_200, openapi, Response)
        self.assertIsNotNone(response)
        content_json = response.content['application/json']
        schema = resolve_reference(content_json.schema, openapi, Schema)
        self.assertEqual(schema.title, 'schema_2')
