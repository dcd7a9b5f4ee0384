import argparse
import sys
import json
from enum import Enum

from openapi_refs import file, check, graph, resolve
from openapi_refs.config import CheckConfig, PointerFilter
from openapi_refs.exception import OpenApiRefsException


class OutputFormats(Enum):
    TEXT = 'text'
    JSON = 'json'

    def __str__(self):
        return self.value


def _hops(value: str) -> int:
    hops = int(value)
    if hops < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {hops}")
    return hops


def _load(f):
    try:
        return file.load_file(f)
    except OpenApiRefsException as e:
        sys.stderr.write(f"Cannot load {f.name}: {e}\n")
        sys.exit(1)


def run_resolve(argv):
    parser = argparse.ArgumentParser(description='Resolves a pointer like #/components/schemas/Pet')
    parser.add_argument('file',
                        type=argparse.FileType('r'),
                        help='the OpenAPI document (json or yaml)')
    parser.add_argument('pointer',
                        type=str,
                        help='the pointer to resolve')
    parser.add_argument('--max-hops',
                        type=_hops,
                        default=resolve.MAX_HOPS,
                        help='maximum number of references to follow')
    args = parser.parse_args(argv)
    doc = _load(args.file)
    category = resolve.category_of(args.pointer)
    if category is None:
        sys.stderr.write(f"'{args.pointer}' does not address a component category\n")
        sys.exit(1)
    try:
        item = resolve.resolve_pointer(doc, args.pointer, category.cls, args.max_hops)
    except OpenApiRefsException as e:
        sys.stderr.write(f"{e}\n")
        sys.exit(1)
    if item is None:
        sys.stderr.write(f"Cannot resolve '{args.pointer}'\n")
        sys.exit(1)
    print(json.dumps(file.to_json_data(item), indent=2))


def run_check(argv):
    parser = argparse.ArgumentParser(description='Checks that all references of a document can be resolved')
    parser.add_argument('file',
                        type=argparse.FileType('r'),
                        help='the OpenAPI document (json or yaml)')
    parser.add_argument('--filter',
                        type=str,
                        default=None,
                        help='only check matching pointers, e.g. "#/components/schemas/*~*Legacy*"')
    parser.add_argument('--max-hops',
                        type=_hops,
                        default=resolve.MAX_HOPS)
    parser.add_argument('--output',
                        type=OutputFormats,
                        default=OutputFormats.TEXT,
                        choices=list(OutputFormats))
    args = parser.parse_args(argv)
    doc = _load(args.file)
    try:
        pointer_filter = PointerFilter(args.filter) if args.filter is not None else None
    except OpenApiRefsException as e:
        sys.stderr.write(f"{e}\n")
        sys.exit(1)
    result = check.check_references(doc, CheckConfig(max_hops=args.max_hops, filter=pointer_filter))
    if args.output == OutputFormats.TEXT:
        result.dump()
    elif args.output == OutputFormats.JSON:
        print(json.dumps(result.to_dict()))
    else:
        raise Exception(f"Invalid output {args.output}")
    sys.exit(0 if result.ok() else 1)


def run_graph(argv):
    parser = argparse.ArgumentParser(description='Prints the reference graph of a document in dot format')
    parser.add_argument('file',
                        type=argparse.FileType('r'),
                        help='the OpenAPI document (json or yaml)')
    args = parser.parse_args(argv)
    doc = _load(args.file)
    print(graph.to_graph(doc).to_string())


commands = {
    'resolve': run_resolve,
    'check': run_check,
    'graph': run_graph,
}


def main():

    if len(sys.argv) <= 1:
        print(f"Usage: {sys.argv[0]} COMMAND OPTIONS...")
        print("Available commands:")
        print("  resolve  Resolve a pointer.")
        print("  check    Check that all references can be resolved.")
        print("  graph    Print the reference graph.")
        sys.exit(1)

    command = sys.argv[1]

    if command not in commands:
        print(f"Unknown command '{command}', must be one of {', '.join(commands)}")
        sys.exit(1)

    remaining_args = sys.argv[2:]
    commands[command](remaining_args)


if __name__ == '__main__':
    main()
