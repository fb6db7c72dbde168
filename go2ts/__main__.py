import argparse
import os
import sys

from go2ts import Go2TS, utils
from go2ts.errors import Go2TSError
from go2ts.type_mapper import TypeMapper


def parse_convert(parser):
    parser.add_argument(
        '--in',
        '-i',
        dest='input_dir',
        type=str,
        default=None,
        help='Directory to scan for Go structs, default to general.input_dir in the config'
    )

    parser.add_argument(
        '--out',
        '-o',
        dest='output_file',
        type=str,
        default=None,
        help='Output TypeScript file path, default to general.output_file in the config'
    )

    parser.add_argument(
        '--config',
        '-c',
        type=str,
        dest='config_file',
        help='The configuration file to use'
    )

    parser.add_argument(
        '--log-level',
        type=str,
        default=None,
        help='Console log level (DEBUG, INFO, WARNING, ...)'
    )

    parser.add_argument(
        '--no-color',
        action='store_true',
        help='Disable colored console logs'
    )


def parse_map_type(parser):
    parser.add_argument(
        'go_type',
        type=str,
        help='A Go type expression, e.g. "map[string][]*User"'
    )

    parser.add_argument(
        '--alias',
        '-a',
        action='append',
        default=[],
        metavar='NAME=TYPE',
        help='Declare a type alias available while mapping, can be repeated'
    )

    parser.add_argument(
        '--type-param',
        '-t',
        action='append',
        default=[],
        help='Name of an enclosing generic type parameter, can be repeated'
    )

    parser.add_argument(
        '--config',
        '-c',
        type=str,
        dest='config_file',
        help='The configuration file to use'
    )


def convert(parser, args):
    config = utils.try_load_config(args.config_file)
    input_dir = args.input_dir or config.get("general", {}).get("input_dir", ".")
    if not os.path.isdir(input_dir):
        parser.error(f'Input directory does not exist: {input_dir}')

    try:
        result = Go2TS.convert(
            input_dir,
            args.output_file,
            config=config,
            console_level_override=args.log_level,
            disable_color=args.no_color,
        )
    except Go2TSError as e:
        print(f'❌ {e}', file=sys.stderr)
        sys.exit(1)

    print(f'✅ Generated {result.output_file} '
          f'({result.struct_count} structs, {result.alias_count} aliases '
          f'from {len(result.files)} files)')


def map_type(parser, args):
    aliases = {}
    for entry in args.alias:
        if '=' not in entry:
            parser.error(f'Invalid alias {entry!r}, expected NAME=TYPE')
        name, underlying = entry.split('=', 1)
        aliases[name.strip()] = underlying.strip()

    config = utils.try_load_config(args.config_file)
    mapper = TypeMapper(
        aliases,
        extra_types=config.get("types", {}).get("overrides", {}),
        parenthesize_union_elements=config.get("mapper", {}).get("parenthesize_union_elements", False),
    )
    print(mapper.map_type(args.go_type, args.type_param) or 'any')


def main():
    parser = argparse.ArgumentParser(
        description='go2ts: generate TypeScript types from Go structs'
    )

    subparsers = parser.add_subparsers(
        dest='subcommand',
        description='valid subcommands for go2ts',
        help='Use one of these subcommands followed by -h for additional help',
        required=True
    )

    convert_parser = subparsers.add_parser(
        'convert',
        help='Convert Go structs and type declarations into a TypeScript file'
    )

    map_type_parser = subparsers.add_parser(
        'map-type',
        help='Print the TypeScript type for a single Go type expression'
    )

    parse_convert(convert_parser)
    parse_map_type(map_type_parser)

    args = parser.parse_args()

    match args.subcommand:
        case 'convert':
            convert(convert_parser, args)
        case 'map-type':
            map_type(map_type_parser, args)
        case _:
            parser.print_help()


if __name__ == '__main__':
    main()
