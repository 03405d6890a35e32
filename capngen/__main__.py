import argparse
import sys

import tomli as toml

from capngen import Capngen, thirdparty, utils
from capngen import logging as capngen_logging
from capngen.errors import CapngenError, CapnpCompileError

logger = capngen_logging.get_logger(__name__)


def parse_generate(parser):
    parser.add_argument(
        'inputs',
        nargs='+',
        help='Go source files, or JSON descriptor files ending in .json, processed in order'
    )

    parser.add_argument(
        '--out-dir',
        '-o',
        type=str,
        help='The directory to write the schema and translator into; print both to stdout when omitted'
    )

    parser.add_argument(
        '--config',
        '-c',
        type=str,
        dest='config_file',
        help='The configuration file to use'
    )

    parser.add_argument(
        '--package',
        type=str,
        help='Go package of the generated code, defaults to the package clause of the first input'
    )

    parser.add_argument(
        '--import-path',
        type=str,
        help='Value of $Go.import in the schema, defaults to the package name'
    )

    parser.add_argument(
        '--private',
        action='store_true',
        default=None,
        dest='extract_private',
        help='Also translate unexported struct fields'
    )

    parser.add_argument(
        '--validate',
        action='store_true',
        help='Compile the schema with capnp before writing anything and fail if it is rejected'
    )

    parser.add_argument(
        '--log-level',
        type=str,
        help='Console log level (DEBUG, INFO, WARNING, ERROR)'
    )

    parser.add_argument(
        '--log-dir',
        type=str,
        help='Also write log files into this directory'
    )


def _configure_logging_from_args(config, args):
    console_level = args.log_level
    if console_level is None and not args.out_dir:
        # stdout carries the generated code
        console_level = 'WARNING'
    capngen_logging.configure_logging(
        config,
        console_level_override=console_level,
        log_dir_override=args.log_dir,
        force_reconfigure=True,
    )


def generate(parser, args):
    try:
        config = utils.try_load_config(args.config_file)
        _configure_logging_from_args(config, args)

        runner = Capngen(
            config=config,
            package=args.package,
            import_path=args.import_path,
            extract_private=args.extract_private,
        )
        for path in args.inputs:
            runner.add_input(path)

        generated = runner.generate()
        if args.validate or config.get('capnp', {}).get('validate', False):
            runner.validate()

        if not args.out_dir:
            sys.stdout.write(generated.schema)
            sys.stdout.write('\n')
            sys.stdout.write(generated.translator)
            return 0

        runner.write(args.out_dir)
    except CapnpCompileError as e:
        logger.error('%s', e)
        if e.diagnostics:
            logger.error('%s', e.diagnostics)
        return 1
    except (CapngenError, OSError, toml.TOMLDecodeError) as e:
        logger.error('%s', e)
        return 1
    return 0


def check_requirements(parser, args):
    missing = thirdparty.check_all_requirements()
    if missing:
        print(f'Missing requirements: {", ".join(missing)}', file=sys.stderr)
        return 1
    print('All requirements are satisfied')
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='capngen: generate Cap\'n Proto schemas and Go translators from Go structs'
    )

    subparsers = parser.add_subparsers(
        dest='subcommand',
        description='valid subcommands for capngen',
        help='Use one of these subcommands followed by -h for additional help',
        required=True
    )

    generate_parser = subparsers.add_parser(
        'generate',
        help='Generate a schema and a translator from struct declarations'
    )

    subparsers.add_parser(
        'check-requirements',
        help='Check that the external tools capngen can use are installed'
    )

    parse_generate(generate_parser)

    args = parser.parse_args(argv)

    match args.subcommand:
        case 'generate':
            return generate(parser, args)
        case 'check-requirements':
            return check_requirements(parser, args)
        case _:
            parser.print_help()
            return 2


if __name__ == '__main__':
    sys.exit(main())
