import sys
from argparse import (
    ArgumentParser,
    ArgumentDefaultsHelpFormatter,
    RawTextHelpFormatter
)

from ..benchmarks.run_benchmark import DEFAULT_TOTAL_ENTRIES, DEFAULT_TOTAL_RUNS, run_benchmarks
from ..core.bundler import bundle_site
from ..core.models import DEFAULT_HOST, DEFAULT_PAGE, DEFAULT_PORT, ServerConfig
from ..core.reader import ArchiveReader
from ..utils.common import get_logger, quiet_logger, terminate, to_posix, unpack_error
from ..utils.exceptions import (
    ErrorCodes,
    BundleError,
    InvalidConfig,
    NotAnArchive,
)
from ..web.app import run_server


NOT_AN_ARCHIVE_MSG = "There is no Zip archive here. Exiting."
COMMANDS = ("serve", "list", "bundle", "run_benchmarks")



def serve(args):
    verbose = not args.quiet
    logger = quiet_logger() if not verbose else get_logger()

    try:
        config = ServerConfig(
            archive_file=args.archive or sys.argv[0],
            host=args.host,
            port=args.port,
            default_page=args.defaultpage,
            reopen=args.reopen,
            verbose=verbose,
        )
    except InvalidConfig as ic:
        logger.error(unpack_error(ic))
        terminate(ErrorCodes.CONFIG_ERROR)

    # The archive cannot change while the server is running,
    # so a single check before binding the port is enough.
    try:
        with ArchiveReader(config.archive_file) as archive:
            metadata = archive.metadata()
    except NotAnArchive as na:
        print(NOT_AN_ARCHIVE_MSG, file=sys.stderr)
        logger.debug(unpack_error(na))
        terminate(ErrorCodes.NOT_AN_ARCHIVE)

    logger.info(f"Found a valid Zip archive ({metadata.total_files} entries).")
    run_server(config)
    terminate(ErrorCodes.SUCCESS)



def list_archive_files(args):
    return_code = ErrorCodes.SUCCESS
    logger = get_logger()

    for archive_file in args.archives:
        try:
            with ArchiveReader(archive_file) as archive:
                if args.info:
                    logger.info(archive.metadata())
                else:
                    logger.info("\n".join(archive.list_names()))
        except NotAnArchive as na:
            logger.error(unpack_error(na))
            return_code = ErrorCodes.NOT_AN_ARCHIVE

    terminate(return_code)



def bundle(args):
    verbose = not args.quiet
    logger = quiet_logger() if not verbose else get_logger()

    try:
        output = bundle_site(args.content_dir, args.output, base=args.base, verbose=verbose)
    except BundleError as be:
        logger.error(unpack_error(be))
        terminate(ErrorCodes.from_exception(be))
    except OSError as e:
        logger.error(f"Could not write {args.output!r}: {e}")
        terminate(ErrorCodes.from_exception(e))

    logger.info(f"Run it with: {to_posix(output)} --port {DEFAULT_PORT}")
    terminate(ErrorCodes.SUCCESS)




def cli_parser(argv=None):
    # ─────────────── Main ArgParser ───────────────
    formatter_class = type(
        "CliFormatter",
        (RawTextHelpFormatter, ArgumentDefaultsHelpFormatter),
        {}
    )
    arg_parser = ArgumentParser(
        prog="zipserve",
        description="Serve the contents of a zip archive over HTTP, rendering Markdown and Org files to HTML.",
        formatter_class=formatter_class
    )
    subparsers = arg_parser.add_subparsers(dest="command")
    # ───────────────────────────────────────────────



    # ─────────────── Serve (default, no subcommand) ───────────────
    serve_parser = subparsers.add_parser("serve", formatter_class=formatter_class)
    serve_parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Set the port on which to run")
    serve_parser.add_argument("--defaultpage", default=DEFAULT_PAGE, help="Set the standard index page")
    serve_parser.add_argument("--host", default=DEFAULT_HOST, help="Set the address to bind to")
    serve_parser.add_argument(
        "--archive",
        help="Zip archive to serve (defaults to this program's own file)"
    )
    serve_parser.add_argument(
        "--reopen",
        action="store_true",
        help="Reopen the archive on every request instead of sharing one handle"
    )
    serve_parser.add_argument("-q", "--quiet", action="store_true", help="Suppress log output.")



    # ─────────────── List ─────────────────────────
    list_parser = subparsers.add_parser("list", aliases=(l_aliases := ("ls",)))
    list_parser.add_argument("--info", action="store_true", help="Show archive metadata instead of entry names.")
    list_parser.add_argument("archives", nargs="+", help="Archive(s) to list.")



    # ─────────────── Bundle ───────────────────────
    bundle_parser = subparsers.add_parser("bundle")
    bundle_parser.add_argument("content_dir", help="Directory whose files become the site.")
    bundle_parser.add_argument("-o", "--output", required=True, help="File to write.")
    bundle_parser.add_argument(
        "--base",
        help="Binary to append the content to (default: a runnable .pyz)"
    )
    bundle_parser.add_argument("-q", "--quiet", action="store_true", help="Suppress log output.")



    # ─────────────── Benchmarks ────────────────────
    benchmark_parser = subparsers.add_parser("run_benchmarks", formatter_class=formatter_class)
    benchmark_parser.add_argument(
        "-n", "--number-runs",
        type=int,
        default=DEFAULT_TOTAL_RUNS,
        help="Timed runs per strategy"
    )
    benchmark_parser.add_argument(
        "--entries",
        type=int,
        default=DEFAULT_TOTAL_ENTRIES,
        help="Entries in the generated archive"
    )

    sys_args = list(sys.argv[1:] if argv is None else argv)

    # Anything that is not a subcommand is a serve invocation.
    # A bundled site is started with only the serve options.
    if not sys_args or sys_args[0] not in (*COMMANDS, *l_aliases, "-h", "--help"):
        sys_args = ["serve", *sys_args]

    args = arg_parser.parse_args(sys_args)

    match args.command:
        case "run_benchmarks":
            run_benchmarks(num_runs=args.number_runs, num_entries=args.entries)
            terminate()
        case "list" | "ls":
            list_archive_files(args)
        case "bundle":
            bundle(args)
        case _:
            serve(args)
