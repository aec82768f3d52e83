"""Command-line interface for build-id."""

import sys
from pathlib import Path

import click

from buildid_cli.errors import (
    BuildIdError,
    EXIT_BAD_DIRECTORY,
    EXIT_BAD_DOCUMENT_OPTION,
    EXIT_BAD_OUTPUT_FILE,
    EXIT_BAD_PROJECT_NAME,
    EXIT_ITEM_FAILED,
    EXIT_MISSING_ITEM,
    EXIT_UNRECOGNIZED_ITEM,
    EXIT_UNRECOGNIZED_OPTION,
)
from buildid_cli.models import BuildInfo
from buildid_cli.output import Item, emit_item, write_if_changed
from buildid_cli.utils.console import _rich_debug, _rich_error, set_verbose
from buildid_cli.version import get_version

PROG_NAME = "build-id"

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

# Exit codes for usage errors, by the parameter that was rejected
PARAM_EXIT_CODES = {
    "directory": EXIT_BAD_DIRECTORY,
    "out_file": EXIT_BAD_OUTPUT_FILE,
    "project_name": EXIT_BAD_PROJECT_NAME,
    "changelog": EXIT_BAD_DOCUMENT_OPTION,
    "readme": EXIT_BAD_DOCUMENT_OPTION,
}


def _items_epilog():
    # \b keeps click from rewrapping the list
    lines = ["\b", "Possible items:", ""]
    lines += [f"    {name}" for name in Item.names()]
    return "\n".join(lines)


def print_version(ctx, param, value):
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    click.echo(f"{PROG_NAME} version {get_version()}")
    ctx.exit()


def _require_non_empty(ctx, param, value):
    if value is not None and not str(value).strip():
        raise click.BadParameter("must not be empty", ctx=ctx, param=param)
    return value


def _validate_out_file(ctx, param, value):
    value = _require_non_empty(ctx, param, value)
    if value is not None and not Path(value).parent.is_dir():
        raise click.BadParameter(f"directory of {value!r} does not exist", ctx=ctx, param=param)
    return value


def usage_exit_code(error):
    """Map a click usage error to the exit code scripts expect."""
    param = getattr(error, "param", None)
    if param is not None and param.name == "item":
        if isinstance(error, click.MissingParameter):
            return EXIT_MISSING_ITEM
        return EXIT_UNRECOGNIZED_ITEM
    if param is not None and param.name in PARAM_EXIT_CODES:
        return PARAM_EXIT_CODES[param.name]
    return EXIT_UNRECOGNIZED_OPTION


@click.command(context_settings=CONTEXT_SETTINGS, epilog=_items_epilog(),
               help="Print build information for project under Git")
@click.argument("item", type=click.Choice(Item.names()), metavar="ITEM")
@click.option("--directory", "-d", default=".", show_default=True,
              type=click.Path(exists=True, file_okay=False, dir_okay=True),
              help="Get information for DIRECTORY")
@click.option("--file", "-f", "out_file", type=click.Path(dir_okay=False),
              callback=_validate_out_file,
              help="Write information to FILE (only touched when the content changes)")
@click.option("--project-name", "-n", callback=_require_non_empty,
              help="Specify project name (default: repository directory name)")
@click.option("--changelog", "-c", type=click.Path(dir_okay=False),
              help="Read the version from this changelog")
@click.option("--readme", "-r", type=click.Path(dir_okay=False),
              help="Read the project description from this readme")
@click.option("--verbose", "-v", is_flag=True, help="Print diagnostic messages to stderr")
@click.option("--version", is_flag=True, callback=print_version,
              expose_value=False, is_eager=True, help="Show version and exit.")
@click.pass_context
def cli(ctx, item, directory, out_file, project_name, changelog, readme, verbose):
    """Main entry point for the build-id CLI."""
    set_verbose(verbose)
    selected = Item(item)

    try:
        info = BuildInfo.from_directory(
            directory,
            project_name=project_name,
            changelog=changelog,
            readme=readme,
        )
        _rich_debug(f"Project {info.project_name} (prefix {info.project_prefix})")

        if out_file:
            status = write_if_changed(out_file, lambda fh: emit_item(selected, info, fh))
        else:
            status = emit_item(selected, info, sys.stdout)
    except BuildIdError as e:
        _rich_error(f"Error: {e}")
        sys.exit(e.exit_code)

    ctx.exit(status)


def main(argv=None):
    """Main entry point for the console script.

    Runs click outside standalone mode so usage errors can be mapped to the
    exit codes of the individual options.
    """
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        # Usage goes to stderr so stdout only ever carries item output
        ctx = click.Context(cli, info_name=PROG_NAME, **cli.context_settings)
        click.echo(cli.get_help(ctx), err=True)
        sys.exit(0)

    try:
        status = cli.main(args=args, prog_name=PROG_NAME, standalone_mode=False)
    except click.UsageError as e:
        e.show()
        sys.exit(usage_exit_code(e))
    except click.Abort:
        _rich_error("Aborted!")
        sys.exit(EXIT_ITEM_FAILED)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except Exception as e:
        _rich_error(f"Error: {e}")
        sys.exit(EXIT_ITEM_FAILED)

    sys.exit(status or 0)


if __name__ == "__main__":
    main()
