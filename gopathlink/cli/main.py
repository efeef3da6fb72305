"""gopathlink CLI"""

import sys
from collections import Counter
from typing import List, Optional

import click
from pydantic import ValidationError

from gopathlink import __version__
from gopathlink.config import (
    get_max_redirects,
    get_module_cache_dir,
    get_source_root,
)
from gopathlink.context import RunContext
from gopathlink.git.discovery import HttpSourceClient
from gopathlink.git.vcs import GitClient
from gopathlink.io.requests_input import (
    order_requests,
    parse_request_arg,
    read_requests,
)
from gopathlink.linker.reconciler import Reconciler
from gopathlink.model.request import ModuleRequest

from gopathlink.cli.utils.logging import logger
from .debug import add_debug_option

STDIN = "-"


def _collect_requests(modules, input_file: Optional[str]) -> List[ModuleRequest]:
    requests = []
    for token in modules:
        try:
            requests.append(parse_request_arg(token))
        except ValidationError:
            logger.warning(f"Ignoring invalid module argument {token!r}")
    if input_file == STDIN:
        requests.extend(read_requests(sys.stdin, echo=click.echo))
    elif input_file is not None:
        with open(input_file, "r") as f:
            requests.extend(read_requests(f, echo=click.echo))
    return order_requests(requests)


def _build_context(overwrite: bool) -> RunContext:
    try:
        source_root = get_source_root().resolve()
    except PermissionError as e:
        logger.error(f"Cannot create the source root: {e}")
        sys.exit(1)

    return RunContext(
        source_root=source_root,
        modcache_dir=get_module_cache_dir(),
        vcs=GitClient(),
        http=HttpSourceClient(),
        overwrite=overwrite,
        max_redirects=get_max_redirects(),
    )


@click.command(
    name="gopathlink",
    context_settings=dict(help_option_names=["-h", "--help"]),
)
@click.version_option(__version__, prog_name="gopathlink")
@click.option(
    "--info",
    "-i",
    is_flag=True,
    default=False,
    help="List the symbolic links in the source root and exit.",
)
@click.option(
    "--clean",
    "-c",
    is_flag=True,
    default=False,
    help="Remove links into the module cache and exit.",
)
@click.option(
    "--file",
    "-f",
    "input_file",
    type=click.Path(exists=True, allow_dash=True, dir_okay=False),
    default=None,
    help="Read go tool output from a file ('-' for stdin).",
)
@click.option(
    "--overwrite",
    "-o",
    is_flag=True,
    default=False,
    help="Replace existing destinations (arguments or --file only).",
)
@click.argument("modules", nargs=-1)
@click.pass_context
def cli(ctx, info, clean, input_file, overwrite, modules):
    """
    Make go modules available in a flat GOPATH source tree.

    MODULES are given as path[@version] (version defaults to master). Without
    arguments or --file, go tool output is read from stdin and the modules it
    is extracting or downloading are linked or checked out as they appear.
    """
    ctx.ensure_object(dict)

    streaming = not modules and (input_file is None or input_file == STDIN)
    if overwrite and streaming:
        logger.warning("Overwrite mode needs module arguments or a file; ignoring it")
        overwrite = False

    run_ctx = _build_context(overwrite)
    reconciler = Reconciler(run_ctx)
    links = reconciler.links

    with links.lock:
        if clean:
            failures = links.clean_module_links(run_ctx.modcache_dir)
            sys.exit(1 if failures else 0)

        purge_failures = links.purge_broken()

        if info:
            for src, dst in links.describe_links():
                click.echo(f"{src:<55} -> {dst}")
            sys.exit(0)

        if streaming:
            requests = read_requests(sys.stdin, echo=click.echo)
        else:
            requests = _collect_requests(modules, input_file)

        reports = reconciler.process(requests)

    outcomes = Counter(report.outcome.value for report in reports)
    logger.debug(
        f"Processed {len(reports)} request(s): "
        + ", ".join(f"{name}={count}" for name, count in sorted(outcomes.items()))
    )
    sys.exit(1 if purge_failures else 0)


add_debug_option(cli)

if __name__ == "__main__":
    cli(obj={})
