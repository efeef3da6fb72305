"""
Reconciliation of module requests against the source root.

For every request the reconciler prefers a module cache copy (no network),
then falls back to locating, cloning and checking out the repository. Module
paths served by another path's checkout get a symbolic link. Failures are
reported per request and never stop the run.

For repositories shared by several module paths only one version can be
checked out: the last request processed wins.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional

from gopathlink.constants import LinkResult, Outcome
from gopathlink.context import RunContext
from gopathlink.exceptions import DestinationConflictError, UnlocatableError
from gopathlink.git.checkout import checkout_version, is_default_version
from gopathlink.git.locator import locate, reconcile_alias
from gopathlink.linker.symlinks import SymlinkManager
from gopathlink.modcache import find_in_cache
from gopathlink.model.repo import LocateResult
from gopathlink.model.request import ModuleRequest, RequestReport
from gopathlink.utils import is_repo

logger = logging.getLogger(__name__)


class Reconciler:
    """Drives module requests through the module cache, locator and checkout."""

    def __init__(self, ctx: RunContext):
        self.ctx = ctx
        self.links = SymlinkManager(ctx.source_root, ctx.vcs, overwrite=ctx.overwrite)

    def process(self, requests: Iterable[ModuleRequest]) -> List[RequestReport]:
        """
        Process requests strictly in the given order.

        Callers order batch input with order_requests(); streamed input is
        passed through in arrival order.
        """
        reports = []
        with self.links.lock:
            for request in requests:
                report = self.process_one(request)
                reports.append(report)
        return reports

    def process_one(self, request: ModuleRequest) -> RequestReport:
        ctx = self.ctx
        if request.key in ctx.processed:
            logger.debug(f"{request}: already processed in this run")
            return RequestReport(request=request, outcome=Outcome.ALREADY_PROCESSED)

        dest = ctx.destination(request.path)
        if dest.is_symlink() and request.version in os.path.realpath(dest):
            logger.debug(f"{request}: already linked as {dest}")
            return RequestReport(request=request, outcome=Outcome.ALREADY_LINKED)

        hit = find_in_cache(request.path, request.version, ctx.modcache_dir)
        if hit is not None:
            return self._link_module(request, dest, hit.local_dir, hit.version)

        if (
            not ctx.overwrite
            and not is_default_version(request.version)
            and not dest.is_symlink()
            and is_repo(dest)
            and ctx.vcs.head_matches(dest, request.version)
        ):
            logger.debug(f"{request}: checkout at {dest} already at the version")
            ctx.processed.add(*request.key)
            return RequestReport(request=request, outcome=Outcome.ALREADY_SATISFIED)

        try:
            return self._resolve_repository(request, dest)
        except UnlocatableError as e:
            logger.info(str(e))
            return RequestReport(
                request=request, outcome=Outcome.UNLOCATABLE, message=str(e)
            )

    def _link_module(
        self, request: ModuleRequest, dest: Path, target: Path, version: str
    ) -> RequestReport:
        try:
            result = self.links.link(dest, target, version)
        except DestinationConflictError as e:
            logger.warning(f"{request}: {e}")
            return RequestReport(
                request=request, outcome=Outcome.CONFLICT, message=str(e)
            )

        self.ctx.processed.add(request.path, version)
        self.ctx.processed.add(*request.key)
        if result is LinkResult.SATISFIED:
            logger.debug(f"{request}: {dest} already at the version")
            return RequestReport(request=request, outcome=Outcome.ALREADY_SATISFIED)

        logger.info(f"{request.path}@{version}: linked module as {dest}")
        return RequestReport(
            request=request, outcome=Outcome.LINKED_MODULE, target=str(target)
        )

    def _resolve_repository(self, request: ModuleRequest, dest: Path) -> RequestReport:
        ctx = self.ctx
        located = locate(request.path, ctx)
        if located is None:
            raise UnlocatableError(request.path, request.version)

        result = checkout_version(
            located.repo_root.local_dir, request.version, request.basename, ctx
        )
        if not result.ok:
            logger.warning(
                f"{request}: could not check out {located.canonical_path} at any ref"
            )

        ctx.processed.add(*request.key)
        ctx.processed.add(located.canonical_path, request.version)

        alias_target = self._alias_target(located)
        if alias_target is not None:
            target = ctx.destination(alias_target)
            try:
                self.links.link(dest, target, request.version)
            except DestinationConflictError as e:
                logger.warning(f"{request}: {e}")
                return RequestReport(
                    request=request, outcome=Outcome.CONFLICT, message=str(e)
                )
            logger.info(f"{request}: linked alias {alias_target} as {dest}")
            return RequestReport(
                request=request, outcome=Outcome.LINKED_ALIAS, target=alias_target
            )

        if not dest.exists():
            raise UnlocatableError(request.path, request.version)

        strategy = result.strategy.name if result.strategy else "none"
        logger.info(f"{request}: checked out {located.canonical_path} ({strategy})")
        return RequestReport(
            request=request,
            outcome=Outcome.CHECKED_OUT,
            target=located.canonical_path,
        )

    def _alias_target(self, located: LocateResult) -> Optional[str]:
        alias = located.alias
        if alias is None:
            return None
        return reconcile_alias(alias.requested_path, alias.discovered_path, self.ctx)
