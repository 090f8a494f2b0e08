"""Pipeline orchestration for generate/update runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from .checksum import ChecksumService
from .config import TmplgenConfig
from .destination import DistDir
from .errors import BuiltInPackageError, TemplateAlreadyExistsError
from .git.identity import GitIdentity
from .logging import get_logger
from .models import PkgInfo, PkgType, Template
from .registries import build_clients
from .registries.base import RegistryClient
from .renderer import TemplateBuilder
from .tables import StaticTables, default_tables
from .walker import DependencyWalker


@dataclass
class RunOptions:
    """What the user asked for on the command line."""

    pkg_name: str
    pkg_type: Optional[PkgType] = None
    force: bool = False
    update_version: bool = False
    update_all: bool = False
    prefix: bool = True

    @property
    def updating(self) -> bool:
        return self.update_version or self.update_all


@dataclass
class RunOutcome:
    """Result of a generate or update run."""

    path: Path
    template: Template
    pkg_type: PkgType
    updated: bool
    dependencies: List[str] = field(default_factory=list)


class Orchestrator:
    """Wires registries, renderer, destination and walker together."""

    def __init__(
        self,
        config: TmplgenConfig | None = None,
        *,
        clients: Mapping[PkgType, RegistryClient] | None = None,
        checksum: ChecksumService | None = None,
        identity: GitIdentity | None = None,
        destination: DistDir | None = None,
        tables: StaticTables | None = None,
    ) -> None:
        self.config = config or TmplgenConfig()
        self.tables = tables or default_tables()
        self.checksum = checksum or ChecksumService(
            timeout=self.config.http.timeout,
            retries=self.config.http.retries,
            backoff=self.config.http.backoff,
        )
        self.clients = clients or build_clients(self.config, self.checksum, self.tables)
        self.identity = identity or GitIdentity(override=self.config.maintainer)
        self._destination = destination
        self.logger = get_logger("orchestrator")

    @property
    def destination(self) -> DistDir:
        if self._destination is None:
            self._destination = DistDir.from_env(self.config.distdir)
        return self._destination

    def builder(self, pkg_name: str) -> TemplateBuilder:
        return TemplateBuilder(
            pkg_name,
            clients=self.clients,
            tables=self.tables,
            identity=self.identity,
            checksum=self.checksum,
            templates_dir=self.config.templates_dir,
        )

    def resolve_type(self, pkg_name: str, pkg_type: PkgType | None = None) -> PkgType:
        """Return ``pkg_type`` when pinned, otherwise ask every registry."""
        if pkg_type is not None:
            return pkg_type
        return self.builder(pkg_name).get_type().pkg_type  # type: ignore[return-value]

    def is_built_in(self, pkg_name: str, pkg_type: PkgType) -> bool:
        return self.builder(pkg_name).set_type(pkg_type).is_built_in()

    def fetch_record(self, pkg_name: str, pkg_type: PkgType) -> PkgInfo:
        return self.builder(pkg_name).set_type(pkg_type).get_info().pkg_info  # type: ignore[return-value]

    def generate(self, info: PkgInfo, pkg_type: PkgType, *, prefix: bool = True) -> Template:
        return self._builder_for(info, pkg_type).generate(prefix)

    def update(
        self, info: PkgInfo, pkg_type: PkgType, old_template: Template, *, update_all: bool
    ) -> Template:
        return self._builder_for(info, pkg_type).update(old_template, update_all)

    def walk_dependencies(self, info: PkgInfo, pkg_type: PkgType) -> List[str]:
        walker = DependencyWalker(
            fetch=self.fetch_record,
            render=lambda dep_info, dep_type: self.generate(dep_info, dep_type),
            destination=self.destination,
            tables=self.tables,
        )
        return walker.walk(info, pkg_type)

    def run(self, options: RunOptions) -> RunOutcome:
        """Generate or update the template for ``options.pkg_name`` and its dependencies."""
        if options.update_version and options.update_all:
            self.logger.warning("Specified both -u and -U! Will ignore -u")

        pkg_type = self.resolve_type(options.pkg_name, options.pkg_type)
        if self.is_built_in(options.pkg_name, pkg_type):
            raise BuiltInPackageError(options.pkg_name)

        info = self.fetch_record(options.pkg_name, pkg_type)
        if not options.prefix:
            info = info.without_prefix(pkg_type)

        destination = self.destination
        path = destination.template_path(info.pkg_name)

        if options.updating:
            old_template = destination.read(info.pkg_name)
            template = self.update(info, pkg_type, old_template, update_all=options.update_all)
        else:
            if path.exists() and not options.force:
                raise TemplateAlreadyExistsError(
                    f"Won't overwrite existing template '{path}' without `--force`!"
                )
            template = self.generate(info, pkg_type, prefix=options.prefix)

        written_path = destination.write(template)

        dependencies: List[str] = []
        if info.dependencies is not None and pkg_type is not PkgType.CRATE:
            dependencies = self.walk_dependencies(info, pkg_type)
            if dependencies:
                self.logger.info("Wrote %d dependency templates", len(dependencies))

        return RunOutcome(
            path=written_path,
            template=template,
            pkg_type=pkg_type,
            updated=options.updating,
            dependencies=dependencies,
        )

    def _builder_for(self, info: PkgInfo, pkg_type: PkgType) -> TemplateBuilder:
        builder = self.builder(info.pkg_name)
        return builder.set_type(pkg_type).set_info(info)


__all__ = ["Orchestrator", "RunOptions", "RunOutcome"]
