"""Generates new xbps-src templates and updates existing ones."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .builtin_filter import is_built_in
from .checksum import ChecksumService
from .config import TmplgenConfig
from .dependencies import join_dependencies
from .document import TemplateDocument
from .errors import MissingPrerequisiteError
from .git.identity import GitIdentity
from .licenses import render_licenses
from .logging import get_logger
from .models import PkgInfo, PkgType, Template
from .provider import identify
from .registries import build_clients
from .registries.base import RegistryClient
from .tables import StaticTables, default_tables

logger = get_logger("renderer")

SKELETON_NAME = "template.in"
DESCRIPTION_WARN_LENGTH = 80

_VLICENSE_MARKERS = ("MIT", "ISC", "BSD")


class TemplateBuilder:
    """Collects a package's type and metadata and turns them into a template.

    ``get_type``/``set_type`` and ``get_info``/``set_info`` fill in the state
    that ``generate`` and ``update`` need; calling a step before its
    prerequisites raises :class:`MissingPrerequisiteError`.
    """

    def __init__(
        self,
        pkg_name: str,
        *,
        clients: Mapping[PkgType, RegistryClient] | None = None,
        tables: StaticTables | None = None,
        identity: GitIdentity | None = None,
        checksum: ChecksumService | None = None,
        templates_dir: Path | None = None,
    ) -> None:
        self.pkg_name = pkg_name
        self.pkg_type: Optional[PkgType] = None
        self.pkg_info: Optional[PkgInfo] = None
        self._clients = clients
        self._tables = tables or default_tables()
        self._identity = identity or GitIdentity()
        self._checksum = checksum
        self._env = _create_env(templates_dir)

    @classmethod
    def from_pkg_info(cls, pkg_info: PkgInfo, **kwargs: object) -> "TemplateBuilder":
        """Start from an already fetched record; the type still has to be set."""
        builder = cls(pkg_info.pkg_name, **kwargs)  # type: ignore[arg-type]
        builder.pkg_info = pkg_info
        return builder

    def get_type(self) -> "TemplateBuilder":
        """Ask every registry about ``pkg_name`` and keep the single match."""
        self.pkg_type = identify(self.pkg_name, self._require_clients())
        return self

    def set_type(self, pkg_type: PkgType) -> "TemplateBuilder":
        self.pkg_type = pkg_type
        return self

    def get_info(self) -> "TemplateBuilder":
        pkg_type = self._require("pkg_type", "Can't get PkgInfo without setting/getting PkgType first!")
        clients = self._require_clients()
        logger.info("Fetching %s from %s", self.pkg_name, pkg_type.platform)
        self.pkg_info = clients[pkg_type].fetch(self.pkg_name)
        return self

    def set_info(self, pkg_info: PkgInfo) -> "TemplateBuilder":
        self.pkg_info = pkg_info
        return self

    def is_built_in(self) -> bool:
        pkg_type = self._require(
            "pkg_type", "Can't check if Pkg is built in without setting/getting PkgType first!"
        )
        return is_built_in(self.pkg_name, pkg_type, self._tables)

    def generate(self, prefix: bool = True) -> Template:
        """Render a fresh template from the stored record.

        With ``prefix`` disabled no ``wrksrc`` is emitted, since the package
        name no longer carries the prefix the expression would strip.
        """
        info: PkgInfo = self._require(
            "pkg_info", "Can't write a new template without setting PkgInfo first!"
        )
        pkg_type: PkgType = self._require(
            "pkg_type", "Can't write a new template without setting PkgType first!"
        )

        logger.info("Generating template for %s", info.pkg_name)

        license = self._license(info)
        values: Dict[str, Optional[str]] = {
            "pkgname": info.pkg_name,
            "version": info.version,
            "wrksrc": None,
            "noarch": None,
            "build_style": pkg_type.build_style,
            "hostmakedepends": None,
            "makedepends": None,
            "depends": None,
            "description": self._description(info),
            "maintainer": self._identity.resolve_maintainer(),
            "license": license,
            "homepage": info.homepage,
            "distfiles": info.download_url,
            "checksum": info.checksum,
        }

        deps = info.dependencies
        if deps is not None:
            values["hostmakedepends"] = _joined(deps.host, pkg_type)
            values["makedepends"] = _joined(deps.make, pkg_type)
            values["depends"] = _joined(deps.run, pkg_type)

        if pkg_type is PkgType.PERLDIST:
            values["noarch"] = "yes"
            if prefix:
                values["wrksrc"] = f"${{pkgname/{pkg_type.prefix}/}}-${{version}}"
        elif pkg_type is PkgType.GEM:
            values["noarch"] = "yes"
        else:
            values["depends"] = None

        vlicense = bool(license) and any(marker in license for marker in _VLICENSE_MARKERS)

        skeleton = self._env.get_template(SKELETON_NAME)
        content = skeleton.render(vlicense=vlicense, **values)
        return Template(content=content.rstrip("\n") + "\n", name=info.pkg_name)

    def update(self, old_template: Template, update_all: bool) -> Template:
        """Patch ``old_template`` to the stored record's version.

        Lines tmplgen does not manage survive untouched. With ``update_all``
        the homepage, description and distfiles are refreshed as well.
        """
        info: PkgInfo = self._require(
            "pkg_info", "Can't update template without setting PkgInfo first!"
        )

        logger.info("Updating template %s", info.pkg_name)

        document = TemplateDocument.parse(old_template.content)
        old_version = document.get("version")
        old_distfiles = document.get("distfiles")

        if old_version != info.version:
            if "revision" in document:
                document.set("revision", "1")
            document.set("version", info.version)

        if update_all:
            document.set("checksum", info.checksum)

            if not document.set("homepage", info.homepage):
                logger.warning("Couldn't find 'homepage' string and as such won't update it!")

            if info.description is None:
                logger.warning("%s has no description, won't update 'short_desc'!", info.pkg_name)
            elif not document.set("short_desc", _strip_period(info.description)):
                logger.warning("Couldn't find 'short_desc' string and as such won't update it!")

            if old_distfiles is None:
                logger.warning("Couldn't find 'distfiles' string and as such won't update it!")
            elif info.download_url is not None:
                document.set("distfiles", info.download_url)
        elif not old_distfiles or old_distfiles == info.download_url:
            document.set("checksum", info.checksum)
        else:
            url = old_distfiles.replace("${version}", info.version)
            document.set("checksum", self._require_checksum().compute(url))

        return Template(content=document.serialize(), name=info.pkg_name)

    def _description(self, info: PkgInfo) -> str:
        if info.description is None:
            logger.warning(
                "Couldn't determine field 'description'! Please add it to the template yourself."
            )
            return ""
        description = info.description
        if len(description) >= DESCRIPTION_WARN_LENGTH:
            logger.warning(
                "The description of the package %s is longer than %d characters; "
                "please shorten it to fit into the 'short_desc' field.",
                info.pkg_name,
                DESCRIPTION_WARN_LENGTH,
            )
        return _strip_period(description)

    def _license(self, info: PkgInfo) -> Optional[str]:
        license = render_licenses(info.license or (), self._tables)
        if not license:
            logger.warning(
                "Couldn't determine field 'license'! Please add it to the template yourself."
            )
            return None
        return license

    def _require(self, attribute: str, message: str) -> Any:
        value = getattr(self, attribute)
        if value is None:
            raise MissingPrerequisiteError(message)
        return value

    def _require_clients(self) -> Mapping[PkgType, RegistryClient]:
        if self._clients is None:
            self._clients = build_clients(TmplgenConfig(), self._require_checksum(), self._tables)
        return self._clients

    def _require_checksum(self) -> ChecksumService:
        if self._checksum is None:
            self._checksum = ChecksumService()
        return self._checksum


def _joined(specifiers: Optional[Sequence[str]], pkg_type: PkgType) -> Optional[str]:
    if not specifiers:
        return None
    return join_dependencies(specifiers, pkg_type).rstrip()


def _strip_period(text: str) -> str:
    return text[:-1] if text.endswith(".") else text


def _create_env(templates_dir: Path | None) -> Environment:
    directories = []
    if templates_dir:
        directories.append(str(templates_dir))
    directories.append(str(Path(__file__).with_name("templates")))
    return Environment(
        loader=FileSystemLoader(directories),
        variable_start_string="@",
        variable_end_string="@",
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


__all__ = ["DESCRIPTION_WARN_LENGTH", "SKELETON_NAME", "TemplateBuilder"]
