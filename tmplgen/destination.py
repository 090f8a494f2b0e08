"""Reading and writing templates inside an xbps-src checkout."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Mapping

from .errors import DistDirError, TemplateDoesNotExistError
from .logging import get_logger
from .models import PkgType, Template

logger = get_logger("destination")


class DistDir:
    """The ``XBPS_DISTDIR`` tree that templates are written into."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root).expanduser()

    @classmethod
    def from_env(
        cls, configured: Path | None = None, environ: Mapping[str, str] | None = None
    ) -> "DistDir":
        """Use ``configured`` if given, else ``$XBPS_DISTDIR``."""
        if configured is not None:
            return cls(configured)
        env = os.environ if environ is None else environ
        value = env.get("XBPS_DISTDIR")
        if not value:
            raise DistDirError(
                "Couldn't get XBPS_DISTDIR variable, please set it to where you want to "
                "write the template to!"
            )
        return cls(Path(value))

    def template_path(self, pkg_name: str) -> Path:
        return self.root / "srcpkgs" / pkg_name / "template"

    def exists(self, pkg_type: PkgType, bare_name: str) -> bool:
        """Return True when a template for the dependency ``bare_name`` is present."""
        pkg_name = f"{pkg_type.prefix}{pkg_type.strip_prefix(bare_name).replace('::', '-')}"
        return self.template_path(pkg_name).exists()

    def read(self, pkg_name: str) -> Template:
        path = self.template_path(pkg_name)
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise TemplateDoesNotExistError(
                f"Can't update non-existing template {pkg_name}"
            ) from exc
        return Template(content=content, name=pkg_name)

    def write(self, template: Template) -> Path:
        """Write ``template`` to ``srcpkgs/<name>/template``, replacing it atomically."""
        path = self.template_path(template.name)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".template.", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(template.content)
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.info("Wrote template %s", path)
        return path


__all__ = ["DistDir"]
