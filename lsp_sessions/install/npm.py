"""
Language-server installation through npm.

Each server gets its own directory below the install root; its binaries
end up in ``<install_root>/<server>/node_modules/.bin``.
"""

import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path

from ..errors import InstallError, MissingExecutableError, SessionConfigurationError
from ..sessions_logging import LogCategory, get_category_logger, session_extra
from .executables import has_bins

logger = get_category_logger(LogCategory.INSTALL)

INSTALL_SCRIPT = """set -e
mkdir -p {install_dir}
cd {install_dir}
npm install {packages}
{post_install_script}
"""


@dataclass
class InstallInfo:
    """Where a server is (or would be) installed and whether it is."""

    bin_dir: Path
    install_dir: Path
    binaries: dict[str, Path]
    is_installed: bool


def _validate_string_list(value: object, field_name: str) -> list[str]:
    if not value or not isinstance(value, list | tuple) or not all(
        isinstance(item, str) and item for item in value
    ):
        raise SessionConfigurationError(
            f"{field_name} must be a non-empty list of non-empty strings",
            suggestion=f"Pass {field_name} as a list, e.g. ['typescript-language-server']",
        )
    return list(value)


class NpmInstaller:
    """Installs a language server's npm packages into a private directory.

    Example:
        installer = NpmInstaller(
            server_name="tsserver",
            packages=["typescript", "typescript-language-server"],
            binaries=["typescript-language-server"],
            install_root=settings.install_dir,
        )
        if not installer.info().is_installed:
            installer.install()
    """

    REQUIRED_TOOLS = ("sh", "npm", "mkdir")

    def __init__(
        self,
        server_name: str,
        packages: list[str],
        binaries: list[str],
        install_root: Path,
        post_install_script: str | None = None,
    ):
        if not isinstance(server_name, str) or not server_name.strip():
            raise SessionConfigurationError("server_name must be a non-empty string")
        if post_install_script is not None and not isinstance(post_install_script, str):
            raise SessionConfigurationError("post_install_script must be a string")

        self.server_name = server_name.strip()
        self.packages = _validate_string_list(packages, "packages")
        self.binaries = _validate_string_list(binaries, "binaries")
        self.post_install_script = post_install_script or ""
        self.install_dir = Path(install_root) / self.server_name
        self.bin_dir = self.install_dir / "node_modules" / ".bin"

    def bin_path(self, name: str) -> Path:
        return self.bin_dir / name

    def info(self) -> InstallInfo:
        binaries = {name: self.bin_path(name) for name in self.binaries}
        return InstallInfo(
            bin_dir=self.bin_dir,
            install_dir=self.install_dir,
            binaries=binaries,
            is_installed=has_bins(*binaries.values()),
        )

    def install(self) -> InstallInfo:
        """Install the packages unless the binaries are already available.

        Returns:
            Install info after installation

        Raises:
            MissingExecutableError: If sh, npm or mkdir is missing
            InstallError: If the binaries are still missing afterwards
        """
        if has_bins(*self.binaries):
            logger.info(f"{self.server_name} is already installed (not by lsp_sessions)")
            return self.info()

        missing = [tool for tool in self.REQUIRED_TOOLS if not has_bins(tool)]
        if missing:
            raise MissingExecutableError(missing)

        info = self.info()
        if info.is_installed:
            logger.info(f"{self.server_name} is already installed")
            return info

        script = INSTALL_SCRIPT.format(
            install_dir=shlex.quote(str(self.install_dir)),
            packages=" ".join(shlex.quote(p) for p in self.packages),
            post_install_script=self.post_install_script,
        )
        logger.info(
            f"Installing {self.server_name} into {self.install_dir}",
            extra=session_extra(server_name=self.server_name, path=self.install_dir),
        )
        result = subprocess.run(
            ["sh"],
            input=script,
            capture_output=True,
            text=True,
        )
        if result.stdout:
            logger.debug(result.stdout)

        info = self.info()
        if result.returncode != 0 or not info.is_installed:
            raise InstallError(self.server_name, output=result.stderr or result.stdout)
        logger.info(f"Installed {self.server_name}")
        return info
