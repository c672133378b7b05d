"""Tests for the npm installer and executable helpers."""

import stat
import subprocess
from pathlib import Path

import pytest

from lsp_sessions.errors import (
    InstallError,
    MissingExecutableError,
    SessionConfigurationError,
)
from lsp_sessions.install import NpmInstaller, format_vspackage_url, has_bins

TOOLS = {"sh", "npm", "mkdir"}


def _make_executable(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def _fake_has_bins(available: set[str]):
    """has_bins stand-in: named tools from ``available``, paths by existence."""

    def has_bins(*names):
        return all(
            name.exists() if isinstance(name, Path) else name in available
            for name in names
        )

    return has_bins


@pytest.fixture()
def installer(tmp_path: Path) -> NpmInstaller:
    return NpmInstaller(
        server_name="tsserver",
        packages=["typescript", "typescript-language-server"],
        binaries=["typescript-language-server"],
        install_root=tmp_path / "servers",
    )


class TestHasBins:
    def test_executable_path(self, tmp_path: Path) -> None:
        tool = _make_executable(tmp_path / "tool")

        assert has_bins(str(tool))
        assert has_bins(tool)

    def test_all_names_must_exist(self, tmp_path: Path) -> None:
        tool = _make_executable(tmp_path / "tool")

        assert not has_bins(str(tool), str(tmp_path / "missing"))

    def test_non_executable_file(self, tmp_path: Path) -> None:
        plain = tmp_path / "plain"
        plain.write_text("data")

        assert not has_bins(str(plain))

    def test_no_names(self) -> None:
        assert has_bins()


class TestNpmInstallerSetup:
    def test_layout(self, installer: NpmInstaller, tmp_path: Path) -> None:
        assert installer.install_dir == tmp_path / "servers" / "tsserver"
        assert installer.bin_dir == installer.install_dir / "node_modules" / ".bin"
        assert installer.bin_path("tsc") == installer.bin_dir / "tsc"

    def test_info_before_install(self, installer: NpmInstaller) -> None:
        info = installer.info()

        assert info.is_installed is False
        assert info.binaries == {
            "typescript-language-server": installer.bin_dir / "typescript-language-server"
        }

    def test_info_after_binaries_appear(self, installer: NpmInstaller) -> None:
        _make_executable(installer.bin_path("typescript-language-server"))

        assert installer.info().is_installed is True

    def test_empty_lists_never_look_installed(self, tmp_path: Path) -> None:
        with pytest.raises(SessionConfigurationError) as exc_info:
            NpmInstaller("srv", packages=[], binaries=[], install_root=tmp_path)

        assert "non-empty list" in exc_info.value.message

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"server_name": ""},
            {"server_name": None},
            {"packages": "typescript"},
            {"packages": ["typescript", ""]},
            {"packages": []},
            {"binaries": []},
            {"binaries": [1]},
            {"post_install_script": ["echo"]},
        ],
    )
    def test_invalid_arguments(self, tmp_path: Path, kwargs: dict) -> None:
        arguments = {
            "server_name": "tsserver",
            "packages": ["typescript"],
            "binaries": ["tsserver"],
            "install_root": tmp_path,
        }
        arguments.update(kwargs)

        with pytest.raises(SessionConfigurationError):
            NpmInstaller(**arguments)


class TestNpmInstall:
    def test_skips_when_binaries_on_path(
        self, installer: NpmInstaller, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            "lsp_sessions.install.npm.has_bins",
            _fake_has_bins({"typescript-language-server"}),
        )

        def no_run(*args, **kwargs):
            raise AssertionError("npm should not run")

        monkeypatch.setattr(subprocess, "run", no_run)

        info = installer.install()

        assert info.install_dir == installer.install_dir

    def test_missing_tools(
        self, installer: NpmInstaller, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            "lsp_sessions.install.npm.has_bins", _fake_has_bins({"sh", "mkdir"})
        )

        with pytest.raises(MissingExecutableError) as exc_info:
            installer.install()
        assert exc_info.value.names == ["npm"]

    def test_already_installed_in_private_dir(
        self, installer: NpmInstaller, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        installer.bin_dir.mkdir(parents=True)
        installer.bin_path("typescript-language-server").write_text("")
        monkeypatch.setattr("lsp_sessions.install.npm.has_bins", _fake_has_bins(TOOLS))
        monkeypatch.setattr(
            subprocess,
            "run",
            lambda *a, **k: pytest.fail("npm should not run"),
        )

        assert installer.install().is_installed

    def test_runs_install_script(
        self, installer: NpmInstaller, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls = []

        def fake_run(args, input, capture_output, text):
            calls.append((args, input))
            installer.bin_dir.mkdir(parents=True)
            installer.bin_path("typescript-language-server").write_text("")
            return subprocess.CompletedProcess(args, 0, stdout="added 2 packages", stderr="")

        monkeypatch.setattr("lsp_sessions.install.npm.has_bins", _fake_has_bins(TOOLS))
        monkeypatch.setattr(subprocess, "run", fake_run)

        info = installer.install()

        assert info.is_installed
        (args, script), = calls
        assert args == ["sh"]
        assert f"mkdir -p {installer.install_dir}" in script
        assert "npm install typescript typescript-language-server" in script

    def test_post_install_script_is_appended(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        installer = NpmInstaller(
            "elm",
            ["@elm-tooling/elm-language-server"],
            ["elm-language-server"],
            tmp_path,
            post_install_script="echo done",
        )
        scripts = []

        def fake_run(args, input, capture_output, text):
            scripts.append(input)
            installer.bin_dir.mkdir(parents=True)
            installer.bin_path("elm-language-server").write_text("")
            return subprocess.CompletedProcess(args, 0, stdout="", stderr="")

        monkeypatch.setattr("lsp_sessions.install.npm.has_bins", _fake_has_bins(TOOLS))
        monkeypatch.setattr(subprocess, "run", fake_run)

        installer.install()

        assert scripts[0].rstrip().endswith("echo done")

    def test_failed_install(
        self, installer: NpmInstaller, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("lsp_sessions.install.npm.has_bins", _fake_has_bins(TOOLS))
        monkeypatch.setattr(
            subprocess,
            "run",
            lambda args, **kwargs: subprocess.CompletedProcess(
                args, 1, stdout="", stderr="npm ERR! 404\n"
            ),
        )

        with pytest.raises(InstallError) as exc_info:
            installer.install()
        assert exc_info.value.server_name == "tsserver"
        assert exc_info.value.details == {"output": "npm ERR! 404"}

    def test_success_without_binaries_is_an_error(
        self, installer: NpmInstaller, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("lsp_sessions.install.npm.has_bins", _fake_has_bins(TOOLS))
        monkeypatch.setattr(
            subprocess,
            "run",
            lambda args, **kwargs: subprocess.CompletedProcess(args, 0, stdout="", stderr=""),
        )

        with pytest.raises(InstallError):
            installer.install()


class TestFormatVspackageUrl:
    def test_builds_marketplace_url(self) -> None:
        url = format_vspackage_url("dbaeumer.vscode-eslint")

        assert url == (
            "https://marketplace.visualstudio.com/_apis/public/gallery/"
            "publishers/dbaeumer/vsextensions/vscode-eslint/latest/vspackage"
        )

    @pytest.mark.parametrize("name", ["eslint", "a.b.c", ".pkg", "pub."])
    def test_rejects_malformed_names(self, name: str) -> None:
        with pytest.raises(ValueError):
            format_vspackage_url(name)
