"""Tests for the stager command line."""

import json

import pytest

from stager.main import main

from conftest import write_file


class TestResolveCommand:

    def test_multi_config_debug(self, capsys):
        assert main(["resolve", "bin", "plugins", "--variant", "Debug",
                     "--platform", "windows", "--multi-config"]) == 0
        assert capsys.readouterr().out.strip() == "bin_debug/plugins"

    def test_single_config(self, capsys):
        assert main(["r", "/opt//pkg/", "/lib/", "--variant", "Debug", "--platform", "linux"]) == 0
        assert capsys.readouterr().out.strip() == "/opt/pkg/lib"


class TestVersionCommand:

    def test_matched(self, capsys):
        assert main(["version", "2.13"]) == 0
        assert capsys.readouterr().out.strip() == "major=2 minor=13 patch=0"

    def test_unmatched(self, capsys):
        assert main(["version", "v2"]) == 1
        captured = capsys.readouterr()
        assert "does not match" in captured.err


class TestInstallCommand:

    def test_install_with_manifest(self, tmp_path, build_dir, source_dir, capsys):
        write_file(source_dir / "license.txt")
        description = write_file(tmp_path / "install.toml",
                                 '[[steps]]\nop = "install-files"\nfiles = ["license.txt"]\n'
                                 'destinations = ["share/doc"]\n')
        config = write_file(tmp_path / "stager.toml", '[package]\nname = "CloudCompare"\n')
        manifest = tmp_path / "install_manifest.json"

        code = main([
            "install", str(description), "--config", str(config),
            "--prefix", str(tmp_path / "prefix"),
            "--build-dir", str(build_dir), "--source-dir", str(source_dir),
            "--platform", "linux", "--manifest", str(manifest),
        ])

        assert code == 0
        assert (tmp_path / "prefix" / "share" / "doc" / "license.txt").exists()
        assert json.loads(manifest.read_text())["records"][0]["destination"] == "share/doc/license.txt"
        assert "installed 1 of 1 file(s)" in capsys.readouterr().out

    def test_dry_run(self, tmp_path, source_dir, capsys):
        write_file(source_dir / "license.txt")
        description = write_file(tmp_path / "install.toml",
                                 '[[steps]]\nop = "install-files"\nfiles = ["license.txt"]\n'
                                 'destinations = ["share"]\n')
        code = main(["install", str(description), "--config", str(tmp_path / "none.toml"),
                     "--prefix", str(tmp_path / "prefix"), "--source-dir", str(source_dir),
                     "--dry-run"])
        assert code == 0
        assert not (tmp_path / "prefix").exists()
        assert "installed 0 of 1 file(s)" in capsys.readouterr().out

    def test_errors_are_reported(self, tmp_path, capsys):
        code = main(["install", str(tmp_path / "missing.toml"), "--config", str(tmp_path / "none.toml")])
        assert code == 1
        assert "Build description not found" in capsys.readouterr().err

    def test_invalid_variant_choice(self):
        with pytest.raises(SystemExit):
            main(["install", "x.toml", "--variant", "Profile"])

    def test_unquoted_version_is_a_clean_error(self, tmp_path, source_dir, capsys):
        write_file(source_dir / "cmake" / "CloudCompareConfig.cmake.in", "@PACKAGE_INIT@\n")
        description = write_file(tmp_path / "install.toml", '[[steps]]\nop = "package-config"\nversion = 2.13\n')
        config = write_file(tmp_path / "stager.toml", '[package]\nname = "CloudCompare"\n')

        code = main(["install", str(description), "--config", str(config),
                     "--prefix", str(tmp_path / "prefix"), "--build-dir", str(tmp_path / "build"),
                     "--source-dir", str(source_dir)])

        assert code == 1
        assert "Package version must be a quoted string, got 2.13" in capsys.readouterr().err

    def test_plugin_dependencies_reported(self, tmp_path, build_dir, capsys):
        write_file(build_dir / "plugins" / "libQE57_IO.so")
        description = write_file(tmp_path / "install.toml", (
            '[[targets]]\nname = "QE57_IO"\nkind = "plugin"\nplugin_type = "io"\n'
            '[targets.outputs.Default]\nlibrary = "plugins/libQE57_IO.so"\n\n'
            '[[steps]]\nop = "install-plugins"\ndest_path = "plugins"\ntypes = "io"\n'
        ))
        config = write_file(tmp_path / "stager.toml", '[package]\nname = "CloudCompare"\n')
        manifest = tmp_path / "install_manifest.json"

        code = main(["install", str(description), "--config", str(config),
                     "--prefix", str(tmp_path / "prefix"), "--build-dir", str(build_dir),
                     "--platform", "linux", "--manifest", str(manifest)])

        assert code == 0
        assert json.loads(manifest.read_text())["dependencies"] == {"CloudCompare": ["QE57_IO"]}
        assert "CloudCompare is built after: QE57_IO" in capsys.readouterr().out
