"""Tests for plugin installation."""

from pathlib import Path

import pytest

from stager.errors import UsageError
from stager.install import (
    BuildVariant,
    PluginInstallRequest,
    PluginOrchestrator,
    PluginType,
    Target,
    TargetKind,
    TargetOutputs,
)

from conftest import write_file


def make_plugin(build_dir, name, plugin_type, **kwargs):
    write_file(build_dir / "plugins" / f"lib{name}.so", name)
    return Target(
        name=name,
        kind=TargetKind.PLUGIN,
        plugin_type=plugin_type,
        outputs={BuildVariant.DEFAULT: TargetOutputs(library=Path(f"plugins/lib{name}.so"))},
        **kwargs,
    )


@pytest.fixture
def plugin_pass(make_pass, build_dir, source_dir):
    ctx = make_pass()
    write_file(source_dir / "qEDL" / "shaders" / "EDL" / "edl.vert")
    write_file(source_dir / "qEDL" / "shaders" / "EDL" / "edl.frag")
    write_file(source_dir / "qEDL" / "shaders" / "EDL" / "README.md")
    ctx.define_target(make_plugin(
        build_dir, "QEDL_GL", PluginType.GRAPHICS,
        shader_folder_name="EDL", shader_folder_path=Path("qEDL/shaders/EDL"),
    ))
    ctx.define_target(make_plugin(build_dir, "QE57_IO", PluginType.IO))
    ctx.define_target(make_plugin(build_dir, "QPCV", PluginType.STANDARD))
    return ctx


def installed_targets(records):
    return sorted({r.target for r in records})


class TestPluginType:

    def test_gl_is_graphics(self):
        assert PluginType.parse("gl") is PluginType.GRAPHICS
        assert PluginType.parse("IO") is PluginType.IO

    def test_invalid_type_lists_valid_values(self):
        with pytest.raises(UsageError, match="graphics, io, standard"):
            PluginType.parse("bogus")

    def test_plugin_defaults_to_standard(self):
        assert Target(name="QFoo", kind=TargetKind.PLUGIN).plugin_type is PluginType.STANDARD


class TestInstallPlugins:

    def test_filters_by_type(self, plugin_pass):
        records = PluginOrchestrator(plugin_pass).install_plugins(PluginInstallRequest(
            dest_path="lib/cloudcompare", dest_folder="plugins", types=["io"],
        ))
        assert installed_targets(records) == ["QE57_IO"]
        assert records[0].destination == "lib/cloudcompare/plugins/libQE57_IO.so"
        assert (plugin_pass.manifest.prefix / "lib/cloudcompare/plugins/libQE57_IO.so").exists()

    def test_all_types_by_default(self, plugin_pass):
        records = PluginOrchestrator(plugin_pass).install_plugins(PluginInstallRequest(
            dest_path="plugins", shader_dest_path="shaders",
        ))
        assert installed_targets(records) == ["QE57_IO", "QEDL_GL", "QPCV"]

    def test_graphics_requires_shader_destination(self, plugin_pass):
        with pytest.raises(UsageError, match="shader_dest_path"):
            PluginOrchestrator(plugin_pass).install_plugins(PluginInstallRequest(
                dest_path="plugins", types=["gl"],
            ))
        assert plugin_pass.manifest.records == []

    def test_shader_destination_not_needed_without_graphics(self, plugin_pass):
        records = PluginOrchestrator(plugin_pass).install_plugins(PluginInstallRequest(
            dest_path="plugins", types=["standard"],
        ))
        assert installed_targets(records) == ["QPCV"]

    def test_invalid_type_installs_nothing(self, plugin_pass):
        with pytest.raises(UsageError, match="Invalid plugin type 'bogus'"):
            PluginOrchestrator(plugin_pass).install_plugins(PluginInstallRequest(
                dest_path="plugins", types=["io", "bogus"],
            ))
        assert plugin_pass.manifest.records == []
        assert plugin_pass.dependencies == {}

    def test_single_type_string(self, plugin_pass):
        records = PluginOrchestrator(plugin_pass).install_plugins(PluginInstallRequest(
            dest_path="plugins", types="io",
        ))
        assert installed_targets(records) == ["QE57_IO"]
        assert PluginOrchestrator(plugin_pass).requested_types(PluginType.IO) == [PluginType.IO]

    def test_missing_dest_path(self, plugin_pass):
        with pytest.raises(UsageError, match="dest_path not specified"):
            PluginOrchestrator(plugin_pass).install_plugins(PluginInstallRequest(types=["io"]))

    def test_aggregate_depends_on_every_candidate(self, plugin_pass):
        PluginOrchestrator(plugin_pass).install_plugins(PluginInstallRequest(
            dest_path="plugins", types=["io"],
        ))
        assert plugin_pass.dependencies["CloudCompare"] == ["QEDL_GL", "QE57_IO", "QPCV"]

    def test_explicit_candidates_and_aggregate(self, plugin_pass, build_dir):
        extra = make_plugin(build_dir, "QExtra", PluginType.IO)
        records = PluginOrchestrator(plugin_pass).install_plugins(PluginInstallRequest(
            dest_path="plugins", types=["io"], candidates=[extra], aggregate_target="ccViewer",
        ))
        assert installed_targets(records) == ["QExtra"]
        assert plugin_pass.dependencies == {"ccViewer": ["QExtra"]}

    def test_status_trace(self, plugin_pass):
        PluginOrchestrator(plugin_pass).install_plugins(PluginInstallRequest(
            dest_path="plugins", types=["gl"], shader_dest_path="app", shader_dest_folder="shaders",
        ))
        lines = plugin_pass.diagnostics.lines("status")
        assert lines[:4] == [
            "Install plugins",
            " Types: graphics",
            " Destination: plugins",
            " Shader Destination: app/shaders",
        ]


class TestShaders:

    def test_shader_files_copied_from_folder(self, plugin_pass):
        records = PluginOrchestrator(plugin_pass).install_plugins(PluginInstallRequest(
            dest_path="plugins", types=["graphics"], shader_dest_path="app", shader_dest_folder="shaders",
        ))
        shaders = sorted(r.destination for r in records if r.role == "shader")
        assert shaders == ["app/shaders/EDL/edl.frag", "app/shaders/EDL/edl.vert"]
        assert not (plugin_pass.manifest.prefix / "app/shaders/EDL/README.md").exists()

    def test_shader_files_from_sources(self, make_pass, build_dir, source_dir):
        write_file(source_dir / "shaders" / "ssao.frag")
        write_file(source_dir / "shaders" / "unused.frag")
        ctx = make_pass()
        ctx.define_target(make_plugin(
            build_dir, "QSSAO_GL", PluginType.GRAPHICS,
            sources=[Path("shaders/ssao.frag"), Path("src/qSSAO.cpp")],
            shader_folder_path=Path("shaders"),
        ))
        records = PluginOrchestrator(ctx).install_plugins(PluginInstallRequest(
            dest_path="plugins", types=["gl"], shader_dest_path="app",
        ))
        assert [r.destination for r in records if r.role == "shader"] == ["app/shaders/ssao.frag"]

    def test_missing_shader_folder_is_skipped(self, make_pass, build_dir):
        ctx = make_pass()
        ctx.define_target(make_plugin(
            build_dir, "QNoShaders_GL", PluginType.GRAPHICS, shader_folder_path=Path("nowhere"),
        ))
        records = PluginOrchestrator(ctx).install_plugins(PluginInstallRequest(
            dest_path="plugins", types=["gl"], shader_dest_path="app",
        ))
        assert [r.role for r in records] == ["library"]
