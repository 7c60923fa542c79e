"""Tests for destination resolution and platform profiles."""

import pytest

from stager.install import BuildVariant, Destination, PlatformKind, PlatformProfile, normalize_path, resolve

SINGLE = PlatformProfile(kind=PlatformKind.LINUX)
MULTI = PlatformProfile(kind=PlatformKind.WINDOWS, multi_config=True)


class TestResolve:

    @pytest.mark.parametrize("variant,expected", [
        (BuildVariant.DEBUG, "/opt/pkg_debug/lib"),
        (BuildVariant.RELEASE, "/opt/pkg/lib"),
        (BuildVariant.REL_WITH_DEB_INFO, "/opt/pkg_withDebInfo/lib"),
        (BuildVariant.DEFAULT, "/opt/pkg/lib"),
    ])
    def test_multi_variant_trees(self, variant, expected):
        assert resolve("/opt/pkg", "lib", variant, MULTI) == expected

    @pytest.mark.parametrize("variant", list(BuildVariant))
    def test_single_output_ignores_variant(self, variant):
        assert resolve("/opt/pkg", "lib", variant, SINGLE) == "/opt/pkg/lib"

    def test_windows_without_multi_config_is_single_output(self):
        profile = PlatformProfile(kind=PlatformKind.WINDOWS)
        assert resolve("/opt/pkg", "lib", BuildVariant.DEBUG, profile) == "/opt/pkg/lib"

    def test_redundant_separators_collapsed(self):
        assert resolve("/opt//pkg/", "/lib/", BuildVariant.RELEASE, SINGLE) == "/opt/pkg/lib"
        assert resolve("/opt//pkg/", "lib", BuildVariant.DEBUG, MULTI) == "/opt/pkg_debug/lib"

    def test_empty_subfolder(self):
        assert resolve("plugins", "", BuildVariant.DEFAULT, SINGLE) == "plugins"
        assert resolve("plugins", "", BuildVariant.DEBUG, MULTI) == "plugins_debug"

    def test_backslashes_normalized(self):
        assert normalize_path("C:\\Program Files\\App", "plugins") == "C:/Program Files/App/plugins"

    def test_destination_object(self):
        destination = Destination("bin", "plugins")
        assert destination.resolve(BuildVariant.DEBUG, MULTI) == "bin_debug/plugins"
        assert str(destination) == "bin/plugins"


class TestBuildVariant:

    def test_parse_is_case_insensitive(self):
        assert BuildVariant.parse("relwithdebinfo") is BuildVariant.REL_WITH_DEB_INFO

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError, match="MinSizeRel"):
            BuildVariant.parse("MinSizeRel")

    def test_suffixes(self):
        assert BuildVariant.DEBUG.suffix == "_debug"
        assert BuildVariant.REL_WITH_DEB_INFO.suffix == "_withDebInfo"
        assert BuildVariant.RELEASE.suffix == ""


class TestPlatformProfile:

    def test_only_windows_multi_config_is_multi_variant(self):
        assert MULTI.multi_variant
        assert not SINGLE.multi_variant
        assert not PlatformProfile(kind=PlatformKind.MACOS, multi_config=True).multi_variant

    def test_default_variants(self):
        assert SINGLE.default_variants() == (BuildVariant.DEFAULT,)
        assert MULTI.default_variants() == (
            BuildVariant.DEBUG, BuildVariant.RELEASE, BuildVariant.REL_WITH_DEB_INFO,
        )

    def test_linux_layout(self):
        layout = SINGLE.package_layout("CloudCompare", "cloudcompare")
        assert layout.config_dir == "lib/cmake/CloudCompare"
        assert layout.include_dir == "include/cloudcompare"
        assert layout.lib_dir == "lib/cloudcompare"
        assert layout.plugin_dir == "lib/cloudcompare/plugins"

    def test_macos_layout(self):
        profile = PlatformProfile(kind=PlatformKind.MACOS)
        layout = profile.package_layout("CloudCompare", "cloudcompare", bundle_dir="CloudCompare.app")
        assert layout.lib_dir == "lib"
        assert layout.plugin_dir == "CloudCompare.app/Contents/PlugIns"

    def test_windows_layout(self):
        layout = MULTI.package_layout("CloudCompare", "cloudcompare", dest_folder="CloudCompare")
        assert layout.lib_dir == "lib"
        assert layout.plugin_dir == "CloudCompare/plugins"

    def test_for_name(self):
        assert PlatformProfile.for_name("MacOS").kind is PlatformKind.MACOS
        with pytest.raises(ValueError):
            PlatformProfile.for_name("amiga")
