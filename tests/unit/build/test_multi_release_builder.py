"""Tests for the multi-release module builder."""

import os

import pytest

from modmake.build.multi_release_builder import (
    MultiReleaseBuilder,
    UnsupportedReleaseError,
)
from modmake.build.realm import Realm
from modmake.config import ProjectConfig


def option(args, key):
    return args[args.index(key) + 1]


def options(args, key):
    return [args[i + 1] for i, arg in enumerate(args) if arg == key]


def write_layer(root, module, release, *files):
    """Create a java-{release} layer of a module with the given source files."""
    layer = root / module / f"java-{release}"
    for relative in files:
        path = layer / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("// source\n")
    return layer


@pytest.fixture
def source_root(tmp_path):
    """Module source root of a project with layered and flat modules."""
    root = tmp_path / "layered" / "src" / "main" / "java"
    write_layer(root, "m", 8, "pkg/Foo.java", "pkg/util/Bar.java")
    write_layer(root, "m", 11, "module-info.java", "pkg/Foo.java")
    write_layer(root, "late", 9, "module-info.java", "pkg/Late.java")
    write_layer(root, "late", 11, "pkg/Late.java")
    write_layer(root, "mixed", 8, "pkg/Foo.java")
    (root / "mixed" / "extra").mkdir()
    (root / "flat" / "pkg").mkdir(parents=True)
    (root / "flat" / "module-info.java").write_text("module flat {}\n")
    (root / "bare").mkdir()
    return root


@pytest.fixture
def layered_config(source_root):
    return ProjectConfig(home=source_root.parents[2], name="layered")


@pytest.fixture
def main_realm(layered_config):
    return Realm.of("main", layered_config.home, layered_config.work)


@pytest.fixture
def builder(run, tools, layered_config, main_realm):
    return MultiReleaseBuilder(run, tools, layered_config, main_realm)


class TestDetection:
    """Test which modules the builder claims."""

    def test_claims_strictly_layered_module(self, builder):
        assert builder.release_layers("m") == [8, 11]
        assert builder.build(["m"]) == ["m"]

    def test_declines_flat_module_silently(self, builder, sinks):
        assert builder.build(["flat"]) == []
        assert sinks[1].getvalue() == ""

    def test_declines_module_without_subdirectories(self, builder, tools):
        assert builder.release_layers("bare") is None
        assert builder.build(["bare"]) == []
        assert tools.calls == []

    def test_declines_mixed_layout_with_warning(self, builder, tools, sinks):
        assert builder.build(["mixed"]) == []

        warning = sinks[1].getvalue()
        assert "mixed" in warning
        assert "extra" in warning
        assert tools.calls == []

    def test_release_pattern_requires_full_match(self, builder, source_root):
        write_layer(source_root, "odd", 8, "pkg/Foo.java")
        (source_root / "odd" / "java-11-preview").mkdir()

        assert builder.release_layers("odd") is None

    def test_attempt_build_returns_unclaimed_modules(self, builder):
        built, remaining = builder.attempt_build(["flat", "m", "mixed"])

        assert built == ["m"]
        assert remaining == ["flat", "mixed"]


class TestCompile:
    """Test per-release compiler invocations."""

    def test_compiles_every_existing_release_from_base(self, builder, tools, sinks):
        builder.build(["m"])

        releases = [option(args, "--release") for args in tools.calls_of("javac")]
        assert releases == ["8", "11"]
        assert "Skipping java-9" in sinks[0].getvalue()
        assert "Skipping java-10" in sinks[0].getvalue()

    def test_legacy_release_compiles_source_files(self, builder, tools, source_root, main_realm):
        builder.build(["m"])

        legacy = tools.calls_of("javac")[0]
        assert option(legacy, "-d") == str(main_realm.compiled_multi / "java-8" / "m")
        assert "--module" not in legacy
        assert "--module-source-path" not in legacy
        assert legacy[-2:] == [
            str(source_root / "m" / "java-8" / "pkg" / "Foo.java"),
            str(source_root / "m" / "java-8" / "pkg" / "util" / "Bar.java"),
        ]

    def test_modular_release_patches_base_output(self, builder, tools, source_root, main_realm):
        builder.build(["m"])

        modular = tools.calls_of("javac")[1]
        assert option(modular, "-d") == str(main_realm.compiled_multi / "java-11")
        assert option(modular, "--module-version") == "1.0.0-SNAPSHOT"
        assert option(modular, "--module-source-path") == os.pathsep.join(
            [os.path.join(str(source_root), "*", "java-11"), str(source_root)]
        )
        assert option(modular, "--patch-module") == "m={}".format(
            main_realm.compiled_multi / "java-8" / "m"
        )
        assert option(modular, "--module") == "m"
        assert "--module-path" not in modular

    def test_base_release_is_lowest_declared_layer(self, builder, tools, main_realm):
        builder.build(["late"])

        base, upper = tools.calls_of("javac")
        assert option(base, "--release") == "9"
        assert "--patch-module" not in base
        assert option(base, "--module") == "late"
        assert option(upper, "--release") == "11"
        assert option(upper, "--patch-module") == "late={}".format(
            main_realm.compiled_multi / "java-9" / "late"
        )

    def test_base_release_above_platform_fails(self, run, tools_factory, layered_config, main_realm):
        tools = tools_factory(feature_version=8)
        builder = MultiReleaseBuilder(run, tools, layered_config, main_realm)

        with pytest.raises(UnsupportedReleaseError):
            builder.build(["late"])
        assert tools.calls == []

    def test_layers_above_platform_are_ignored(self, run, tools_factory, layered_config, main_realm):
        tools = tools_factory(feature_version=9)
        MultiReleaseBuilder(run, tools, layered_config, main_realm).build(["m"])

        assert [option(args, "--release") for args in tools.calls_of("javac")] == ["8"]


class TestPackaging:
    """Test multi-release archives."""

    def test_archive_embeds_higher_layers_by_release(self, builder, tools, main_realm):
        (main_realm.compiled_multi / "java-11" / "m").mkdir(parents=True)

        builder.build(["m"])

        binary = tools.calls_of("jar")[0]
        assert binary == [
            "--create",
            "--file", str(main_realm.packaged_modules / "m-1.0.0-SNAPSHOT.jar"),
            "-C", str(main_realm.compiled_multi / "java-8" / "m"),
            ".",
            "--release", "11",
            "-C", str(main_realm.compiled_multi / "java-11" / "m"),
            ".",
        ]

    def test_missing_layer_output_is_left_out(self, builder, tools):
        builder.build(["m"])

        binary = tools.calls_of("jar")[0]
        assert "--release" not in binary

    def test_sources_archive_uses_source_layers(self, builder, tools, source_root, main_realm):
        builder.build(["m"])

        sources = tools.calls_of("jar")[1]
        assert option(sources, "--file") == str(
            main_realm.packaged_sources / "m-1.0.0-SNAPSHOT-sources.jar"
        )
        assert options(sources, "-C") == [
            str(source_root / "m" / "java-8"),
            str(source_root / "m" / "java-11"),
        ]
        assert options(sources, "--release") == ["11"]

    def test_compile_only_realm_is_not_packaged(
        self, run, tools, layered_config, main_realm, source_root
    ):
        write_layer(source_root.parents[1] / "test" / "java", "probe", 11, "module-info.java")
        test_realm = Realm.of("test", layered_config.home, layered_config.work, main_realm)

        built = MultiReleaseBuilder(run, tools, layered_config, test_realm).build(["probe"])

        assert built == ["probe"]
        assert len(tools.calls_of("javac")) == 1
        assert tools.calls_of("jar") == []
