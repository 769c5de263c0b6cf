"""Unit tests for importsorter.lib.classifier path classification."""

from __future__ import annotations

from pathlib import Path

import pytest

from importsorter.lib.classifier import (
    FSPathClassifier,
    PackagePathClassifier,
    PathClassifier,
    get_extension,
)


class Recorder:
    """Existence probe that records every path it is asked about."""

    def __init__(self, existing: tuple[str, ...] = ()) -> None:
        self.calls: list[str] = []
        self.existing = existing

    def __call__(self, path: str) -> bool:
        self.calls.append(path)
        return path in self.existing


class TestGetExtension:
    """Tests for extension extraction."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("./style.css", "css"),
            ("../assets/logo.svg", "svg"),
            ("lodash.debounce", "debounce"),
            ("file.test.ts", "ts"),
            (".", ""),
            ("..", ""),
            ("./", ""),
            ("../../", ""),
            ("src/code/index", ""),
            (".eslintrc", ""),
            ("react", ""),
        ],
    )
    def test_extension(self, path: str, expected: str) -> None:
        """Extension is taken from the last segment only."""
        assert get_extension(path) == expected


class TestFSPathClassifier:
    """Tests for the tsconfig-driven classifier."""

    def test_satisfies_protocol(self) -> None:
        """FSPathClassifier is a PathClassifier."""
        assert isinstance(FSPathClassifier("./", file_exists=Recorder()), PathClassifier)

    def test_relative_is_local_without_probing(self) -> None:
        """Paths starting with a dot are local and never touch the file system."""
        probe = Recorder()
        classifier = FSPathClassifier("./", base_url="./base", file_exists=probe)
        assert classifier.is_local("./sibling")
        assert classifier.is_local("../parent")
        assert probe.calls == []

    def test_alias_candidates_probed_in_order(self) -> None:
        """Every alias target is tried, joined under the root path."""
        probe = Recorder()
        classifier = FSPathClassifier(
            "./",
            aliases={"components": ["./folder1/components", "./folder2/components"]},
            extensions=[],
            file_exists=probe,
        )
        assert not classifier.is_aliased("components/file1")
        assert probe.calls == ["folder1/components/file1", "folder2/components/file1"]

    def test_alias_hit(self) -> None:
        """An existing alias target makes the path aliased and local."""
        probe = Recorder(existing=("folder2/components/file1",))
        classifier = FSPathClassifier(
            "./",
            aliases={"components": ["./folder1/components", "./folder2/components"]},
            extensions=[],
            file_exists=probe,
        )
        assert classifier.is_aliased("components/file1")
        assert classifier.is_local("components/file1")

    def test_alias_prefix_mismatch_skips_probe(self) -> None:
        """Paths not starting with the alias are not probed."""
        probe = Recorder()
        classifier = FSPathClassifier("./", aliases={"@app/": ["src/app/"]}, file_exists=probe)
        assert not classifier.is_aliased("react")
        assert probe.calls == []

    def test_base_url_lookup(self) -> None:
        """Non-relative paths resolve against baseUrl."""
        probe = Recorder(existing=("base/exists",))
        classifier = FSPathClassifier("./", base_url="./base", extensions=[], file_exists=probe)
        assert classifier.is_local("exists")
        assert not classifier.is_local("not_exists")
        assert probe.calls == ["base/exists", "base/not_exists"]

    def test_no_base_url_is_global(self) -> None:
        """Without baseUrl or aliases a bare specifier is not local."""
        classifier = FSPathClassifier("./", file_exists=Recorder())
        assert not classifier.is_local("react")

    def test_extension_probe_order(self) -> None:
        """index.<ext> is tried before <path>.<ext> for each extension."""
        probe = Recorder()
        classifier = FSPathClassifier("./", extensions=["ts", "tsx"], file_exists=probe)
        assert not classifier.file_exists("src/x")
        assert probe.calls == [
            "src/x",
            "src/x/index.ts",
            "src/x.ts",
            "src/x/index.tsx",
            "src/x.tsx",
        ]

    def test_probe_stops_at_first_hit(self) -> None:
        """Probing stops once a candidate exists."""
        probe = Recorder(existing=("src/x.ts",))
        classifier = FSPathClassifier("./", extensions=["ts", "tsx"], file_exists=probe)
        assert classifier.file_exists("src/x")
        assert probe.calls == ["src/x", "src/x/index.ts", "src/x.ts"]

    def test_path_with_extension_probed_once(self) -> None:
        """A path that already has an extension is only tried as-is."""
        probe = Recorder()
        classifier = FSPathClassifier("./", extensions=["ts"], file_exists=probe)
        assert not classifier.file_exists("src/x.json")
        assert probe.calls == ["src/x.json"]

    def test_default_extensions(self) -> None:
        """Extensions default to the list in defaults.yaml."""
        classifier = FSPathClassifier("./", file_exists=Recorder())
        assert classifier.extensions == ["ts", "tsx", "js", "jsx"]

    def test_real_file_system(self, fs_project: Path) -> None:
        """The default probe finds real files under baseUrl."""
        classifier = FSPathClassifier(str(fs_project), base_url=str(fs_project / "src"))
        assert classifier.is_local("components/Button")
        assert not classifier.is_local("components/Missing")


class TestPackagePathClassifier:
    """Tests for the package.json-driven classifier."""

    def test_satisfies_protocol(self) -> None:
        """PackagePathClassifier is a PathClassifier."""
        assert isinstance(PackagePathClassifier(), PathClassifier)

    def test_no_dependencies_everything_local(self) -> None:
        """Without a dependency list every path is local."""
        classifier = PackagePathClassifier()
        assert classifier.is_local("react")
        assert classifier.is_local("./x")

    def test_dependency_and_subpath_are_global(self) -> None:
        """A dependency name and its subpaths are not local."""
        classifier = PackagePathClassifier(["react", "@scope/ui"])
        assert not classifier.is_local("react")
        assert not classifier.is_local("react/jsx-runtime")
        assert not classifier.is_local("@scope/ui")
        assert not classifier.is_local("@scope/ui/button")

    def test_prefix_collision_is_local(self) -> None:
        """A name that merely starts with a dependency name is local."""
        classifier = PackagePathClassifier(["global", "global/deep"])
        assert classifier.is_local("globals")
        assert classifier.is_local("react-dom")
        assert not classifier.is_local("global/deep/file")

    def test_relative_always_local(self) -> None:
        """Relative paths are local even when they match nothing."""
        classifier = PackagePathClassifier(["react"])
        assert classifier.is_local("./react")

    def test_get_extension(self) -> None:
        """Extension lookup matches the module-level helper."""
        assert PackagePathClassifier().get_extension("./a.scss") == "scss"
