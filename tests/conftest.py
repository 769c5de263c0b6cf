"""Shared fixtures for the importsorter test suite."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Iterable

import pytest

from importsorter.lib.models import Bounds, ImportDescriptor, ImportNode


# Options that can never find a project file, used to exercise "skipped".
MISSING_CONFIG_OPTIONS: dict[str, Any] = {
    "resolver": {"type": "fs", "configName": "importsorter-test-missing.json"},
}


class StubClassifier:
    """Classifier treating '.'- and 'local'-prefixed modules as local."""

    def is_local(self, path: str) -> bool:
        return path.startswith((".", "local"))

    def get_extension(self, path: str) -> str:
        from importsorter.lib.classifier import get_extension

        return get_extension(path)


def make_descriptors(modules: Iterable[str]) -> list[ImportDescriptor]:
    """Build one descriptor per module, laid out one statement per line."""
    descriptors: list[ImportDescriptor] = []
    offset = 0
    for line, module in enumerate(modules, start=1):
        value = f'import x{line} from "{module}"'
        node = ImportNode(
            start=offset,
            end=offset + len(value),
            start_line=line,
            end_line=line,
            module=module,
        )
        bounds = Bounds(node.start, node.end)
        descriptors.append(ImportDescriptor(node, value, bounds, bounds))
        offset = node.end + 1
    return descriptors


@pytest.fixture()
def stub_classifier() -> StubClassifier:
    """Return a classifier that needs no project files."""
    return StubClassifier()


@pytest.fixture()
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a helper that writes a text file below tmp_path."""

    def _write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as fh:
            fh.write(content)
        return path

    return _write


@pytest.fixture()
def package_project(tmp_path: Path) -> Path:
    """Create a project with a package.json declaring a few dependencies."""
    manifest = {
        "name": "demo",
        "dependencies": {"react": "^18.0.0", "lodash": "^4.17.0"},
        "devDependencies": {"@testing-library/react": "^14.0.0"},
        "peerDependencies": {"react-dom": "^18.0.0"},
    }
    (tmp_path / "package.json").write_text(json.dumps(manifest), encoding="utf-8")
    (tmp_path / "src").mkdir()
    return tmp_path


@pytest.fixture()
def fs_project(tmp_path: Path) -> Path:
    """Create a project with a tsconfig.json using baseUrl and paths."""
    tsconfig = "\n".join(
        [
            "{",
            "  // generated by tsc --init",
            '  "compilerOptions": {',
            '    "baseUrl": "src",',
            '    "paths": { "@app/*": ["src/app/*"] },',
            "  },",
            "}",
        ]
    )
    (tmp_path / "tsconfig.json").write_text(tsconfig, encoding="utf-8")
    (tmp_path / "src" / "components").mkdir(parents=True)
    (tmp_path / "src" / "app").mkdir()
    (tmp_path / "src" / "components" / "Button.tsx").write_text("", encoding="utf-8")
    (tmp_path / "src" / "app" / "store.ts").write_text("", encoding="utf-8")
    return tmp_path
