from __future__ import annotations

from pathlib import Path

import pytest

from console_remover.config import WorkspaceConfig
from console_remover.exceptions import ParseError
from console_remover.workspace import (
    FileStatus,
    discover_files,
    glob_match,
    is_excluded_dir,
    process_file,
    process_files,
)

FILES = {
    "src/a.js": 'console.log("a");\nexport const a = 1;\n',
    "src/b.ts": "const b: number = console.warn(2);\n",
    "src/c.jsx": "export const C = () => <p>c</p>;\n",
    "src/nested/d.tsx": "export const D = (): null => null;\n",
    "node_modules/lib/index.js": "console.log('vendored');\n",
    "src/broken.js": "function (\n",
    "README.md": "console.log('docs');\n",
}


def _rel(root: Path, paths: list[Path]) -> list[str]:
    return sorted(p.relative_to(root).as_posix() for p in paths)


@pytest.mark.parametrize(
    "path, pattern, expected",
    [
        ("a.js", "**/*.js", True),
        ("src/deep/a.js", "**/*.js", True),
        ("a.ts", "**/*.js", False),
        ("node_modules/x/a.js", "**/node_modules/**", True),
        ("pkg/node_modules/a.js", "**/node_modules/**", True),
        ("node_modules/", "**/node_modules/**", True),
        ("src/node_modules_old/a.js", "**/node_modules/**", False),
        ("src/a.ts", "src/**/*.ts", True),
        ("src/deep/b.ts", "src/**/*.ts", True),
        ("src/a.ts", "src/*.ts", True),
        ("src/deep/b.ts", "src/*.ts", False),
        ("src/a/b/c/d.ts", "src/**/c/*.ts", True),
        ("src/a/b/d.ts", "src/**/c/*.ts", False),
    ],
)
def test_glob_match(path, pattern, expected):
    assert glob_match(path, pattern) is expected


def test_discover_files_skips_excluded_and_foreign(make_tree):
    root = make_tree(FILES)
    found = discover_files(root, WorkspaceConfig())
    assert _rel(root, found) == [
        "src/a.js",
        "src/b.ts",
        "src/broken.js",
        "src/c.jsx",
        "src/nested/d.tsx",
    ]


def test_discover_files_custom_patterns(make_tree):
    root = make_tree(FILES)
    config = WorkspaceConfig(include=["**/*.ts", "**/*.tsx"], exclude=["src/nested/**"])
    assert _rel(root, discover_files(root, config)) == ["src/b.ts"]


def test_discover_files_star_stays_in_one_directory(make_tree):
    root = make_tree({"src/a.ts": "", "src/deep/b.ts": ""})
    recursive = WorkspaceConfig(include=["src/**/*.ts"])
    shallow = WorkspaceConfig(include=["src/*.ts"])
    assert _rel(root, discover_files(root, recursive)) == ["src/a.ts", "src/deep/b.ts"]
    assert _rel(root, discover_files(root, shallow)) == ["src/a.ts"]


@pytest.mark.parametrize(
    "rel_dir, expected",
    [
        ("node_modules", True),
        ("pkg/node_modules", True),
        ("src", False),
        ("src/nested", False),
    ],
)
def test_is_excluded_dir(rel_dir, expected):
    patterns = ["**/node_modules/**", "**/*.js"]
    assert is_excluded_dir(rel_dir, patterns) is expected


def test_process_file_writes_only_when_changed(make_tree):
    root = make_tree(FILES)
    changed = process_file(root / "src/a.js")
    unchanged = process_file(root / "src/c.jsx")

    assert changed.status is FileStatus.CHANGED
    assert changed.removed == 1
    assert (root / "src/a.js").read_text() == "export const a = 1;\n"
    assert unchanged.status is FileStatus.UNCHANGED
    assert (root / "src/c.jsx").read_text() == FILES["src/c.jsx"]


def test_process_file_uses_extension_dialect(make_tree):
    root = make_tree(FILES)
    process_file(root / "src/b.ts")
    assert (root / "src/b.ts").read_text() == "const b: number = undefined;\n"


def test_process_file_dry_run(make_tree):
    root = make_tree(FILES)
    outcome = process_file(root / "src/a.js", dry_run=True)
    assert outcome.status is FileStatus.CHANGED
    assert (root / "src/a.js").read_text() == FILES["src/a.js"]


def test_process_file_keeps_crlf(tmp_path):
    path = tmp_path / "win.js"
    path.write_bytes(b"console.log(1);\r\nfoo();\r\n")
    process_file(path)
    assert path.read_bytes() == b"foo();\r\n"


def test_parse_error_names_the_file(make_tree):
    root = make_tree(FILES)
    with pytest.raises(ParseError) as exc_info:
        process_file(root / "src/broken.js")
    assert exc_info.value.path == str(root / "src/broken.js")
    assert "broken.js" in str(exc_info.value)
    assert (root / "src/broken.js").read_text() == FILES["src/broken.js"]


def test_batch_continues_past_failures(make_tree, log_messages):
    root = make_tree(FILES)
    seen = []
    report = process_files(
        discover_files(root, WorkspaceConfig()), on_progress=seen.append
    )

    assert len(seen) == 5
    assert report.changed == 2
    assert report.unchanged == 2
    assert report.removed == 2
    assert [o.path.name for o in report.failed] == ["broken.js"]
    assert (root / "src/broken.js").read_text() == FILES["src/broken.js"]
    assert (root / "node_modules/lib/index.js").read_text() == FILES["node_modules/lib/index.js"]
    assert any("Error processing file" in m and "broken.js" in m for m in log_messages)


def test_batch_reports_unreadable_file(tmp_path):
    missing = tmp_path / "gone.js"
    report = process_files([missing])
    assert report.failed[0].path == missing
    assert report.failed[0].error


def test_batch_reports_undecodable_file(tmp_path):
    path = tmp_path / "latin.js"
    path.write_bytes(b"console.log('\xe9');\n")
    report = process_files([path])
    assert report.failed[0].status is FileStatus.FAILED
    assert path.read_bytes() == b"console.log('\xe9');\n"
