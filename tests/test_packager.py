import json
import os
import sys
import tempfile
import unittest
from collections import Counter
from pathlib import Path
from typing import Set

sys.path.append(os.path.join(os.path.dirname(__file__), "../scripts"))

from _fs import LocalFileSystem
from esm_packager import (
    NodeModuleNotFoundError,
    OptionsError,
    PackageOptions,
    PackagingSession,
    compute_destination_path,
    package_esm,
    resolve_relative_import,
    scan_imports,
)


def write_file(root: Path, rel_path: str, content: str) -> None:
    full_path = root / rel_path
    full_path.parent.mkdir(parents=True, exist_ok=True)
    full_path.write_text(content, encoding="utf-8")


def output_files(root: Path, dest: str = "out") -> Set[str]:
    base = root / dest
    found: Set[str] = set()
    for dirpath, _dirs, filenames in os.walk(base):
        for filename in filenames:
            found.add((Path(dirpath) / filename).relative_to(base).as_posix())
    return found


class RecordingFileSystem(LocalFileSystem):
    def __init__(self):
        self.reads = Counter()
        self.writes = Counter()
        self.made = Counter()

    def read_text(self, path):
        self.reads[path] += 1
        return super().read_text(path)

    def write_text(self, path, text):
        self.writes[path] += 1
        super().write_text(path, text)

    def make_dir(self, path):
        self.made[path] += 1
        super().make_dir(path)


class TestPackager(unittest.TestCase):
    def _options(self, root: Path, **overrides) -> PackageOptions:
        values = {
            "repo_root": str(root),
            "esm_source": "src",
            "esm_destination": "out",
            "entry_points": ["a.js"],
        }
        values.update(overrides)
        return PackageOptions(**values)

    def test_alias_and_relative_imports(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir).resolve()
            write_file(root, "src/a.js", "import { b } from './b';\nimport lib from 'lib';\n")
            write_file(root, "src/b.js", "export const b = 1;\n")
            write_file(root, "alias/lib.js", "export default 1;\n")
            options = self._options(root, resolve_alias={"lib": str(root / "alias" / "lib.js")})
            package_esm(options)
            self.assertEqual(output_files(root), {"a.js", "b.js", "alias/lib.js"})
            text = (root / "out" / "a.js").read_text(encoding="utf-8")
            self.assertEqual(text, "import { b } from './b';\nimport lib from './alias/lib';\n")
            self.assertEqual(
                (root / "out" / "alias" / "lib.js").read_text(encoding="utf-8"),
                "export default 1;\n",
            )

    def test_unresolvable_bare_import_aborts(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir).resolve()
            write_file(root, "src/a.js", "import dep from 'dep';\n")
            with self.assertRaises(NodeModuleNotFoundError) as ctx:
                package_esm(self._options(root))
            self.assertEqual(ctx.exception.module, "dep")
            self.assertEqual(ctx.exception.importer, str(root / "src" / "a.js"))
            self.assertFalse((root / "out" / "a.js").exists())

    def test_skipped_imports_are_untouched(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir).resolve()
            source = "import * as vscode from 'vscode';\nimport { b } from './b';\n"
            write_file(root, "src/a.js", source)
            write_file(root, "src/b.js", "export const b = 2;\n")
            fs = RecordingFileSystem()
            session = PackagingSession(self._options(root, resolve_skip=["vscode"]), fs=fs)
            session.run()
            self.assertEqual((root / "out" / "a.js").read_text(encoding="utf-8"), source)
            self.assertEqual(
                set(fs.reads),
                {str(root / "src" / "a.js"), str(root / "src" / "b.js")},
            )
            self.assertFalse(any("vscode" in path for path in session.pending))

    def test_destination_folder_simplification(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir).resolve()
            write_file(root, "src/a.js", "import { foo } from 'foo';\n")
            write_file(root, "node_modules/foo/package.json", json.dumps({"module": "dist/index.js"}))
            write_file(
                root,
                "node_modules/foo/dist/index.js",
                "import { h } from './helper';\nexport const foo = h;\n",
            )
            write_file(root, "node_modules/foo/dist/helper.js", "export const h = 3;\n")
            options = self._options(root, destination_folder_simplification={"node_modules/foo/dist": "foo"})
            package_esm(options)
            self.assertEqual(output_files(root), {"a.js", "foo/index.js", "foo/helper.js"})
            self.assertEqual(
                (root / "out" / "a.js").read_text(encoding="utf-8"),
                "import { foo } from './foo/index';\n",
            )
            self.assertEqual(
                (root / "out" / "foo" / "index.js").read_text(encoding="utf-8"),
                "import { h } from './helper';\nexport const foo = h;\n",
            )

    def test_only_reachable_files_are_written(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir).resolve()
            write_file(root, "src/a.js", "import './lib/b';\n")
            write_file(root, "src/lib/b.js", "export * from './c';\n")
            write_file(root, "src/lib/c.js", "export const c = 1;\n")
            write_file(root, "src/unused.js", "export const unused = 1;\n")
            write_file(root, "src/lib/also_unused.js", "import './c';\n")
            package_esm(self._options(root))
            self.assertEqual(output_files(root), {"a.js", "lib/b.js", "lib/c.js"})

    def test_cycles_and_diamonds_are_processed_once(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir).resolve()
            write_file(root, "src/a.js", "import './b';\nimport './c';\n")
            write_file(root, "src/b.js", "import './d';\n")
            write_file(root, "src/c.js", "import './d';\n")
            write_file(root, "src/d.js", "import './a';\n")
            fs = RecordingFileSystem()
            processed = PackagingSession(self._options(root), fs=fs).run()
            self.assertEqual(
                [Path(item.source).name for item in processed],
                ["a.js", "c.js", "b.js", "d.js"],
            )
            self.assertEqual(set(fs.reads.values()), {1})
            self.assertEqual(set(fs.writes.values()), {1})
            self.assertEqual(len(fs.writes), 4)

    def test_directories_are_created_once(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir).resolve()
            write_file(root, "src/a.js", "import './x/one';\nimport './x/two';\n")
            write_file(root, "src/x/one.js", "export {};\n")
            write_file(root, "src/x/two.js", "export {};\n")
            fs = RecordingFileSystem()
            PackagingSession(self._options(root), fs=fs).run()
            self.assertEqual(
                fs.made,
                Counter({str(root / "out"): 1, str(root / "out" / "x"): 1}),
            )

    def test_multiple_rewrites_in_one_file(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir).resolve()
            write_file(
                root,
                "src/a.js",
                "import x from 'x';\nimport yy from 'yy';\nimport './rel';\nexport { z } from 'x';\n",
            )
            write_file(root, "src/rel.js", "export {};\n")
            write_file(root, "vendor/deep/path/x.js", "export default 1;\n")
            write_file(root, "v/yy.js", "export default 2;\n")
            options = self._options(
                root,
                resolve_alias={
                    "x": str(root / "vendor" / "deep" / "path" / "x.js"),
                    "yy": str(root / "v" / "yy.js"),
                },
            )
            processed = PackagingSession(options).run()
            self.assertEqual(
                (root / "out" / "a.js").read_text(encoding="utf-8"),
                "import x from './vendor/deep/path/x';\n"
                "import yy from './v/yy';\n"
                "import './rel';\n"
                "export { z } from './vendor/deep/path/x';\n",
            )
            self.assertEqual(processed[0].rewritten, 3)
            self.assertEqual(
                output_files(root),
                {"a.js", "rel.js", "vendor/deep/path/x.js", "v/yy.js"},
            )

    def test_rewritten_specifiers_resolve_to_packaged_target(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir).resolve()
            write_file(root, "src/sub/a.js", "import dep from 'dep';\n")
            write_file(root, "node_modules/dep/package.json", json.dumps({"module": "esm/main.js"}))
            write_file(root, "node_modules/dep/esm/main.js", "export default 1;\n")
            options = self._options(root, entry_points=["sub/a.js"])
            package_esm(options)
            packaged_importer = str(root / "out" / "sub" / "a.js")
            text = Path(packaged_importer).read_text(encoding="utf-8")
            refs = scan_imports(text)
            self.assertEqual(len(refs), 1)
            target = resolve_relative_import(refs[0].specifier, packaged_importer)
            expected = compute_destination_path(
                str(root / "node_modules" / "dep" / "esm" / "main.js"),
                options.normalized(),
            )
            self.assertEqual(target, expected)
            self.assertTrue(os.path.exists(target))

    def test_output_is_a_verbatim_copy(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir).resolve()
            payload = "// café ☃\r\nexport const a = 'x';\r\n".encode("utf-8")
            (root / "src").mkdir()
            (root / "src" / "a.js").write_bytes(payload)
            package_esm(self._options(root))
            self.assertEqual((root / "out" / "a.js").read_bytes(), payload)

    def test_undecodable_bytes_are_copied_through(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir).resolve()
            write_file(root, "alias/lib.js", "export default 1;\n")
            payload = b"// caf\xe9\nimport lib from 'lib';\nexport const a = '\xff';\n"
            (root / "src").mkdir()
            (root / "src" / "a.js").write_bytes(payload)
            package_esm(self._options(root, resolve_alias={"lib": str(root / "alias" / "lib.js")}))
            self.assertEqual(
                (root / "out" / "a.js").read_bytes(),
                payload.replace(b"'lib'", b"'./alias/lib'"),
            )

    def test_trailing_separator_on_repo_root(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir).resolve()
            write_file(root, "src/a.js", "export {};\n")
            session = PackagingSession(self._options(root, repo_root=str(root) + os.sep))
            self.assertEqual(session.options.repo_root, str(root))
            session.run()
            self.assertEqual(output_files(root), {"a.js"})

    def test_empty_entry_points_are_rejected(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir).resolve()
            with self.assertRaises(OptionsError):
                PackagingSession(self._options(root, entry_points=[]))

    def test_injected_scanner_drives_traversal(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir).resolve()
            write_file(root, "src/a.js", "import './b';\n")
            write_file(root, "src/b.js", "export {};\n")
            package_esm(self._options(root), scanner=lambda text: [])
            self.assertEqual(output_files(root), {"a.js"})


if __name__ == "__main__":
    unittest.main()
