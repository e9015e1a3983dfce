import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

from envfile.errors import MissingCommand
from envfile.models import Assignment, ResolvedEnvironment
from envfile.resolver import candidate_paths, resolve_environment, split_inline_assignments


class SplitInlineAssignmentsTests(unittest.TestCase):
    def test_assignments_are_consumed_until_command(self) -> None:
        inline, command, args = split_inline_assignments(["A=1", "B=2", "printenv", "C=3", "-x"])
        self.assertEqual(inline, ["A=1", "B=2"])
        self.assertEqual(command, "printenv")
        self.assertEqual(args, ["C=3", "-x"])

    def test_command_without_assignments(self) -> None:
        self.assertEqual(split_inline_assignments(["ls"]), ([], "ls", []))

    def test_missing_command(self) -> None:
        with self.assertRaises(MissingCommand):
            split_inline_assignments([])
        with self.assertRaises(MissingCommand):
            split_inline_assignments(["A=1", "B=2"])


class ResolvedEnvironmentTests(unittest.TestCase):
    def test_last_write_wins(self) -> None:
        resolved = ResolvedEnvironment(
            assignments=[Assignment("KEY", "1"), Assignment("OTHER", "x"), Assignment("KEY", "2")]
        )
        self.assertEqual(resolved.as_mapping(), {"KEY": "2", "OTHER": "x"})


class ResolveEnvironmentTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, relative: str, text: str) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    def test_implicit_file_is_loaded_first(self) -> None:
        self._write(".env", "KEY=1\nIMPLICIT=yes\n")
        explicit = self._write("other.env", "KEY=2\n")

        resolved = resolve_environment(load_implicit=True, cwd=self.root, env_files=[explicit])

        self.assertEqual(
            resolved.assignments,
            [Assignment("KEY", "1"), Assignment("IMPLICIT", "yes"), Assignment("KEY", "2")],
        )
        self.assertEqual(resolved.as_mapping()["KEY"], "2")
        self.assertEqual([source.path for source in resolved.sources], [self.root / ".env", explicit])

    def test_later_explicit_file_wins(self) -> None:
        first = self._write("a.env", "KEY=1\n")
        second = self._write("b.env", "KEY=2\n")
        resolved = resolve_environment(load_implicit=False, cwd=self.root, env_files=[first, second])
        self.assertEqual(resolved.as_mapping(), {"KEY": "2"})

    def test_inline_assignments_apply_last(self) -> None:
        self._write(".env", "KEY=1\n")
        resolved = resolve_environment(load_implicit=True, cwd=self.root, inline=["KEY=2"])
        self.assertEqual(resolved.assignments[-1], Assignment("KEY", "2"))
        self.assertEqual(resolved.as_mapping(), {"KEY": "2"})

    def test_inline_values_are_parsed_like_lines(self) -> None:
        resolved = resolve_environment(load_implicit=False, cwd=self.root, inline=['URL="a#b" # c'])
        self.assertEqual(resolved.assignments, [Assignment("URL", "a#b")])

    def test_directory_means_default_file_inside_it(self) -> None:
        self._write("config/.env", "FROM_DIR=1\n")
        resolved = resolve_environment(load_implicit=False, cwd=self.root, env_files=[self.root / "config"])
        self.assertEqual(resolved.assignments, [Assignment("FROM_DIR", "1")])

    def test_missing_candidates_are_skipped(self) -> None:
        resolved = resolve_environment(
            load_implicit=True,
            cwd=self.root,
            env_files=[self.root / "nope.env", self.root / "empty_dir"],
        )
        self.assertEqual(resolved.assignments, [])
        self.assertEqual(resolved.sources, [])

    def test_implicit_discovery_can_be_disabled(self) -> None:
        self._write(".env", "KEY=1\n")
        resolved = resolve_environment(load_implicit=False, cwd=self.root)
        self.assertEqual(resolved.assignments, [])

    def test_custom_default_file_name(self) -> None:
        self._write("local.env", "KEY=local\n")
        self._write(".env", "KEY=default\n")
        paths = candidate_paths(load_implicit=True, cwd=self.root, env_files=[], default_file_name="local.env")
        self.assertEqual(paths, [self.root / "local.env"])


if __name__ == "__main__":
    unittest.main()
