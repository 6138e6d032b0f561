import sys
import textwrap
import unittest
from types import SimpleNamespace

from buildconf.config.transpile import TranspileOptions, transpile_typed_config
from buildconf.diagnostics import Diagnostic, build_error, catch_error

CONFIG_PATH = "/work/buildconf.config.py"


def _run(source_text: str) -> SimpleNamespace:
    namespace = {"exports": SimpleNamespace()}
    exec(compile(source_text, CONFIG_PATH, "exec"), namespace)
    return namespace["exports"]


class TranspileTypedConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self.diagnostics: list[Diagnostic] = []

    def _transpile(self, source_text: str, options: TranspileOptions = None) -> str:
        return transpile_typed_config(self.diagnostics, textwrap.dedent(source_text), CONFIG_PATH, options)

    def test_annotations_are_kept(self) -> None:
        output = self._transpile(
            """
            namespace: str = "app"
            pending: int

            def double(value: int, *, scale: int = 2) -> int:
                return value * scale

            exports.config: dict[str, object] = {"namespace": namespace, "size": double(2)}
            """
        )
        self.assertIn('namespace: str = "app"', output)
        self.assertIn("pending: int", output)
        self.assertIn("def double(value: int, *, scale: int = 2) -> int:", output)
        self.assertEqual(_run(output).config, {"namespace": "app", "size": 4})
        self.assertEqual(self.diagnostics, [])

    def test_class_body_annotations_keep_their_runtime_meaning(self) -> None:
        output = self._transpile(
            """
            from dataclasses import asdict, dataclass
            from typing import NamedTuple

            @dataclass
            class DevServer:
                port: int = 3333
                reload: bool = True

            class Target(NamedTuple):
                name: str

            exports.config = {"dev_server": asdict(DevServer()), "target": Target("dist").name}
            """
        )
        self.assertEqual(
            _run(output).config,
            {"dev_server": {"port": 3333, "reload": True}, "target": "dist"},
        )

    @unittest.skipUnless(sys.version_info >= (3, 12), "type statements need Python 3.12")
    def test_type_alias_and_type_params_are_lowered(self) -> None:
        output = self._transpile(
            """
            type Names = list[str]

            def first[T](items: list[T]) -> T:
                return items[0]

            exports.config = {"alias": Names, "first": first(["a", "b"])}
            """
        )
        self.assertIn("Names = list[str]", output)
        self.assertIn("T = __import__('typing').TypeVar('T')", output)
        self.assertIn("def first(items: list[T]) -> T:", output)
        self.assertNotIn("type Names", output)
        self.assertEqual(_run(output).config, {"alias": list[str], "first": "a"})

    @unittest.skipUnless(sys.version_info >= (3, 12), "type statements need Python 3.12")
    def test_generic_type_alias_binds_its_parameters(self) -> None:
        output = self._transpile(
            """
            type Pair[T] = tuple[T, T]

            exports.config = {"pair": Pair[int]}
            """
        )
        self.assertEqual(_run(output).config, {"pair": tuple[int, int]})

    @unittest.skipUnless(sys.version_info >= (3, 12), "type statements need Python 3.12")
    def test_type_alias_may_refer_to_later_names(self) -> None:
        output = self._transpile(
            """
            type Targets = list[Target]

            class Target:
                pass

            exports.config = {"item": Targets.__args__[0]}
            """
        )
        self.assertIn("Targets = list['Target']", output)
        self.assertEqual(_run(output).config, {"item": "Target"})

    @unittest.skipUnless(sys.version_info >= (3, 12), "class type parameters need Python 3.12")
    def test_generic_class_stays_subscriptable(self) -> None:
        output = self._transpile(
            """
            class Box[T]:
                def __init__(self, item: T) -> None:
                    self.item = item

            exports.config = {"box": Box[int](3).item}
            """
        )
        self.assertEqual(_run(output).config, {"box": 3})

    def test_source_without_newer_syntax_keeps_its_lines(self) -> None:
        source_text = "# header\n\nexports.config = {\n    'size': 1,\n}\nfail = undefined_name"
        output = transpile_typed_config(self.diagnostics, source_text, CONFIG_PATH)
        self.assertTrue(output.startswith(source_text + "\n"))
        with self.assertRaises(NameError) as ctx:
            _run(output)
        diagnostic = catch_error(None, ctx.exception, file_path=CONFIG_PATH)
        self.assertEqual(diagnostic.line_number, 6)

    def test_module_level_config_is_exported(self) -> None:
        output = self._transpile(
            """
            config = {"foo": 1}
            """
        )
        self.assertEqual(_run(output).config, {"foo": 1})

    def test_explicit_exports_take_precedence(self) -> None:
        output = self._transpile(
            """
            config = {"foo": 1}
            exports.config = {"foo": 2}
            """
        )
        self.assertEqual(_run(output).config, {"foo": 2})

    def test_plain_source_without_config_exports_nothing(self) -> None:
        output = self._transpile("other = 1\n")
        self.assertFalse(hasattr(_run(output), "config"))

    def test_module_kind_without_interop_has_no_epilogue(self) -> None:
        output = self._transpile("config = {}\n", TranspileOptions(module_kind="module"))
        self.assertNotIn("exports", output)

    def test_existing_error_returns_source_unchanged(self) -> None:
        build_error(self.diagnostics)
        source_text = "value: int = 1\n"
        self.assertEqual(transpile_typed_config(self.diagnostics, source_text, CONFIG_PATH), source_text)
        self.assertEqual(len(self.diagnostics), 1)

    def test_syntax_errors_are_not_reported_by_default(self) -> None:
        source_text = "exports.config = {\n"
        self.assertEqual(transpile_typed_config(self.diagnostics, source_text, CONFIG_PATH), source_text)
        self.assertEqual(self.diagnostics, [])

    def test_syntax_errors_are_reported_when_enabled(self) -> None:
        source_text = "exports.config = {\n"
        output = transpile_typed_config(
            self.diagnostics,
            source_text,
            CONFIG_PATH,
            TranspileOptions(report_diagnostics=True),
        )
        self.assertEqual(output, source_text)
        self.assertEqual(len(self.diagnostics), 1)
        self.assertEqual(self.diagnostics[0].level, "error")
        self.assertTrue(self.diagnostics[0].message_text.startswith("SyntaxError"))
        self.assertEqual(self.diagnostics[0].abs_file_path, CONFIG_PATH)


if __name__ == "__main__":
    unittest.main()
