from __future__ import annotations

from pathlib import Path
import tempfile
import textwrap
import unittest

from core.config_loader import find_config_file, load_config_file
from vendorinstall.config import load_defaults
from vendorinstall.errors import ConfigurationError


class ConfigLoaderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_loads_toml_json_and_yaml(self) -> None:
        (self.root / "a.toml").write_text('[vendorinstall]\nsource = "vendor"\n')
        (self.root / "b.json").write_text('{"vendorinstall": {"source": "vendor"}}')
        (self.root / "c.yaml").write_text("vendorinstall:\n  source: vendor\n")
        for name in ("a.toml", "b.json", "c.yaml"):
            with self.subTest(name=name):
                data = load_config_file(self.root / name)
                self.assertEqual(data["vendorinstall"]["source"], "vendor")

    def test_empty_yaml_is_empty_mapping(self) -> None:
        (self.root / "empty.yml").write_text("")
        self.assertEqual(load_config_file(self.root / "empty.yml"), {})

    def test_rejects_unknown_suffix_and_non_mapping_root(self) -> None:
        (self.root / "conf.ini").write_text("[x]\n")
        with self.assertRaises(ValueError):
            load_config_file(self.root / "conf.ini")
        (self.root / "list.json").write_text("[1, 2]")
        with self.assertRaises(TypeError):
            load_config_file(self.root / "list.json")

    def test_find_config_file_prefers_toml(self) -> None:
        self.assertIsNone(find_config_file(self.root, ["vendorinstall"]))
        (self.root / "vendorinstall.yaml").write_text("{}")
        (self.root / "vendorinstall.toml").write_text("")
        self.assertEqual(find_config_file(self.root, ["vendorinstall"]), self.root / "vendorinstall.toml")

    def test_malformed_yaml_is_value_error(self) -> None:
        (self.root / "broken.yaml").write_text("vendorinstall: [unclosed\n")
        with self.assertRaises(ValueError) as ctx:
            load_config_file(self.root / "broken.yaml")
        self.assertIn("broken.yaml", str(ctx.exception))


class LoadDefaultsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def _write(self, text: str) -> None:
        (self.root / "vendorinstall.toml").write_text(textwrap.dedent(text))

    def test_no_file_gives_empty_defaults(self) -> None:
        defaults = load_defaults(self.root)
        self.assertIsNone(defaults.path)
        self.assertIsNone(defaults.source)
        self.assertEqual(defaults.commands, [])

    def test_reads_all_keys(self) -> None:
        self._write(
            """
            [vendorinstall]
            source = "third_party"
            target = "/opt/bin"
            commands = "stringer -h, mockgen"
            quiet = true
            toolchain = "go1.22"
            timeout = 120

            [vendorinstall.environment]
            CGO_ENABLED = 0
            """
        )
        defaults = load_defaults(self.root)
        self.assertEqual(defaults.source, "third_party")
        self.assertEqual(defaults.target, "/opt/bin")
        self.assertEqual(defaults.commands, [["stringer", "-h"], ["mockgen"]])
        self.assertTrue(defaults.quiet)
        self.assertEqual(defaults.toolchain, "go1.22")
        self.assertEqual(defaults.timeout, 120.0)
        self.assertEqual(defaults.environment, {"CGO_ENABLED": "0"})

    def test_invalid_values_are_configuration_errors(self) -> None:
        cases = [
            "[vendorinstall]\nunknown = 1\n",
            "[vendorinstall]\nsource = 3\n",
            "[vendorinstall]\nquiet = \"yes\"\n",
            "[vendorinstall]\ntimeout = -1\n",
            "[vendorinstall]\ncommands = [1]\n",
            "[vendorinstall]\ncommands = \"foo,,bar\"\n",
            "[vendorinstall]\ntimeout = nan\n",
            "vendorinstall = 5\n",
            "[vendorinstall\n",
        ]
        for text in cases:
            with self.subTest(text=text):
                self._write(text)
                with self.assertRaises(ConfigurationError):
                    load_defaults(self.root)

    def test_malformed_yaml_is_configuration_error(self) -> None:
        (self.root / "vendorinstall.yaml").write_text("vendorinstall: [unclosed\n")
        with self.assertRaises(ConfigurationError):
            load_defaults(self.root)

    def test_explicit_path(self) -> None:
        path = self.root / "custom.json"
        path.write_text('{"vendorinstall": {"source": "deps"}}')
        self.assertEqual(load_defaults(Path("/nonexistent"), str(path)).source, "deps")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
