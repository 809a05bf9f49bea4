import unittest
from unittest.mock import AsyncMock, MagicMock

from rich.console import Console

from extview.catalog import ExtensionCatalog
from extview.core.errors import NotAvailableError
from extview.core.model import ExtensionState, GalleryExtension, LocalExtension, LocalExtensionType
from extview.render import _label, build_dependency_tree


def a_local(name, publisher, version="1.0.0", ext_type=LocalExtensionType.USER):
    return LocalExtension.from_dict({
        "type": ext_type.value,
        "path": f"/exts/{publisher}.{name}",
        "manifest": {"name": name, "publisher": publisher, "version": version},
    })


def a_gallery(name, publisher, *dependencies, version="1.0.0"):
    return GalleryExtension.from_dict({
        "name": name,
        "publisher": publisher,
        "version": version,
        "assets": {"manifest": f"https://gallery.example/{publisher}/{name}/manifest"},
        "properties": {"dependencies": list(dependencies)},
    })


class TestExtensionCatalog(unittest.TestCase):

    def setUp(self):
        self.catalog = ExtensionCatalog()

    def test_merges_local_and_gallery_by_key(self):
        self.catalog.add_local([a_local("e1", "p1", "1.0.0")])
        self.catalog.add_gallery([a_gallery("e1", "p1", version="1.3.0"), a_gallery("e2", "p1")])

        self.assertEqual(len(self.catalog), 2)
        merged = self.catalog["p1.e1"]
        self.assertIsNotNone(merged.local)
        self.assertIsNotNone(merged.gallery)
        self.assertEqual(merged.version, "1.0.0")
        self.assertEqual(merged.latest_version, "1.3.0")
        self.assertEqual(self.catalog.outdated, [merged])
        self.assertEqual(self.catalog.local, [merged])

    def test_gallery_then_local_keeps_gallery(self):
        self.catalog.add_gallery([a_gallery("e1", "p1", "p1.e2")])
        self.catalog.add_local([a_local("e1", "p1")])

        ext = self.catalog.get("p1.e1")
        self.assertIsNotNone(ext.gallery)
        self.assertTrue(ext.has_dependencies)

    def test_mapping_protocol(self):
        self.catalog.add_gallery([a_gallery("e1", "p1")])

        self.assertIn("p1.e1", self.catalog)
        self.assertNotIn("P1.E1", self.catalog)
        self.assertEqual(list(self.catalog), ["p1.e1"])
        self.assertIsNone(self.catalog.get("p1.nope"))
        with self.assertRaises(KeyError):
            self.catalog["p1.nope"]

    def test_state_provider(self):
        self.catalog.add_local([a_local("e1", "p1")])
        self.catalog.add_gallery([a_gallery("e2", "p1")])
        installed, remote = self.catalog["p1.e1"], self.catalog["p1.e2"]

        self.assertEqual(installed.state, ExtensionState.INSTALLED)
        self.assertEqual(remote.state, ExtensionState.UNINSTALLED)

        self.catalog.set_state("p1.e2", ExtensionState.INSTALLING)
        self.assertEqual(remote.state, ExtensionState.INSTALLING)

        self.catalog.set_state("p1.e2", None)
        self.assertEqual(remote.state, ExtensionState.UNINSTALLED)

    def test_load_dependencies(self):
        self.catalog.add_gallery([a_gallery("a", "p"), a_gallery("b", "p", "p.a")])

        root = self.catalog.load_dependencies(self.catalog["p.b"])

        self.assertTrue(root.has_dependencies)
        self.assertEqual([n.extension.key for n in root.dependencies], ["p.a"])
        self.assertFalse(root.dependencies[0].has_dependencies)


class TestCatalogContent(unittest.IsolatedAsyncioTestCase):

    async def test_views_share_gallery_service(self):
        service = MagicMock()
        service.get_asset = AsyncMock(return_value=b'{"name": "e1"}')
        catalog = ExtensionCatalog(service)
        catalog.add_gallery([a_gallery("e1", "p1")])

        manifest = await catalog["p1.e1"].get_manifest()

        self.assertEqual(manifest, {"name": "e1"})
        service.get_asset.assert_awaited_once_with("https://gallery.example/p1/e1/manifest")

    async def test_remote_content_without_gallery_service(self):
        catalog = ExtensionCatalog()
        catalog.add_gallery([a_gallery("e1", "p1")])

        with self.assertRaises(NotAvailableError):
            await catalog["p1.e1"].get_manifest()


class TestRenderTree(unittest.TestCase):

    def _render(self, tree):
        console = Console(width=120, record=True, color_system=None)
        console.print(tree)
        return console.export_text()

    def test_render_nested_tree(self):
        catalog = ExtensionCatalog()
        catalog.add_gallery([a_gallery("a", "p"), a_gallery("c", "p", "p.a"), a_gallery("b", "p", "p.c")])

        output = self._render(build_dependency_tree(catalog.load_dependencies(catalog["p.b"])))

        lines = output.splitlines()
        self.assertIn("p.b", lines[0])
        self.assertIn("(-) c", lines[1])
        self.assertIn("(-) a", lines[2])

    def test_render_marks_cycles(self):
        catalog = ExtensionCatalog()
        catalog.add_gallery([a_gallery("a", "p", "p.b"), a_gallery("b", "p", "p.a")])

        output = self._render(build_dependency_tree(catalog.load_dependencies(catalog["p.a"])))

        self.assertIn("⟳", output)

    def test_render_missing_dependency(self):
        catalog = ExtensionCatalog()
        catalog.add_gallery([a_gallery("a", "p", "p.ghost")])

        output = self._render(build_dependency_tree(catalog.load_dependencies(catalog["p.a"])))

        self.assertIn("p.ghost", output)
        self.assertIn("missing", output)

    def test_render_marks_outdated(self):
        catalog = ExtensionCatalog()
        catalog.add_local([a_local("a", "p", "1.0.0")])
        catalog.add_gallery([a_gallery("a", "p", version="1.1.0"), a_gallery("b", "p", "p.a")])

        output = self._render(build_dependency_tree(catalog.load_dependencies(catalog["p.b"])))

        self.assertIn("1.0.0", output)
        self.assertIn("1.1.0", output)

    def test_render_missing_dependency_keeps_siblings(self):
        catalog = ExtensionCatalog()
        catalog.add_gallery([a_gallery("a", "p"), a_gallery("root", "p", "p.a", "p.ghost", "p.c"), a_gallery("c", "p")])

        output = self._render(build_dependency_tree(catalog.load_dependencies(catalog["p.root"])))
        lines = output.splitlines()

        self.assertIn("(-) a", lines[1])
        self.assertIn("(!) p.ghost (missing)", lines[2])
        self.assertIn("(-) c", lines[3])

    def test_installed_label_closes_its_markup(self):
        catalog = ExtensionCatalog()
        catalog.add_local([a_local("a", "p", "1.0.0")])

        label = _label(catalog.load_dependencies(catalog["p.a"]))

        self.assertEqual(label, "[green](•) a[/] [dim]1.0.0[/]")
