from rich.markup import escape
from rich.tree import Tree

from extview.core.dependencies import DEFAULT_MAX_DEPTH, ExtensionDependencies
from extview.core.errors import ExtensionLookupError


def _label(node: ExtensionDependencies) -> str:
    extension = node.extension
    safe_name = escape(extension.display_name or extension.key)
    safe_ver = escape(extension.version or "")

    if node.is_cycle:
        return f"[yellow](⟳) {safe_name}[/] [dim]{safe_ver}[/]"
    if extension.outdated:
        safe_latest = escape(extension.latest_version or "")
        return f"[bold yellow](↑) {safe_name}[/] [dim]{safe_ver}[/] [yellow]→ {safe_latest}[/]"
    if not extension.local:
        return f"[blue](-) {safe_name}[/] [dim]{safe_ver}[/]"
    return f"[green](•) {safe_name}[/] [dim]{safe_ver}[/]"


def build_dependency_tree(root: ExtensionDependencies, max_depth: int = DEFAULT_MAX_DEPTH) -> Tree:
    """Renderable for the dependency tree under `root`, cut at `max_depth` levels."""
    tree = Tree(f"📦 {escape(root.extension.key)}")

    def add_nodes(tree_node, data_node, remaining):
        if remaining <= 0 or data_node.is_cycle:
            return

        for dependency_id in data_node.dependency_ids:
            try:
                child = data_node.child(dependency_id)
            except ExtensionLookupError:
                tree_node.add(f"[bold red](!) {escape(dependency_id)}[/] [red](missing)[/]")
                continue

            branch = tree_node.add(_label(child))
            add_nodes(branch, child, remaining - 1)

    add_nodes(tree, root, max_depth)
    return tree
