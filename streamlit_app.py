import asyncio

import streamlit as st

from resultlens.core.config import settings
from resultlens.core.containers import build_location_resolver, build_tree_provider
from resultlens.domain.models import ResultNode, SeverityHint
from resultlens.services.navigation_service import NavigationService, NavigationUnavailable, SnippetHost, UserCancelled
from resultlens.services.tree_service import FileNode

ICONS = {
    SeverityHint.ERROR: "🔴",
    SeverityHint.WARNING: "🟠",
    SeverityHint.INFO: "🔵",
    SeverityHint.PASSED: "🟢",
    SeverityHint.UNKNOWN: "⚪",
}

st.title("Scan Results")

workspace = st.sidebar.text_input("Workspace root", value=settings.WORKSPACE_ROOT or "")
if workspace != (settings.WORKSPACE_ROOT or ""):
    settings.WORKSPACE_ROOT = workspace or None
    st.session_state.pop("provider", None)

if "provider" not in st.session_state:
    st.session_state["provider"] = build_tree_provider(settings)
provider = st.session_state["provider"]
resolver = build_location_resolver(settings)

if st.sidebar.button("Refresh"):
    provider.refresh()


def show_source(node: ResultNode) -> None:
    nav = node.navigation
    key = f"pick-{id(node)}"

    def show(path, line, snippet):
        st.caption(f"{path}:{line}")
        st.code(snippet)

    def ask(hint):
        st.warning(f"{hint} was not found in the workspace.")
        value = st.text_input("Open another file instead", key=key, placeholder="path relative to the workspace")
        return str(resolver.resolve_path(value)) if value else None

    service = NavigationService(resolver, SnippetHost(show=show, ask=ask))
    outcome = asyncio.run(service.navigate(nav.path, nav.line, nav.column))
    if isinstance(outcome, NavigationUnavailable):
        st.warning(outcome.reason)
    elif isinstance(outcome, UserCancelled) and st.session_state.get(key):
        st.error(f"Could not open {st.session_state[key]}")


def render(nodes: list[ResultNode], depth: int = 0) -> None:
    for node in nodes:
        icon = ICONS.get(node.severity, "") if node.severity else ""
        text = f"{'&nbsp;' * 4 * depth}{icon} **{node.label}**"
        if node.detail:
            text += f"  ·  {node.detail}"
        st.markdown(text, help=node.tooltip)
        if node.navigation and st.toggle("Show source", key=f"nav-{id(node)}"):
            show_source(node)
        if node.action and provider.results_dir:
            raw = provider.read_raw(node.action.target)
            if raw is not None:
                st.download_button("View Full Report", raw, file_name=node.action.target, key=f"raw-{id(node)}")
        if node.children:
            render(node.children, depth + 1)


roots = provider.roots()
files = [r for r in roots if isinstance(r, FileNode)]
if not files:
    for placeholder in roots:
        st.info(placeholder.node.label)
else:
    chosen = st.selectbox("Result file", files, format_func=lambda f: f.label)
    render(provider.expand(chosen))
