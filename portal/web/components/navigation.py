"""
Navigation bar for the portal panels.

Shows the panel title, the tabs of the current panel, the signed-in user's
display name and a logout button. The logout is a POST form so it cannot be
triggered by a cross-site link.
"""

from typing import Optional, Sequence, Tuple

from .base import Component


class NavBar(Component):
    """Top bar with panel tabs and the current user."""

    def __init__(
        self,
        title: str,
        *,
        display_name: Optional[str] = None,
        tabs: Sequence[Tuple[str, str]] = (),
        active_tab: str = "",
    ):
        """
        Args:
            title: Panel title (escaped)
            display_name: Name or email local part of the signed-in user
            tabs: (key, label) pairs rendered as links to `/?tab=<key>`
            active_tab: Key of the highlighted tab
        """
        self.title = title
        self.display_name = display_name
        self.tabs = tabs
        self.active_tab = active_tab

    def render(self) -> str:
        tab_links = "".join(self._render_tab(key, label) for key, label in self.tabs)
        tabs_html = f'<nav class="panel-tabs" aria-label="Panel">{tab_links}</nav>' if tab_links else ""
        user_html = ""
        if self.display_name:
            user_html = (
                '<div class="navbar-user">'
                f'<span class="navbar-name">{self.escape(self.display_name)}</span>'
                '<form method="post" action="/auth/logout" class="navbar-logout">'
                '<button type="submit" class="btn btn-secondary">Logout</button>'
                "</form>"
                "</div>"
            )
        return (
            '<header class="navbar" role="banner">'
            f'<h1 class="navbar-title">{self.escape(self.title)}</h1>'
            f"{user_html}"
            "</header>"
            f"{tabs_html}"
        )

    def _render_tab(self, key: str, label: str) -> str:
        active = key == self.active_tab
        attrs = self.attributes(
            href=f"/?tab={key}",
            class_=self.classes("panel-tab", active=active),
            aria_current="page" if active else None,
        )
        return f"<a {attrs}>{self.escape(label)}</a>"
