"""
Layout Component for the portal

Main layout wrapper that combines the navigation bar, flash message and
panel content into a complete HTML page.
"""

from typing import Optional

from .base import Component


class Layout(Component):
    """Main layout component that assembles the complete page"""

    def __init__(
        self,
        title: str,
        content: str,
        *,
        nav_html: str = "",
        flash: Optional[tuple[str, str]] = None,
        live_panel: Optional[str] = None,
        live_version: int = 0,
    ):
        """
        Args:
            title: Page title (will be escaped)
            content: Main content HTML (pre-rendered components)
            nav_html: Pre-rendered NavBar
            flash: Optional (kind, message) one-shot notice
            live_panel: Panel id polled by portal.js for change-driven reloads
            live_version: Panel version at render time
        """
        self.title = title
        self.content = content
        self.nav_html = nav_html
        self.flash = flash
        self.live_panel = live_panel
        self.live_version = live_version

    def render(self) -> str:
        body_attrs = ""
        if self.live_panel:
            body_attrs = " " + self.attributes(
                data_live_panel=self.live_panel,
                data_live_version=str(self.live_version),
            )
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    {self._render_head()}
</head>
<body{body_attrs}>
    <a href="#main-content" class="skip-link">Skip to main content</a>
    {self.nav_html}
    <main id="main-content" class="main-content" role="main">
        {self._render_flash()}
        {self.content}
    </main>
</body>
</html>"""

    def _render_head(self) -> str:
        return f"""
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{self.escape(self.title)} - Campus Recruitment</title>
    <link rel="stylesheet" href="/static/css/portal.css?v=1">
    <script src="/static/js/portal.js?v=1" defer></script>
    """

    def _render_flash(self) -> str:
        if not self.flash:
            return ""
        kind, message = self.flash
        role = "alert" if kind == "error" else "status"
        return (
            f'<div class="{self.classes("flash", f"flash-{kind}")}" role="{role}">'
            f"{self.escape(message)}</div>"
        )
