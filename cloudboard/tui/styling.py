"""Textual CSS for the dashboard."""

TUI_CSS = """
Screen {
    layers: base overlay;
}

#tabs {
    height: 3;
    border: round $primary;
    padding: 0 1;
}

#body {
    height: 1fr;
    border: round $primary;
    padding: 0 1;
    overflow: hidden;
}

#status {
    height: 3;
    border: round $secondary;
    padding: 0 1;
}

#toasts {
    layer: overlay;
    dock: top;
    offset: 0 3;
    width: auto;
    max-width: 60;
    height: auto;
    margin: 0 2;
    padding: 0 1;
    background: $surface;
    display: none;
}

#dialog {
    layer: overlay;
    width: 70%;
    height: 60%;
    align: center middle;
    offset: 15% 20%;
    background: $panel;
    display: none;
}
"""
