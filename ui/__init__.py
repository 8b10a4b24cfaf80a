"""
ui/
---
Presentation layer.

    from ui import render_canvas, progress_table
    from ui import playback_controls, algorithm_selector, …
"""

from ui.canvas import render_canvas, CanvasConfig, CONFIG

from ui.controls import (
    playback_controls,
    algorithm_selector,
    start_picker,
    progress_table,
    color_key,
    analytics_panel,
    pseudocode_viewer,
    explanation_panel,
)

__all__ = [
    "render_canvas",
    "CanvasConfig",
    "CONFIG",
    "playback_controls",
    "algorithm_selector",
    "start_picker",
    "progress_table",
    "color_key",
    "analytics_panel",
    "pseudocode_viewer",
    "explanation_panel",
]
