"""
rendercheck: side-by-side visual checks for DOM-to-image rendering.

Serves HTML/CSS fixtures into a page that runs the rendering library in
the browser and shows its output next to a recorded control image.
"""

__version__ = "0.1.0"
