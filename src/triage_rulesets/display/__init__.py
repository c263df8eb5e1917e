"""Display copy for wizard steps.

Provides ``ResultCopyRenderer``, a Jinja2-based renderer that turns engine
steps into the text shown to the user and builds completion notifications.
"""

from triage_rulesets.display.renderer import ResultCopyRenderer

__all__ = ["ResultCopyRenderer"]
