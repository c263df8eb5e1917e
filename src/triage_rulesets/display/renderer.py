"""ResultCopyRenderer — Jinja2-based display copy for wizard steps.

Loads templates from the ``template/`` directory and renders ``QuestionStep``
/ ``ResultStep`` objects into the plain-text copy shown by text front ends
(the simulator script, terminal demos).  Templates are dispatched by
``step.type``.

Also builds the completion ``Notification`` a front end shows as a toast
when a recommendation becomes available.
"""

from __future__ import annotations

from pathlib import Path

import jinja2

from triage_rulesets.catalog import QuestionCatalog
from triage_rulesets.models.session import Notification, StepResult

# --- step.type-to-template mapping ---
_STEP_TEMPLATES: dict[str, str] = {
    "question": "question.jinja2",
    "result": "result.jinja2",
}

NOTIFICATION_TITLE = "Evaluación completada"
NOTIFICATION_DESCRIPTION = "Tu recomendación personalizada está lista"


class ResultCopyRenderer:
    """Jinja2 renderer for wizard steps and completion notifications.

    Args:
        catalog: catalog used to resolve recommendation labels
        template_dir: optional override for the template directory.
            Defaults to ``template/`` sibling of this module.
    """

    def __init__(self, catalog: QuestionCatalog, template_dir: Path | None = None) -> None:
        if template_dir is None:
            template_dir = Path(__file__).parent / "template"
        self._catalog = catalog
        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )

    def render_step(self, step: StepResult) -> str:
        """Render a question or result step as display text."""
        template_name = _STEP_TEMPLATES[step.type]
        return self.render(template_name, step=step).strip()

    def render(self, template_name: str, **context) -> str:
        """Render a named template with arbitrary context."""
        template = self._env.get_template(template_name)
        return template.render(**context)

    def notification(self, recommendation_id: str) -> Notification:
        """Toast payload announcing that ``recommendation_id`` is ready."""
        return Notification(
            title=NOTIFICATION_TITLE,
            description=NOTIFICATION_DESCRIPTION,
            recommendation=recommendation_id,
        )

    def render_notification(self, notification: Notification) -> str:
        label = self._catalog.recommendation(notification.recommendation).label
        return self.render(
            "notification.jinja2",
            title=notification.title,
            description=notification.description,
            label=label,
        ).strip()
