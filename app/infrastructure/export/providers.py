import io
from typing import List
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer

from app.domains.testimonies.entities import Testimony, FrameworkType
from app.domains.testimonies.frameworks import get_framework_name
from app.infrastructure.ai.providers import strip_html


def _clean(value) -> str:
    # Paragraph понимает разметку, поэтому текст экранируем
    text = value if isinstance(value, str) else ""
    return escape(strip_html(text)).replace("\n", "<br/>")


class PDFProvider:
    """Рендер свидетельства в PDF через reportlab"""

    def __init__(self):
        self.styles = getSampleStyleSheet()

    def _section(self, title: str, body) -> List:
        return [
            Paragraph(_clean(title), self.styles["Heading2"]),
            Paragraph(_clean(body), self.styles["BodyText"]),
            Spacer(1, 0.2 * inch),
        ]

    def _labelled(self, label: str, body) -> Paragraph:
        return Paragraph(f"<b>{escape(label)}:</b> {_clean(body)}", self.styles["BodyText"])

    def _story(self, testimony: Testimony) -> List:
        content = testimony.content if isinstance(testimony.content, dict) else {}
        story = [
            Paragraph(_clean(testimony.title), self.styles["Title"]),
            Paragraph(escape(get_framework_name(testimony.framework_type)), self.styles["Italic"]),
            Spacer(1, 0.3 * inch),
        ]

        if testimony.framework_type == FrameworkType.BEFORE_ENCOUNTER_AFTER:
            story += self._section("Before", content.get("before"))
            story += self._section("Encounter", content.get("encounter"))
            story += self._section("After", content.get("after"))

        elif testimony.framework_type == FrameworkType.LIFE_TIMELINE:
            for index, milestone in enumerate(content.get("milestones") or [], start=1):
                heading = milestone.get("age") or f"Milestone {index}"
                story.append(Paragraph(_clean(heading), self.styles["Heading3"]))
                story.append(self._labelled("Event", milestone.get("event")))
                story.append(self._labelled("Impact", milestone.get("impact")))
                story.append(Spacer(1, 0.15 * inch))

        elif testimony.framework_type == FrameworkType.SEASONS_OF_GROWTH:
            for index, season in enumerate(content.get("seasons") or [], start=1):
                heading = season.get("season") or f"Season {index}"
                story.append(Paragraph(_clean(heading), self.styles["Heading2"]))
                story.append(self._labelled("Challenges", season.get("challenges")))
                story.append(self._labelled("Growth", season.get("growth")))
                story.append(self._labelled("Lessons Learned", season.get("lessons")))
                story.append(Spacer(1, 0.2 * inch))

        elif testimony.framework_type == FrameworkType.FREE_FORM:
            story.append(Paragraph(_clean(content.get("narrative")), self.styles["BodyText"]))

        else:
            story.append(Paragraph("No content available", self.styles["BodyText"]))

        return story

    def generate(self, testimony: Testimony) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            title=testimony.title,
            leftMargin=40, rightMargin=40, topMargin=40, bottomMargin=40
        )
        doc.build(self._story(testimony))
        return buffer.getvalue()
