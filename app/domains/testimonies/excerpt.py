"""Короткие превью свидетельств для галереи и метаданных соцсетей.

Превью берется из поля, выбранного по шаблону свидетельства, и обрезается
по границе слова (по умолчанию 160 символов, под лимит Twitter).
"""
from typing import Any, Callable, Dict

from app.domains.testimonies.entities import FrameworkType, Testimony

MAX_EXCERPT_LENGTH = 160


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _first_item(content: Dict[str, Any], key: str) -> Dict[str, Any]:
    items = content.get(key)
    if not isinstance(items, list) or not items or not isinstance(items[0], dict):
        return {}
    return items[0]


def _first_present(*values: Any) -> str:
    for value in values:
        text = _text(value)
        if text:
            return text
    return ""


def _before_encounter_after(content: Dict[str, Any]) -> str:
    # Встреча и есть момент перемены
    return _first_present(content.get("encounter"), content.get("before"), content.get("after"))


def _life_timeline(content: Dict[str, Any]) -> str:
    milestone = _first_item(content, "milestones")
    parts = [_text(milestone.get("event")), _text(milestone.get("impact"))]
    return " - ".join(part for part in parts if part)


def _seasons_of_growth(content: Dict[str, Any]) -> str:
    season = _first_item(content, "seasons")
    return _first_present(season.get("growth"), season.get("lessons"), season.get("challenges"))


def _free_form(content: Dict[str, Any]) -> str:
    return _text(content.get("narrative"))


_EXTRACTORS: Dict[FrameworkType, Callable[[Dict[str, Any]], str]] = {
    FrameworkType.BEFORE_ENCOUNTER_AFTER: _before_encounter_after,
    FrameworkType.LIFE_TIMELINE: _life_timeline,
    FrameworkType.SEASONS_OF_GROWTH: _seasons_of_growth,
    FrameworkType.FREE_FORM: _free_form,
}


def truncate_at_word_boundary(text: str, max_length: int) -> str:
    """Обрезка по последнему пробелу в пределах лимита с многоточием"""
    if not text:
        return ""

    trimmed = text.strip()
    if len(trimmed) <= max_length:
        return trimmed

    truncated = trimmed[:max_length]
    last_space = truncated.rfind(" ")

    if last_space > 0:
        return truncated[:last_space].rstrip() + "..."

    # Пробела нет, режем жестко
    return truncated.rstrip() + "..."


def generate_excerpt(testimony: Testimony, max_length: int = MAX_EXCERPT_LENGTH) -> str:
    """Превью свидетельства; для неполного содержимого возвращает пустую строку"""
    try:
        extractor = _EXTRACTORS[FrameworkType(testimony.framework_type)]
    except (KeyError, ValueError):
        return ""

    content = testimony.content if isinstance(testimony.content, dict) else {}
    return truncate_at_word_boundary(extractor(content), max_length)


def generate_excerpt_with_fallback(testimony: Testimony, max_length: int = MAX_EXCERPT_LENGTH) -> str:
    """Превью, а если его нет, описание по заголовку"""
    excerpt = generate_excerpt(testimony, max_length)

    if excerpt:
        return excerpt

    return f'Read "{testimony.title}" — a personal testimony of faith and transformation.'
