"""Order note helpers"""

from typing import Optional

from app.config import settings


def combine_notes(*parts: Optional[str]) -> str:
    """Join non-empty notes in order; empty parts leave no separator behind"""
    cleaned = [part.strip() for part in parts if isinstance(part, str) and part.strip()]
    return settings.note_separator.join(cleaned)


def transfer_tag(source_table_id: str, target_table_id: str) -> str:
    return settings.transfer_tag_format.format(
        source=settings.table_label(source_table_id),
        target=settings.table_label(target_table_id),
    )
