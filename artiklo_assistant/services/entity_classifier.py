# artiklo_assistant/services/entity_classifier.py
from enum import Enum
from typing import Iterable, Optional, Tuple

from artiklo_assistant.models.analysis_models import ExtractedEntity


class EntityRole(str, Enum):
    ADDRESSEE = "addressee"
    CASE_REF = "caseRef"
    OTHER = "other"


# court, office, institution, directorate
ADDRESSEE_TOKENS: Tuple[str, ...] = ("mahkeme", "daire", "kurum", "müdürlüğü")
# file, docket, enforcement proceeding
CASE_REF_TOKENS: Tuple[str, ...] = ("dosya", "esas", "takip")


def turkish_lower(text: str) -> str:
    # str.lower() turns "İ" into "i" + combining dot, which breaks substring matching
    return text.replace("İ", "i").lower()


def classify_entity_role(name: Optional[str]) -> EntityRole:
    """Addressee tokens win when a name contains both kinds."""
    lowered = turkish_lower(str(name or ""))
    if any(token in lowered for token in ADDRESSEE_TOKENS):
        return EntityRole.ADDRESSEE
    if any(token in lowered for token in CASE_REF_TOKENS):
        return EntityRole.CASE_REF
    return EntityRole.OTHER


def find_first(entities: Iterable[ExtractedEntity], role: EntityRole) -> Optional[ExtractedEntity]:
    return next((e for e in entities if classify_entity_role(e.entity) == role), None)
