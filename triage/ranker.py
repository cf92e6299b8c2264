"""
Disease confidence ranking.

Weights are calibration parameters. They are heuristic, not fitted to
outcome data.
"""

from typing import Callable, Dict, Iterable, List, Optional

from models import (
    AssociationSeverity,
    Disease,
    DiseaseSymptomAssociation,
    Frequency,
    RankedDisease,
)

TOP_N = 5
CONFIDENCE_PRECISION = 4
SORT_PRECISION = 9

BASE_WEIGHT = 0.2

FREQUENCY_BONUS = {
    Frequency.COMMON.value: 0.4,
    Frequency.OCCASIONAL.value: 0.2,
    Frequency.RARE.value: 0.1,
}

SEVERITY_BONUS = {
    AssociationSeverity.SEVERE.value: 0.3,
    AssociationSeverity.MODERATE.value: 0.2,
    AssociationSeverity.MILD.value: 0.1,
}


def association_weight(association: DiseaseSymptomAssociation) -> float:
    frequency = (association.frequency or "").lower()
    severity = (association.severity or "").lower()
    return BASE_WEIGHT + FREQUENCY_BONUS.get(frequency, 0.0) + SEVERITY_BONUS.get(severity, 0.0)


def rank_diseases(
    associations: Iterable[DiseaseSymptomAssociation],
    matched_symptom_ids: Iterable[str],
    total_symptom_count: int,
    get_disease: Callable[[str], Optional[Disease]],
    top_n: int = TOP_N,
) -> List[RankedDisease]:
    """
    Score diseases from the associations of the matched symptoms.

    Args:
        associations: Candidate associations, in catalog order
        matched_symptom_ids: Ids of the symptoms the matcher found; other
                             associations are ignored
        total_symptom_count: Number of phrases the user supplied (the
                             normalizer; values below 1 are treated as 1)
        get_disease: Lookup for disease records; ids it cannot resolve are skipped
        top_n: Length cap of the result

    Returns:
        RankedDisease list sorted by confidence descending, ties kept in the
        order the diseases were first encountered.
    """
    matched = set(matched_symptom_ids)
    scores: Dict[str, float] = {}
    counts: Dict[str, int] = {}

    # dict preserves first-encounter order
    for association in associations:
        if association.symptom_id not in matched:
            continue
        disease_id = association.disease_id
        scores[disease_id] = scores.get(disease_id, 0.0) + association_weight(association)
        counts[disease_id] = counts.get(disease_id, 0) + 1

    normalizer = max(total_symptom_count, 1)
    candidates = []
    for disease_id, score in scores.items():
        disease = get_disease(disease_id)
        if disease is None:
            continue
        candidates.append((min(score / normalizer, 1.0), disease_id, disease))

    # Order on the unrounded confidence. SORT_PRECISION only absorbs float
    # summation noise so equal scores stay tied; list.sort is stable.
    candidates.sort(key=lambda c: round(c[0], SORT_PRECISION), reverse=True)

    return [
        RankedDisease(
            disease=disease,
            score=round(scores[disease_id], 6),
            confidence=round(confidence, CONFIDENCE_PRECISION),
            matched_symptom_count=counts[disease_id],
        )
        for confidence, disease_id, disease in candidates[:top_n]
    ]
