"""
Derived dashboard metrics.

Everything here is a pure function of the collections handed in: no store
access, no clock reads unless the caller leaves ``current_year`` unset. Odd
values in the records (missing or non-numeric citations, string years) are
coerced instead of raising.
"""
from datetime import datetime
from typing import Dict, List, Optional

from records import coerce_int

TREND_YEARS = 5
DEFAULT_CAREER_PROGRESS = 78


def _citations(pub) -> int:
    if not isinstance(pub, dict):
        return 0
    return max(0, coerce_int(pub.get('citations')))


def _compute_h_index(citation_counts):
    citation_counts = sorted([max(0, coerce_int(c)) for c in citation_counts], reverse=True)
    h = 0
    for i, c in enumerate(citation_counts, 1):
        if c >= i:
            h = i
        else:
            break
    return h


def compute_h_index(publications: List[Dict]) -> int:
    return _compute_h_index([_citations(p) for p in publications or []])


def total_citations(publications: List[Dict]) -> int:
    return sum(_citations(p) for p in publications or [])


def completed_fdp_count(fdps: Optional[Dict]) -> int:
    if not isinstance(fdps, dict):
        return 0
    completed = fdps.get('completed')
    return len(completed) if isinstance(completed, list) else 0


def yearly_trend(publications: List[Dict], current_year: int) -> List[Dict]:
    """Publication and citation counts for the five years ending at ``current_year``, oldest first."""
    trend = []
    for year in range(current_year - TREND_YEARS + 1, current_year + 1):
        year_pubs = [p for p in publications or [] if isinstance(p, dict) and coerce_int(p.get('year')) == year]
        trend.append({
            'year': str(year),
            'publications': len(year_pubs),
            'citations': total_citations(year_pubs),
        })
    return trend


def career_progress(profile: Optional[Dict]) -> int:
    # Stored directly on the profile, never derived.
    value = profile.get('careerProgress') if isinstance(profile, dict) else None
    return coerce_int(value, DEFAULT_CAREER_PROGRESS)


def build_dashboard(inputs, current_year: Optional[int] = None) -> Dict:
    if current_year is None:
        current_year = datetime.now().year
    publications = inputs.publications
    return {
        'metrics': {
            'totalPublications': len(publications or []),
            'totalCitations': total_citations(publications),
            'hIndex': compute_h_index(publications),
            'completedFDPs': completed_fdp_count(inputs.fdps),
        },
        'yearlyData': yearly_trend(publications, current_year),
        'careerProgress': career_progress(inputs.profile),
    }


def directory_counts(publications: List[Dict], fdps: Optional[Dict]) -> Dict:
    return {
        'publications': len(publications or []),
        'fdps': completed_fdp_count(fdps),
        'hIndex': compute_h_index(publications),
    }
