"""
Confidence weight map
Every fixed score used by the extraction pipeline lives here so it can be
tuned and tested in one place.
"""

from typing import Dict


WEIGHTS: Dict[str, Dict[str, float]] = {
    # Per-line evidence for each layout strategy
    'structure.bordered': {
        'heavy': 0.4,
        'light': 0.3,
        'ascii': 0.2,
        'mixed': 0.1,
    },
    'structure.tab': {
        'multiple': 0.5,
        'single': 0.3,
        'mixed': 0.2,
    },
    'structure.space': {
        'wide': 0.4,
        'medium': 0.3,
        'narrow': 0.2,
    },
    'structure.aligned': {
        'consistent': 0.3,
        'left': 0.2,
        'right': 0.2,
        'centered': 0.2,
    },

    # Residual confidence when the layout could not be recognised
    'structure.fallback': {
        'complex-mixed': 0.4,
        'merged-cells': 0.3,
        'unstructured': 0.1,
    },

    # Header signals (cumulative, header present when total > threshold)
    'header': {
        'underlined': 0.8,
        'capitalized': 0.6,
        'keywords': 0.7,
        'numbered': 0.4,
        'divergent': 0.3,
        'no_phone': 0.2,
    },

    # Structure confidence bonuses from column roles
    'roles': {
        'phone_strong': 0.5,
        'phone_weak': 0.3,
        'id_strong': 0.3,
        'id_weak': 0.2,
        'metadata_non_empty': 0.3,
        'metadata_dominant': 0.7,
    },

    'relationship': {
        'name-split': 0.8,
        'phone-split': 0.9,
        'address-split': 0.7,
    },

    # Phone candidate confidence per extraction method
    'phone': {
        'exact-pattern': 0.9,
        'embedded': 0.7,
        'fuzzy-international': 0.6,
        'fuzzy': 0.5,
        'adjacent-column-combination': 0.6,
    },

    # Metadata matcher confidence per family / variant
    'pattern.companyName': {
        'withLtd': 0.9,
        'standard': 0.8,
        'withNumbers': 0.7,
        'abbreviated': 0.6,
        'allCaps': 0.5,
        'mixed': 0.6,
        'withSymbols': 0.4,
    },
    'pattern.email': {
        'standard': 0.95,
        'embedded': 0.9,
        'withSpaces': 0.7,
        'withText': 0.8,
        'multiple': 0.85,
    },
    'pattern.website': {
        'full': 0.95,
        'withWww': 0.9,
        'domain': 0.8,
        'embedded': 0.85,
        'scanned': 0.8,
        'withText': 0.7,
    },
    'pattern.address': {
        'singapore': 0.9,
        'international': 0.8,
        'simple': 0.7,
        'withPostal': 0.85,
        'block': 0.8,
        'unit': 0.6,
    },
    'pattern.personName': {
        'full': 0.8,
        'withTitle': 0.9,
        'initials': 0.7,
        'asian': 0.75,
    },
    'pattern.jobTitle': {
        'standard': 0.85,
        'withDepartment': 0.8,
    },
    'pattern.department': {
        'common': 0.8,
        'withDept': 0.75,
    },
    'pattern.contact': {
        'fax': 0.8,
        'mobile': 0.8,
        'office': 0.8,
        'extension': 0.7,
    },
    'pattern.business': {
        'registration': 0.9,
        'gst': 0.85,
        'license': 0.8,
    },

    # Metadata pass weights
    'proximity': {
        'adjacent': 0.8,
        'nearby': 0.6,
        'distant': 0.4,
    },
    'pass': {
        'known-column-default': 0.8,
        'positional': 0.7,
        'unclassified': 0.3,
        'pattern-base': 0.5,
    },

    # Quality score weighting (sums to one)
    'quality': {
        'structure': 0.4,
        'extraction': 0.4,
        'metadata': 0.2,
    },
}


def weight(category: str, name: str, default: float = 0.5) -> float:
    """
    Look up a weight from the map

    Args:
        category: Weight category, e.g. 'pattern.email'
        name: Entry name inside the category
        default: Value used when the entry is unknown

    Returns:
        Confidence weight in [0, 1]
    """
    return WEIGHTS.get(category, {}).get(name, default)


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp a score into [low, high]"""
    return max(low, min(high, value))
