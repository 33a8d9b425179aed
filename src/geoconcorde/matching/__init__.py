"""Module de matching et de désambiguïsation."""

from geoconcorde.matching.disambiguation import (
    TopMatchDisambiguatingMatchFinder,
    common_matches,
    filter_matches,
    invert,
)
from geoconcorde.matching.finders import AttributeMatchFinder, MatchFinder, blank_target_to_matches_map
from geoconcorde.matching.schema import MatchEntry, Matches

__all__ = [
    "AttributeMatchFinder",
    "MatchEntry",
    "MatchFinder",
    "Matches",
    "TopMatchDisambiguatingMatchFinder",
    "blank_target_to_matches_map",
    "common_matches",
    "filter_matches",
    "invert",
]
