"""
Extraction of a recipe's method organised along a preparation timeline.

A recipe's method is extracted into a :py:data:`~mise.recipe.TimelineMap`:
steps grouped first by *canonical timeline marker* (when, relative to
service, they must happen) and then by component. For example::

    {
        "T-24h": {"Miso Cure": ["Make the cure", "Coat the cod"]},
        "T-1h": {"Main": ["Preheat the oven"]},
        "Service": {"Assembly": ["Spoon the broth around the fish"]},
    }

The package is split into three parts:

* :py:mod:`mise.timeline.markers` normalises free-text markers and sorts
  canonical markers chronologically.
* :py:mod:`mise.timeline.steps` parses the steps within a single timeline
  block.
* :py:mod:`mise.timeline.extract` locates timeline blocks using a cascade of
  strategies.

.. autofunction:: extract_timeline

.. autofunction:: extract_timeline_with_strategy
"""

from mise.timeline.markers import (
    DAY_OF,
    SERVICE,
    is_recognized_timeline_marker,
    looks_like_timeline_marker,
    marker_minutes,
    normalize_timeline_marker,
    sort_timeline_markers,
)
from mise.timeline.extract import (
    DEFAULT_MARKER,
    TimelineExtraction,
    extract_timeline,
    extract_timeline_with_strategy,
)
