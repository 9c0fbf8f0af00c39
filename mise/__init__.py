"""
Mise: ingredient and timeline extraction from recipe markdown documents and
assembly of multi-recipe meal snapshots.

The main entry points are:

* :py:func:`mise.formats.detect_recipe_format`
* :py:func:`mise.ingredients.extract_ingredients`
* :py:func:`mise.timeline.extract_timeline`
* :py:func:`mise.markdown.render_markdown`
* :py:func:`mise.snapshot.generate_meal_snapshot`
"""
