"""
supplement_recommender.reporting - Terminal formatting of results.

This package turns already assembled ``RecommendationResult`` /
``DataCompleteness`` objects into plain text for the Typer CLI.

It does NOT score anything - all inputs come from the recommendation engine.

Modules:
  formatters - ASCII terminal formatters (score labels, explanations,
               ranked table, completeness breakdown).
"""
