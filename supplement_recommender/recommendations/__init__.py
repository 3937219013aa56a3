"""
Recommendation engine: scores a supplement catalog against one aggregated
user snapshot and produces ranked, explainable recommendations.

Modules
-------
conditions   : ConditionEvaluation dataclass + evaluate_condition() - resolves
               one declarative condition against the snapshot.
scorer       : score_candidate() + compute_match_score() +
               determine_confidence() + find_contraindications() - pure
               per-candidate scoring, no I/O.
completeness : analyze_completeness() - weighted data-completeness grade.
ranker       : assemble_result() + result query helpers - inclusion rules,
               sorting, truncation, warnings and suggestions.
fingerprint  : compute_snapshot_fingerprint() - cache-invalidation key.
reporter     : write_result_json() - file output.
"""
