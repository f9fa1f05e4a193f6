"""Scan-level rollup: brand mention counts, share of voice and visibility score.

Use explicit imports:
    from visibility.rollup.models import PromptOutcome, AggregatedEvidence, SingleRunEvidence
    from visibility.rollup.share_of_voice import compute_share_of_voice
    from visibility.rollup.score import compute_visibility_score
"""
