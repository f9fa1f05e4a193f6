"""Judge evaluation models and their statistical aggregation.

Use explicit imports:
    from visibility.judging.models import JudgeEvaluation, AggregatedVisibilityResult
    from visibility.judging.aggregation import aggregate_judge_results, wilson_interval
"""
