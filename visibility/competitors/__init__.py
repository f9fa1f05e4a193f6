"""Lexical detection of named competitors in AI answers.

Use explicit imports:
    from visibility.competitors.detection import detect_competitor_mentions
"""
