"""
Sentiment Combiner - Merge lexicon and model results.

Rules, in order:
1. No model result -> lexicon
2. Model neutral, lexicon non-zero -> lexicon
3. Lexicon zero -> model
4. Same sign -> larger magnitude, signed accordingly
5. Opposite signs -> whichever has the larger magnitude (model on ties)
"""

import math
from typing import Optional

from .models import Sentiment, SentimentScore


def combine_sentiments(
    model_score: Optional[SentimentScore],
    lexicon_score: SentimentScore,
) -> SentimentScore:
    """Combine an optional model score with the lexicon score."""
    if model_score is None:
        return lexicon_score
    if model_score.label == Sentiment.NEUTRAL and lexicon_score.score != 0:
        return lexicon_score
    if lexicon_score.score == 0:
        return model_score

    model_sign = math.copysign(1.0, model_score.score) if model_score.score else 0.0
    lexicon_sign = math.copysign(1.0, lexicon_score.score)

    if model_sign == lexicon_sign:
        magnitude = max(model_score.magnitude, lexicon_score.magnitude)
        return SentimentScore.from_score(lexicon_sign * magnitude)

    if model_score.magnitude >= lexicon_score.magnitude:
        return model_score
    return lexicon_score
