"""
Transformer Sentiment Ensemble - Optional ML scorer.

Two model tracks share one interface:
- FINANCE: finance-tuned English classifier (FinBERT family)
- MULTILINGUAL: XLM-R style classifier, used when the text contains Hangul

Each track is a capability provider with an explicit lifecycle
(UNCONFIGURED -> LOADING -> READY | FAILED). Loading walks the ordered
candidate list once; a FAILED track is never retried for the lifetime of the
ensemble. Loading and inference run in a worker thread so the event loop only
suspends at the await.

Failures never escape: score() returns None and the caller falls back to the
lexicon result.

COMPATIBILITY RISK: labels that carry no pos/neg/neu text are mapped by index
(LABEL_0 -> negative, LABEL_1 -> neutral, LABEL_2 -> positive). A model with a
different label order would silently invert sentiment.
"""

import asyncio
import logging
import re
from typing import Any, Callable, Iterable, Optional, Sequence

from core.config import SignalConfig, SignalTunables
from core.exceptions import InferenceError, ModelLoadError

from .models import BackendState, ModelTrack, Sentiment, SentimentScore


logger = logging.getLogger(__name__)


Classifier = Callable[..., Any]
ClassifierLoader = Callable[[str], Classifier]

TOP_K = 3

_HANGUL = re.compile("[\u1100-\u11FF\u3130-\u318F\uAC00-\uD7A3]")

_INDEX_LABELS: dict[str, Sentiment] = {
    "label_0": Sentiment.NEGATIVE,
    "label_1": Sentiment.NEUTRAL,
    "label_2": Sentiment.POSITIVE,
}


def has_hangul(text: str) -> bool:
    return bool(_HANGUL.search(text))


def default_loader(model_id: str) -> Classifier:
    """Build a Hugging Face text-classification pipeline for model_id."""
    from transformers import pipeline

    return pipeline("text-classification", model=model_id, truncation=True)


def map_model_label(label: str) -> Sentiment:
    """Map a model's label text to the three-way sentiment."""
    lowered = label.lower()
    if "pos" in lowered:
        return Sentiment.POSITIVE
    if "neg" in lowered:
        return Sentiment.NEGATIVE
    if "neu" in lowered:
        return Sentiment.NEUTRAL
    return _INDEX_LABELS.get(lowered, Sentiment.NEUTRAL)


def interpret_outputs(
    outputs: Iterable[dict[str, Any]],
    tunables: Optional[SignalTunables] = None,
) -> Optional[SentimentScore]:
    """
    Reduce ranked (label, probability) pairs to a SentimentScore.

    Per-class max probability; weak or ambiguous predictions are neutral,
    otherwise magnitude = max(floor, scale * |pos - neg|).
    """
    t = tunables or SignalTunables()
    probs = {sentiment: 0.0 for sentiment in Sentiment}
    seen = False

    for entry in outputs:
        seen = True
        mapped = map_model_label(str(entry.get("label", "")))
        value = entry.get("score")
        value = float(value) if isinstance(value, (int, float)) else 0.0
        probs[mapped] = max(probs[mapped], value)

    if not seen:
        return None

    diff = probs[Sentiment.POSITIVE] - probs[Sentiment.NEGATIVE]
    strongest = max(probs.values())
    if strongest < t.model_min_confidence or abs(diff) < t.model_min_margin:
        return SentimentScore.neutral()

    magnitude = max(t.model_magnitude_floor, abs(diff) * t.model_magnitude_scale)
    return SentimentScore.from_score(magnitude if diff > 0 else -magnitude)


def _flatten(outputs: Any) -> list[dict[str, Any]]:
    # Pipelines return [{...}] or [[{...}]] depending on version and input shape.
    if isinstance(outputs, dict):
        return [outputs]
    if not outputs:
        return []
    if isinstance(outputs[0], list):
        return list(outputs[0])
    return list(outputs)


# ============================================================
# PER-TRACK BACKEND
# ============================================================

class ModelBackend:
    """Lazily loaded classifier for one track."""

    def __init__(
        self,
        track: ModelTrack,
        candidates: Sequence[str],
        loader: ClassifierLoader,
    ) -> None:
        self.track = track
        self.candidates = tuple(c for c in candidates if c)
        self._loader = loader
        self._state = BackendState.UNCONFIGURED
        self._classifier: Optional[Classifier] = None
        self._model_id: Optional[str] = None
        self._loading: Optional[asyncio.Future] = None
        self._last_error: Optional[str] = None
        self._inference_warned = False

    @property
    def state(self) -> BackendState:
        return self._state

    @property
    def model_id(self) -> Optional[str]:
        return self._model_id

    async def get_classifier(self) -> Optional[Classifier]:
        """Return the ready classifier, loading it on first use."""
        if self._state == BackendState.READY:
            return self._classifier
        if self._state == BackendState.FAILED:
            return None
        if self._state == BackendState.LOADING and self._loading is not None:
            return await asyncio.shield(self._loading)

        self._state = BackendState.LOADING
        self._loading = asyncio.get_running_loop().create_future()
        try:
            self._classifier = await self._load()
            self._state = BackendState.READY
        except ModelLoadError as e:
            self._state = BackendState.FAILED
            self._last_error = e.message
            logger.warning(
                f"[{self.track.value}] transformer unavailable, falling back to lexicon: "
                f"{e.message}"
            )
        finally:
            loading = self._loading
            if self._state == BackendState.LOADING:
                # Interrupted (e.g. cancelled); the next call loads again
                self._state = BackendState.UNCONFIGURED
                self._loading = None
            if not loading.done():
                loading.set_result(self._classifier)
        return self._classifier

    async def _load(self) -> Classifier:
        if not self.candidates:
            raise ModelLoadError("no model candidates configured", track=self.track.value)

        last_error: Optional[BaseException] = None
        for model_id in self.candidates:
            try:
                classifier = await asyncio.to_thread(self._loader, model_id)
            except ImportError as e:
                raise ModelLoadError(
                    "transformers backend not installed",
                    track=self.track.value,
                    recoverable=False,
                    cause=e,
                )
            except Exception as e:
                last_error = e
                logger.info(f"[{self.track.value}] pipeline init failed ({model_id}): {e}")
                continue
            self._model_id = model_id
            logger.info(f"[{self.track.value}] loaded transformer model {model_id}")
            return classifier

        raise ModelLoadError(
            f"all {len(self.candidates)} candidates failed",
            track=self.track.value,
            cause=last_error,
        )

    async def classify(self, text: str) -> Optional[list[dict[str, Any]]]:
        """Run top-k classification; None when unavailable or failing."""
        classifier = await self.get_classifier()
        if classifier is None:
            return None
        try:
            outputs = await asyncio.to_thread(classifier, text, top_k=TOP_K)
        except Exception as e:
            error = InferenceError(str(e), track=self.track.value, cause=e)
            if not self._inference_warned:
                self._inference_warned = True
                logger.warning(f"[{self.track.value}] transformer inference failed: {error.message}")
            else:
                logger.debug(f"[{self.track.value}] transformer inference failed: {error.message}")
            return None
        return _flatten(outputs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "track": self.track.value,
            "state": self._state.value,
            "model_id": self._model_id,
            "candidates": list(self.candidates),
            "last_error": self._last_error,
        }


# ============================================================
# ENSEMBLE
# ============================================================

class TransformerEnsemble:
    """
    Language-routed transformer scorer.

    Usage:
        ensemble = TransformerEnsemble.from_config(config)
        score = await ensemble.score("Bitcoin ETF approved")
    """

    def __init__(
        self,
        finance_candidates: Sequence[str],
        multilingual_candidates: Sequence[str],
        loader: Optional[ClassifierLoader] = None,
        tunables: Optional[SignalTunables] = None,
    ) -> None:
        loader = loader or default_loader
        self.tunables = tunables or SignalTunables()
        self._backends = {
            ModelTrack.FINANCE: ModelBackend(ModelTrack.FINANCE, finance_candidates, loader),
            ModelTrack.MULTILINGUAL: ModelBackend(
                ModelTrack.MULTILINGUAL, multilingual_candidates, loader
            ),
        }

    @classmethod
    def from_config(
        cls,
        config: SignalConfig,
        loader: Optional[ClassifierLoader] = None,
    ) -> "TransformerEnsemble":
        return cls(
            finance_candidates=config.finbert_model_candidates,
            multilingual_candidates=config.xlmr_model_candidates,
            loader=loader,
            tunables=config.tunables,
        )

    @staticmethod
    def track_for(text: str) -> ModelTrack:
        return ModelTrack.MULTILINGUAL if has_hangul(text) else ModelTrack.FINANCE

    def backend(self, track: ModelTrack) -> ModelBackend:
        return self._backends[track]

    def state(self, track: ModelTrack) -> BackendState:
        return self._backends[track].state

    async def score(self, text: str) -> Optional[SentimentScore]:
        """Score text with the routed track; None if the track is unusable."""
        backend = self._backends[self.track_for(text)]
        outputs = await backend.classify(text)
        if not outputs:
            return None
        return interpret_outputs(outputs, self.tunables)

    def get_status(self) -> dict[str, Any]:
        return {track.value: b.to_dict() for track, b in self._backends.items()}
