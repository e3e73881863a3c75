"""
Bag-of-words naive Bayes classifiers for task priority and category.

Both models are trained once, at import, from the versioned corpus in
training_data.py and are read-only afterwards, so concurrent callers can
share them without locking.
"""
import logging
from typing import Iterable, Optional

from nltk.classify import NaiveBayesClassifier
from nltk.tokenize import wordpunct_tokenize

from training_data import CATEGORY_TRAINING_DATA, CORPUS_VERSION, PRIORITY_TRAINING_DATA

logger = logging.getLogger(__name__)


def bag_of_words(text: str) -> dict[str, bool]:
    """Feature dict marking each lowercase word token present in text."""
    return {
        f"contains({token})": True
        for token in (t.lower() for t in wordpunct_tokenize(text or ""))
        if token.isalnum()
    }


class TextClassifier:
    """Opaque trained model behind classify(text) -> label."""

    def __init__(self, name: str, default_label: str):
        self.name = name
        self.default_label = default_label
        self._model: Optional[NaiveBayesClassifier] = None

    def train(self, labeled_examples: Iterable[tuple[str, str]]) -> None:
        featuresets = [(bag_of_words(text), label) for text, label in labeled_examples]
        if not featuresets:
            raise ValueError(f"{self.name} classifier needs at least one labeled example")
        self._model = NaiveBayesClassifier.train(featuresets)

    @property
    def labels(self) -> list[str]:
        return self._model.labels() if self._model else []

    def classify(self, text: str) -> str:
        return self.classify_with_confidence(text)[0]

    def classify_with_confidence(self, text: str) -> tuple[str, float]:
        """Return (label, posterior probability of that label)."""
        if self._model is None:
            raise RuntimeError(f"{self.name} classifier has not been trained")
        features = bag_of_words(text)
        if not features:
            return self.default_label, 0.0
        dist = self._model.prob_classify(features)
        label = dist.max()
        return label, dist.prob(label)


def build_classifier(name: str, examples, default_label: str) -> TextClassifier:
    classifier = TextClassifier(name, default_label)
    classifier.train(examples)
    logger.debug("Trained %s classifier on %d examples (corpus v%s)", name, len(examples), CORPUS_VERSION)
    return classifier


PRIORITY_CLASSIFIER = build_classifier("priority", PRIORITY_TRAINING_DATA, "medium")
CATEGORY_CLASSIFIER = build_classifier("category", CATEGORY_TRAINING_DATA, "general")
