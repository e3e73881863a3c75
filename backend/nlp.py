"""
Text intake: turn a free-text task description into a TaskDraft.

The pipeline is deterministic. Each stage contributes a fixed confidence
weight when it finds something:

    deadline found          +0.3
    duration pattern        +0.2
    non-default priority    +0.2
    non-default category    +0.2
    usable title            +0.4  (+0.1 more if it is a real word, not a stop-word)
    recurrence phrase       +0.1

Pattern tables are scanned in order and the first match wins, so more
specific patterns must come before the general ones they overlap with.
"""
import logging
import re
from datetime import datetime
from typing import Callable, NamedTuple, Optional

import parsedatetime
from dateutil.rrule import FR, MO, SA, SU, TH, TU, WE

from classifier import CATEGORY_CLASSIFIER, PRIORITY_CLASSIFIER
from models import (
    DEFAULT_CATEGORY,
    DEFAULT_PRIORITY,
    DEFAULT_TITLE,
    DESCRIPTION_MAX_LENGTH,
    MAX_DURATION_MINUTES,
    MIN_DURATION_MINUTES,
    TITLE_MAX_LENGTH,
    ParseContext,
    TaskDraft,
)
from recurrence import build_rule

logger = logging.getLogger(__name__)

DEADLINE_WEIGHT = 0.3
DURATION_WEIGHT = 0.2
PRIORITY_WEIGHT = 0.2
CATEGORY_WEIGHT = 0.2
TITLE_WEIGHT = 0.4
MEANINGFUL_TITLE_WEIGHT = 0.1
RECURRENCE_WEIGHT = 0.1
FALLBACK_CONFIDENCE = 0.1

MAX_TITLE_WORDS = 6

STOP_WORDS = {
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "from", "up", "about", "into", "through", "during", "before", "after", "above", "below",
    "between", "among", "under", "over", "around", "near", "far", "here", "there", "where",
    "when", "why", "how", "what", "who", "which", "that", "this", "these", "those", "is", "are",
    "was", "were", "be", "been", "being", "have", "has", "had", "do", "does", "did", "will",
    "would", "could", "should", "may", "might", "must", "can", "shall", "tomorrow", "today",
    "tonight", "yesterday", "next", "last", "every", "each", "all", "some", "any", "no", "not",
    "very", "quite", "rather", "too", "so", "such", "more", "most", "less", "least", "much",
    "many", "few", "little", "big", "small", "good", "bad", "new", "old", "first", "previous",
    "other", "another", "same", "different", "important", "urgent", "critical", "high", "low",
    "medium", "please", "remind", "me", "i", "my", "need", "want", "asap",
}

TEMPORAL_INDICATORS = {
    "tomorrow", "today", "tonight", "yesterday", "next", "last", "at", "on", "in", "for",
    "until", "by", "before", "after", "every",
}

_NON_WORD_RE = re.compile(r"[^\w]")
_WHITESPACE_RE = re.compile(r"\s+")


# -- duration --------------------------------------------------------------

class DurationPattern(NamedTuple):
    pattern: re.Pattern
    extract: Callable[[re.Match], float]  # minutes


_HOURS = r"(?:hours?|hrs?|h)"
_MINUTES = r"(?:minutes?|mins?|m)"
# A number not glued to a preceding word, digit or decimal point
_NUM = r"(?<![\w.])(\d+(?:\.\d+)?)"
_INT = r"(?<![\w.])(\d+)"

DURATION_PATTERNS = [
    # "2-4 hours", "1.5 to 2 hrs": mean of the bounds
    DurationPattern(
        re.compile(rf"{_NUM}\s*(?:-|to)\s*(\d+(?:\.\d+)?)\s*{_HOURS}\b", re.I),
        lambda m: (float(m.group(1)) + float(m.group(2))) / 2 * 60,
    ),
    DurationPattern(
        re.compile(rf"{_NUM}\s*(?:-|to)\s*(\d+(?:\.\d+)?)\s*{_MINUTES}\b", re.I),
        lambda m: (float(m.group(1)) + float(m.group(2))) / 2,
    ),
    # "1 hour 30 minutes", "2h 15m"
    DurationPattern(
        re.compile(rf"{_INT}\s*{_HOURS}\s*(?:and\s*)?(\d+)\s*{_MINUTES}\b", re.I),
        lambda m: int(m.group(1)) * 60 + int(m.group(2)),
    ),
    DurationPattern(
        re.compile(rf"{_NUM}\s*{_HOURS}\b", re.I),
        lambda m: float(m.group(1)) * 60,
    ),
    DurationPattern(
        re.compile(rf"{_NUM}\s*{_MINUTES}\b", re.I),
        lambda m: float(m.group(1)),
    ),
    DurationPattern(re.compile(r"\bhalf\s+(?:an\s+)?hour\b", re.I), lambda m: 30),
    DurationPattern(re.compile(r"\bquarter\s+(?:of\s+an\s+)?hour\b", re.I), lambda m: 15),
    DurationPattern(re.compile(r"\b(?:an|one)\s+hour\b", re.I), lambda m: 60),
]


def extract_duration(text: str) -> Optional[int]:
    """Minutes named by the first matching duration pattern, or None."""
    for duration in DURATION_PATTERNS:
        match = duration.pattern.search(text or "")
        if match:
            minutes = int(round(duration.extract(match)))
            return max(MIN_DURATION_MINUTES, min(MAX_DURATION_MINUTES, minutes))
    return None


def duration_spans(text: str) -> list[tuple[int, int]]:
    """[start, end) of every duration phrase any pattern matches."""
    return [
        match.span()
        for duration in DURATION_PATTERNS
        for match in duration.pattern.finditer(text or "")
    ]


# -- recurrence ------------------------------------------------------------

class RecurrencePattern(NamedTuple):
    pattern: re.Pattern
    template: Callable[[re.Match], Optional[dict]]  # rule options, or None to skip


_DAY = r"(?:mon|tues|wednes|thurs|fri|satur|sun)day"
_DAY_RE = re.compile(_DAY, re.I)
_WEEKDAYS = {"mo": MO, "tu": TU, "we": WE, "th": TH, "fr": FR, "sa": SA, "su": SU}
_UNITS = {"day": "DAILY", "week": "WEEKLY", "month": "MONTHLY", "year": "YEARLY"}
_NUMBER_WORDS = {"two": 2, "three": 3, "four": 4, "five": 5, "six": 6, "seven": 7, "ten": 10}
_SET_POSITIONS = {"first": 1, "second": 2, "third": 3, "fourth": 4, "last": -1}


def _weekdays(text: str) -> list:
    seen = []
    for name in _DAY_RE.findall(text):
        day = _WEEKDAYS[name[:2].lower()]
        if day not in seen:
            seen.append(day)
    return seen


def _every_n(match: re.Match) -> Optional[dict]:
    raw = match.group(1).lower()
    interval = _NUMBER_WORDS.get(raw) or int(raw)
    if interval < 1:
        return None
    return {"freq": _UNITS[match.group(2).lower()], "interval": interval}


def _month_day(match: re.Match) -> Optional[dict]:
    day = int(match.group(1))
    if not 1 <= day <= 31:
        return None
    return {"freq": "MONTHLY", "bymonthday": [day]}


RECURRENCE_PATTERNS = [
    RecurrencePattern(
        re.compile(r"\bevery\s+other\s+(day|week|month|year)\b", re.I),
        lambda m: {"freq": _UNITS[m.group(1).lower()], "interval": 2},
    ),
    RecurrencePattern(
        re.compile(r"\bevery\s+(\d+|two|three|four|five|six|seven|ten)\s+(day|week|month|year)s\b", re.I),
        _every_n,
    ),
    # "first Monday of every month", "last Friday of the month"
    RecurrencePattern(
        re.compile(rf"\b(first|second|third|fourth|last)\s+({_DAY})\s+of\s+(?:every|each|the)\s+month\b", re.I),
        lambda m: {
            "freq": "MONTHLY",
            "byweekday": _weekdays(m.group(2)),
            "bysetpos": _SET_POSITIONS[m.group(1).lower()],
        },
    ),
    RecurrencePattern(
        re.compile(r"\blast\s+day\s+of\s+(?:every|each|the)\s+month\b", re.I),
        lambda m: {"freq": "MONTHLY", "bymonthday": [-1]},
    ),
    RecurrencePattern(
        re.compile(r"\b(?:monthly|every\s+month|each\s+month)\s+on\s+the\s+(\d{1,2})(?:st|nd|rd|th)?\b", re.I),
        _month_day,
    ),
    RecurrencePattern(
        re.compile(r"\bon\s+the\s+(\d{1,2})(?:st|nd|rd|th)?\s+of\s+(?:every|each)\s+month\b", re.I),
        _month_day,
    ),
    RecurrencePattern(
        re.compile(r"\b(?:every\s+weekday|on\s+weekdays|weekdays)\b", re.I),
        lambda m: {"freq": "WEEKLY", "byweekday": [MO, TU, WE, TH, FR]},
    ),
    RecurrencePattern(
        re.compile(r"\b(?:every\s+weekend|on\s+weekends|weekends)\b", re.I),
        lambda m: {"freq": "WEEKLY", "byweekday": [SA, SU]},
    ),
    # "every Monday", "every Monday and Thursday", "on Tuesdays"
    RecurrencePattern(
        re.compile(rf"\b(?:every|each)\s+({_DAY}s?(?:\s*(?:,|and|&)\s*(?:and\s+)?{_DAY}s?)*)", re.I),
        lambda m: {"freq": "WEEKLY", "byweekday": _weekdays(m.group(1))},
    ),
    RecurrencePattern(
        re.compile(rf"\bon\s+({_DAY})s\b", re.I),
        lambda m: {"freq": "WEEKLY", "byweekday": _weekdays(m.group(1))},
    ),
    RecurrencePattern(
        re.compile(r"\bevery\s+morning\b", re.I),
        lambda m: {"freq": "DAILY", "byhour": [9]},
    ),
    RecurrencePattern(
        re.compile(r"\bevery\s+(?:evening|night)\b", re.I),
        lambda m: {"freq": "DAILY", "byhour": [19]},
    ),
    RecurrencePattern(
        re.compile(r"\b(?:biweekly|fortnightly)\b", re.I),
        lambda m: {"freq": "WEEKLY", "interval": 2},
    ),
    RecurrencePattern(
        re.compile(r"\b(?:quarterly|every\s+quarter)\b", re.I),
        lambda m: {"freq": "MONTHLY", "interval": 3},
    ),
    RecurrencePattern(
        re.compile(r"\b(?:daily|every\s+day|each\s+day)\b", re.I),
        lambda m: {"freq": "DAILY"},
    ),
    RecurrencePattern(
        re.compile(r"\b(?:weekly|every\s+week|each\s+week)\b", re.I),
        lambda m: {"freq": "WEEKLY"},
    ),
    RecurrencePattern(
        re.compile(r"\b(?:monthly|every\s+month|each\s+month)\b", re.I),
        lambda m: {"freq": "MONTHLY"},
    ),
    RecurrencePattern(
        re.compile(r"\b(?:yearly|annually|every\s+year|each\s+year)\b", re.I),
        lambda m: {"freq": "YEARLY"},
    ),
]


def _match_recurrence(text: str) -> Optional[tuple[str, dict]]:
    for recurrence in RECURRENCE_PATTERNS:
        match = recurrence.pattern.search(text or "")
        if not match:
            continue
        options = recurrence.template(match)
        if options is None:
            continue
        return build_rule(**options), options
    return None


def parse_recurrence(text: str) -> Optional[dict]:
    """
    Detect a recurrence phrase.

    Returns {"rrule": rule string, "frequency": "DAILY"|..., "interval": int}
    or None when the text does not describe a repeating task.
    """
    found = _match_recurrence(text)
    if found is None:
        return None
    rule, options = found
    return {"rrule": rule, "frequency": options["freq"], "interval": options.get("interval", 1)}


# -- dates -----------------------------------------------------------------

_LOCALE_ALIASES = {"en": "en_US"}

# parsedatetime result flags
DATE_ONLY = 1
TIME_ONLY = 2

_JOINERS = {"", "at", "@", "on"}


def recognize_dates(text: str, now: datetime, locale: str = "en_US") -> list[datetime]:
    """Absolute datetimes for each date/time phrase in text, in reading order."""
    locale_id = _LOCALE_ALIASES.get(locale, locale).replace("-", "_")
    calendar = parsedatetime.Calendar(
        parsedatetime.Constants(locale_id, usePyICU=False),
        version=parsedatetime.VERSION_CONTEXT_STYLE,
    )
    found = calendar.nlp(text, sourceTime=now.timetuple()) or ()
    spans = duration_spans(text)
    results = []
    previous = None  # (flags, end) of the last kept phrase
    for value, flags, start, end, phrase in sorted(found, key=lambda item: item[2]):
        if not flags:
            continue
        start += len(phrase) - len(phrase.lstrip())
        end -= len(phrase) - len(phrase.rstrip())
        # A number inside a length of time ("1.5 hrs", "for 30 minutes") is not a date,
        # unless it is an offset from now ("in 2 hours")
        preceding = text[:start].lower().split()
        if preceding[-1:] != ["in"] and any(s <= start and end <= e for s, e in spans):
            continue
        # "tomorrow at 2pm" can come back as a date phrase and a time phrase
        if previous is not None and {previous[0], flags} == {DATE_ONLY, TIME_ONLY}:
            if text[previous[1]:start].strip().lower() in _JOINERS:
                day, clock = (results[-1], value) if previous[0] == DATE_ONLY else (value, results[-1])
                results[-1] = datetime.combine(day.date(), clock.time())
                previous = (DATE_ONLY | TIME_ONLY, end)
                continue
        results.append(value)
        previous = (flags, end)
    return results


# -- title / description ---------------------------------------------------

def _clean(word: str) -> str:
    return _NON_WORD_RE.sub("", word.lower())


def split_title(text: str) -> tuple[str, str]:
    """
    Split text into (title, description).

    The title starts at the first word that is not a stop-word and runs for at
    most MAX_TITLE_WORDS words, ending early at a temporal word ("tomorrow",
    "at", ...) or, once it has two words, at a stop-word. Everything after the
    title is the description; an empty description falls back to the text.
    """
    words = text.split()
    title_words: list[str] = []
    description_words: list[str] = []

    for i, word in enumerate(words):
        if _clean(word) in STOP_WORDS:
            continue
        title_words.append(word)
        for next_word in words[i + 1:]:
            cleaned = _clean(next_word)
            if cleaned in TEMPORAL_INDICATORS:
                break
            if len(title_words) >= 2 and cleaned in STOP_WORDS:
                break
            title_words.append(next_word)
            if len(title_words) >= MAX_TITLE_WORDS:
                break
        description_words = words[i + len(title_words):]
        break

    if not title_words:
        title_words = words[:4]
        description_words = words[4:]

    title = _WHITESPACE_RE.sub(" ", " ".join(title_words)).strip().rstrip(",.;:!")
    description = _WHITESPACE_RE.sub(" ", " ".join(description_words)).strip()
    if not description:
        description = text.strip()
    return title, description


# -- classification --------------------------------------------------------

def categorize(text: str) -> dict:
    category, confidence = CATEGORY_CLASSIFIER.classify_with_confidence(text)
    return {"category": category, "confidence": confidence}


# -- pipeline --------------------------------------------------------------

def _clip(value: str, limit: int) -> str:
    return value if len(value) <= limit else value[:limit].rstrip()


def minimal_draft(text: str, default_duration_minutes: Optional[int] = None) -> TaskDraft:
    return TaskDraft(
        title=DEFAULT_TITLE,
        description=_clip(text, DESCRIPTION_MAX_LENGTH),
        duration_minutes=default_duration_minutes,
        confidence=FALLBACK_CONFIDENCE,
        source_text=text,
    )


def parse(text: str, context: Optional[ParseContext] = None) -> TaskDraft:
    """
    Parse free text into a TaskDraft. Never raises for the text itself: if any
    stage fails the result is a minimal draft with confidence 0.1.
    """
    context = context or ParseContext()
    source = text if isinstance(text, str) else ""
    try:
        return _parse(source, context)
    except Exception:
        logger.exception("Text intake failed for %r; returning a minimal draft", source[:80])
        return minimal_draft(source, context.default_duration_minutes)


def _parse(text: str, context: ParseContext) -> TaskDraft:
    confidence = 0.0

    deadline = None
    dates = recognize_dates(text, context.local_now(), context.locale) if text.strip() else []
    if dates:
        deadline = dates[0]
        confidence += DEADLINE_WEIGHT

    duration = extract_duration(text)
    if duration is not None:
        confidence += DURATION_WEIGHT
    else:
        duration = context.default_duration_minutes

    priority = DEFAULT_PRIORITY
    label = PRIORITY_CLASSIFIER.classify(text)
    if label != DEFAULT_PRIORITY:
        priority = label
        confidence += PRIORITY_WEIGHT

    category = DEFAULT_CATEGORY
    label = CATEGORY_CLASSIFIER.classify(text)
    if label != DEFAULT_CATEGORY:
        category = label
        confidence += CATEGORY_WEIGHT

    title, description = split_title(text)
    if title and len(title) < TITLE_MAX_LENGTH:
        confidence += TITLE_WEIGHT
    if len(title) > 3 and title.lower() not in STOP_WORDS:
        confidence += MEANINGFUL_TITLE_WEIGHT

    recurrence_rule = None
    found = _match_recurrence(text)
    if found is not None:
        recurrence_rule = found[0]
        confidence += RECURRENCE_WEIGHT

    return TaskDraft(
        title=_clip(title, TITLE_MAX_LENGTH) or DEFAULT_TITLE,
        description=_clip(description, DESCRIPTION_MAX_LENGTH),
        deadline=deadline,
        duration_minutes=duration,
        priority=priority,
        category=category,
        recurrence_rule=recurrence_rule,
        confidence=round(min(max(confidence, 0.0), 1.0), 4),
        source_text=text,
    )
