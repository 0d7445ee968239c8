"""Access/registration type inference.

Uses the same TF-IDF machinery as the topic categories, with two changes
that matter for access wording:

* Only sentences containing a trigger word are scored. Topic text ("deep
  learning architectures...") would otherwise dilute the few words that say
  who may attend.
* Tokens include bigrams and trigrams (``register_your_place``,
  ``members_only``) so a phrase counts as one signal instead of several
  common words. Stop words are kept for the same reason.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import List, Optional

from eventfeed.classification.tfidf import TfidfModel

PUBLIC = "Public"
REGISTRATION_REQUIRED = "Registration Required"
RSVP_REQUIRED = "RSVP Required"
MEMBERS_ONLY = "Members Only"
INVITE_ONLY = "Invite Only"
STUDENTS_ONLY = "Students Only"
UNIVERSITY_ONLY = "University Only"
INDUSTRY_PARTNERS = "Industry Partners"

ACCESS_TAXONOMY = {
    PUBLIC: "open to all open to the public everyone welcome all welcome public event no registration required free to attend",
    REGISTRATION_REQUIRED: (
        "register your place book your place book your spot sign up now get tickets buy tickets "
        "secure your place reserve your spot tickets required booking essential booking required "
        "register via booking via book now register now"
    ),
    RSVP_REQUIRED: "rsvp required please rsvp confirm your attendance confirm your place please reply rsvp to confirm",
    MEMBERS_ONLY: "members only for members member exclusive member event",
    INVITE_ONLY: "invitation only by invitation invite only invited guests only",
    STUDENTS_ONLY: "students only for students open to students student only event",
    UNIVERSITY_ONLY: "university staff and students college members only faculty only academic staff only members of the university",
    INDUSTRY_PARTNERS: "park tenants only industry partners only network members only partner event only",
}

ACCESS_MIN_SIMILARITY = 0.15

TRIGGER_WORDS = re.compile(
    r"\b(open|regist|book|free|member|student|invit|rsvp|ticket|sign.up|admiss|attend|place"
    r"|faculty|staff|exclusiv|welcom|guest|tenant|partner)",
    re.IGNORECASE,
)

# Trigger words used in a non-access sense ("team members" are people).
FALSE_TRIGGERS = (
    re.compile(r"\bopen\s+source\b", re.IGNORECASE),
    re.compile(r"\b(?:team|board|panel|committee|staff)\s+members?\b", re.IGNORECASE),
)
EXPLICIT_ACCESS = (
    re.compile(r"\bopen\s+to\b", re.IGNORECASE),
    re.compile(r"\bmembers?\s+only\b", re.IGNORECASE),
)

# Scores ambiguously between Public and University Only, so it is decided here.
UNIVERSITY_MEMBERS = re.compile(
    r"open\s+to\s+all\s+members?\s+of\s+(?:the\s+)?(?:university|college)",
    re.IGNORECASE,
)

_SENTENCE_BREAK = re.compile(r"[.\n]|<br\s*/?>", re.IGNORECASE)
_NON_WORD = re.compile(r"[^a-z0-9\s-]")


def tokenize_ngrams(text: str) -> List[str]:
    words = [w for w in _NON_WORD.sub(" ", text.lower()).split() if len(w) > 1]
    tokens = list(words)
    tokens.extend(f"{a}_{b}" for a, b in zip(words, words[1:]))
    tokens.extend(f"{a}_{b}_{c}" for a, b, c in zip(words, words[1:], words[2:]))
    return tokens


@lru_cache(maxsize=None)
def access_model() -> TfidfModel:
    return TfidfModel.build(ACCESS_TAXONOMY, tokenize_ngrams)


def _is_access_sentence(sentence: str) -> bool:
    if not TRIGGER_WORDS.search(sentence):
        return False
    if any(p.search(sentence) for p in FALSE_TRIGGERS):
        return any(p.search(sentence) for p in EXPLICIT_ACCESS)
    return True


def extract_access_context(text: str) -> str:
    """Join the sentences of ``text`` that talk about who may attend."""
    sentences = (s.strip() for s in _SENTENCE_BREAK.split(text))
    return " ".join(s for s in sentences if s and _is_access_sentence(s))


def infer_access(text: Optional[str]) -> Optional[str]:
    """Best access label for free-form event text, or None without a clear signal."""
    if not text:
        return None

    if UNIVERSITY_MEMBERS.search(text):
        return UNIVERSITY_ONLY

    context = extract_access_context(text)
    if not context:
        return None

    best_label: Optional[str] = None
    best_score = 0.0
    for label, score in access_model().score(context):
        if score > best_score:
            best_label, best_score = label, score

    return best_label if best_score >= ACCESS_MIN_SIMILARITY else None
