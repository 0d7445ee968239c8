"""Topic categories for events.

Sources tag events inconsistently (Eventbrite has tags, Meetup has topics,
most venue sites have nothing), so categories are inferred from the event's
own title and description instead of mapping each source's vocabulary.

Each entry in ``TAXONOMY`` is a bag of seed terms. An event is scored against
every seed with TF-IDF cosine similarity; labels scoring at least
``MIN_SIMILARITY`` are candidates and the best ``MAX_CATEGORIES`` are kept.
Adding a category only requires a new ``TAXONOMY`` entry: pick 10-15 terms
distinctive to it and avoid generic words shared with other categories.

The title is repeated in the scored text so it counts double.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import List

from eventfeed.classification.tfidf import TfidfModel

TAXONOMY = {
    "AI & Data": "artificial intelligence machine learning deep learning neural network llm data science nlp computer vision algorithm ai model training dataset",
    "Biotech & Health": "biotech life sciences healthcare biomedical pharmaceutical genomics cancer research clinical therapeutics medicine drug biology",
    "Startups & Founders": "startup founder entrepreneurship accelerator incubator pitch venture seed stage scale-up launch company building",
    "Investment & Finance": "investment venture capital funding fintech angel fundraising vc series private equity valuation deal",
    "Networking": "networking meetup coffee morning drinks social connect community mixer reception gathering informal",
    "Workshops & Training": "workshop training bootcamp masterclass hands-on practical skills tutorial course session learn",
    "Talks & Lectures": "lecture talk seminar keynote panel discussion speaker presentation colloquium fireside chat series",
    "Science & Research": "research science physics chemistry mathematics academic university laboratory discovery paper journal",
    "Sustainability": "sustainability climate green energy environment clean tech net zero carbon renewable circular economy",
    "Technology": "software hardware programming developer cyber cloud iot quantum computing digital platform web app",
    "Policy & Society": "policy government regulation ethics diversity inclusion social impact public engagement equality",
    "Innovation & Strategy": "innovation strategy growth transformation partnerships ecosystem collaboration enterprise roadmap",
    "Female Founders": "female women woman gender ladies leadership women-in-tech empowerment girls womenled",
    "Product Management": "product manager management roadmap user story backlog sprint agile scrum prioritization stakeholder discovery ux requirements features",
}

STOP_WORDS = frozenset(
    """
    the a an and or but in on at to for of with by from is are was were be been
    being have has had do does did will would could should may might shall can
    this that these those it its not no nor so if as we our you your they their
    he she his her all each every both more most other some such than too very
    just about above after again also am any because before between come get
    here how into like make many me much my new now only out over own same then
    there through under up us what when where which while who whom why down
    during further
    """.split()
)

MIN_SIMILARITY = 0.1
MAX_CATEGORIES = 2

_NON_WORD = re.compile(r"[^a-z0-9\s-]")


def tokenize(text: str) -> List[str]:
    cleaned = _NON_WORD.sub(" ", text.lower())
    return [w for w in cleaned.split() if len(w) > 1 and w not in STOP_WORDS]


@lru_cache(maxsize=None)
def category_model() -> TfidfModel:
    return TfidfModel.build(TAXONOMY, tokenize)


def classify(title: str, description: str = "") -> List[str]:
    """Return 0-2 taxonomy labels for an event, best match first."""
    text = f"{title or ''} {title or ''} {description or ''}"
    scores = [(label, score) for label, score in category_model().score(text) if score >= MIN_SIMILARITY]
    scores.sort(key=lambda item: item[1], reverse=True)
    return [label for label, _ in scores[:MAX_CATEGORIES]]
