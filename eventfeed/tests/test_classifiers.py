"""Category, access and cost classifier tests"""

import pytest

from eventfeed.classification import classify, extract_cost, infer_access
from eventfeed.classification.access import (
    MEMBERS_ONLY,
    REGISTRATION_REQUIRED,
    UNIVERSITY_ONLY,
    extract_access_context,
    tokenize_ngrams,
)
from eventfeed.classification.categories import MAX_CATEGORIES, TAXONOMY, tokenize
from eventfeed.classification.tfidf import TfidfModel, cosine_similarity


class TestTfidf:
    """Shared TF-IDF machinery"""

    def test_cosine_of_identical_vectors(self):
        vec = {"a": 1.0, "b": 2.0}
        assert cosine_similarity(vec, vec) == pytest.approx(1.0)

    def test_cosine_of_disjoint_vectors(self):
        assert cosine_similarity({"a": 1.0}, {"b": 1.0}) == 0.0
        assert cosine_similarity({}, {"a": 1.0}) == 0.0

    def test_smoothed_idf(self):
        model = TfidfModel.build({"x": "alpha beta", "y": "alpha gamma", "z": "delta"}, str.split)
        # idf(t) = ln(K / (1 + df)) + 1
        assert model.idf["alpha"] == pytest.approx(1.0)
        assert model.idf["beta"] > model.idf["alpha"]

    def test_model_is_read_only(self):
        model = TfidfModel.build({"x": "alpha"}, str.split)
        with pytest.raises(TypeError):
            model.idf["alpha"] = 2.0


class TestCategories:
    """Topic classification"""

    def test_tokenize_drops_stop_words_and_single_chars(self):
        assert tokenize("The AI of a Start-up!") == ["ai", "start-up"]

    def test_clear_topic(self):
        labels = classify("Machine Learning Workshop", "Hands-on deep learning and neural network training")
        assert labels[0] in {"AI & Data", "Workshops & Training"}
        assert "AI & Data" in labels

    def test_sustainability(self):
        assert "Sustainability" in classify("Net zero and the circular economy", "Climate and renewable energy startups")

    @pytest.mark.parametrize(
        "title, description",
        [
            ("Machine Learning Workshop", "Hands-on deep learning, data science, startup pitch, venture funding"),
            ("Networking drinks for founders and investors", "Climate, biotech, AI, quantum and policy"),
            ("x", ""),
        ],
    )
    def test_bounded_to_taxonomy(self, title, description):
        labels = classify(title, description)
        assert len(labels) <= MAX_CATEGORIES
        assert all(label in TAXONOMY for label in labels)

    def test_empty_input(self):
        assert classify("", "") == []
        assert classify("the and of", "") == []


class TestAccess:
    """Access/registration classification"""

    def test_register_your_place(self):
        assert infer_access("Register your place via Eventbrite") == REGISTRATION_REQUIRED

    def test_members_only(self):
        assert infer_access("This event is for members only") == MEMBERS_ONLY

    def test_open_source_suppressed(self):
        assert infer_access("Open source software workshop") is None

    def test_university_override(self):
        assert infer_access("This talk is open to all members of the University.") == UNIVERSITY_ONLY

    @pytest.mark.parametrize("text", [None, "", "A talk about protein folding"])
    def test_no_signal(self, text):
        assert infer_access(text) is None

    def test_context_keeps_trigger_sentences_only(self):
        text = "Deep learning architectures for vision. Please book your place early.\nLunch provided"
        assert extract_access_context(text) == "Please book your place early"

    def test_team_members_not_a_trigger(self):
        assert extract_access_context("Meet our team members. Members only.") == "Members only"

    def test_explicit_phrase_overrides_false_trigger(self):
        text = "Open to board members and guests"
        assert extract_access_context(text) == text

    def test_ngrams(self):
        assert tokenize_ngrams("Members only event") == [
            "members",
            "only",
            "event",
            "members_only",
            "only_event",
            "members_only_event",
        ]


class TestCost:
    """Ticket price extraction"""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Tickets: £25 per person", "£25"),
            ("win prizes over £10,000", None),
            ("This event is free to attend", "Free"),
            ("Freestyle swimming competition", None),
            ("Entry $12.50 on the door", "$12.50"),
            ("Complimentary drinks", "Free"),
            ("There is no charge for this event", "Free"),
            ("£1,200 prize fund for the winner", None),
            ("", None),
            (None, None),
        ],
    )
    def test_extract_cost(self, text, expected):
        assert extract_cost(text) == expected
