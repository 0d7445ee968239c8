from eventfeed.classification.access import access_model, infer_access
from eventfeed.classification.categories import category_model, classify
from eventfeed.classification.cost import extract_cost


def init_classifiers() -> None:
    """Build the seed vectors and IDF tables once, before any scoring."""
    category_model()
    access_model()


__all__ = [
    "classify",
    "extract_cost",
    "infer_access",
    "init_classifiers",
]
