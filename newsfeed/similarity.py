from newsfeed.models import TokenSet


def jaccard_similarity(a: TokenSet, b: TokenSet) -> float:
    """
    Size of the intersection over size of the union of two token sets.
    Returns 0.0 when both sets are empty.
    """
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)
