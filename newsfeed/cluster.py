import logging
from typing import List, Iterable
from newsfeed.models import RawArticle, ArticleCluster
from newsfeed.similarity import jaccard_similarity
from newsfeed.text import tokenize, DEFAULT_MIN_TOKEN_LENGTH

logger = logging.getLogger(__name__)

DEFAULT_SIMILARITY_THRESHOLD = 0.5


class ArticleClusterer:
    def __init__(self, threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
                 min_token_length: int = DEFAULT_MIN_TOKEN_LENGTH):
        """
        Greedy single-pass clustering of articles by title overlap.

        Args:
            threshold: Minimum Jaccard similarity between an article's title tokens
                       and a cluster's accumulated tokens for the article to join it
            min_token_length: Title words must be longer than this to count as tokens
        """
        self.threshold = threshold
        self.min_token_length = min_token_length

    def cluster(self, articles: Iterable[RawArticle]) -> List[ArticleCluster]:
        """
        Assigns each article, in input order, to the first existing cluster it is
        similar enough to, or starts a new cluster with it.

        The matched cluster absorbs the article's tokens, so a cluster can drift
        as a story evolves. Results depend on input order.
        """
        clusters: List[ArticleCluster] = []
        count = 0

        for article in articles:
            count += 1
            tokens = tokenize(article.title, self.min_token_length)

            for cluster in clusters:
                if jaccard_similarity(tokens, cluster.title_tokens) >= self.threshold:
                    cluster.add(article, tokens)
                    break
            else:
                clusters.append(ArticleCluster(articles=[article], title_tokens=set(tokens)))

        logger.debug(f"Clustered {count} articles into {len(clusters)} clusters "
                     f"(threshold={self.threshold})")
        return clusters


def cluster_articles(articles: Iterable[RawArticle],
                     threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
                     min_token_length: int = DEFAULT_MIN_TOKEN_LENGTH) -> List[ArticleCluster]:
    return ArticleClusterer(threshold, min_token_length).cluster(articles)
