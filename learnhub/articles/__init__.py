from learnhub.articles.publisher import (
    ArticleStatus,
    PublishBatchTooLarge,
    PublishOutcome,
    ScheduledPublisher,
)

__all__ = ["ArticleStatus", "PublishBatchTooLarge", "PublishOutcome", "ScheduledPublisher"]
