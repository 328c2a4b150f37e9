"""Daily reputation scores — per-user sentiment rollups recomputed after each run."""

import logging
from collections import Counter
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy.orm import Session

from brand_monitor.analysis.sentiment import MIXED, NEGATIVE, NEUTRAL, POSITIVE
from brand_monitor.models import Mention, ReputationScore

logger = logging.getLogger("brand_monitor.analysis.reputation")

BASELINE_SCORE = 50


def compute_overall_score(positive: int, negative: int, total: int) -> int:
    """Map the positive/negative balance onto 0-100, 50 when there is nothing to judge."""
    if total <= 0:
        return BASELINE_SCORE
    return round(BASELINE_SCORE + BASELINE_SCORE * (positive - negative) / total)


def update_daily_reputation_score(db: Session, user_id: int, day: date) -> ReputationScore:
    """Recompute and upsert the user's ReputationScore for one UTC date."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    end = start + timedelta(days=1)

    sentiments = [
        row.sentiment
        for row in db.query(Mention.sentiment).filter(
            Mention.user_id == user_id,
            Mention.mentioned_at >= start,
            Mention.mentioned_at < end,
        ).all()
    ]
    counts = Counter(sentiments)
    total = len(sentiments)

    score = (
        db.query(ReputationScore)
        .filter(ReputationScore.user_id == user_id, ReputationScore.score_date == day)
        .first()
    )
    if score is None:
        score = ReputationScore(user_id=user_id, score_date=day)
        db.add(score)

    score.positive_mentions = counts[POSITIVE]
    score.negative_mentions = counts[NEGATIVE]
    score.neutral_mentions = counts[NEUTRAL]
    score.mixed_mentions = counts[MIXED]
    score.total_mentions = total
    score.overall_score = compute_overall_score(counts[POSITIVE], counts[NEGATIVE], total)
    db.commit()
    return score


def update_daily_reputation_scores(db: Session, user_ids, day: date) -> int:
    """Refresh today's score for each user. Failures are logged per user and skipped."""
    updated = 0
    for user_id in sorted(set(user_ids)):
        try:
            update_daily_reputation_score(db, user_id, day)
            updated += 1
        except Exception as e:
            db.rollback()
            logger.error("[user:%d] Reputation score update failed: %s", user_id, e, exc_info=True)
    logger.info("Updated reputation scores for %d user(s)", updated)
    return updated
