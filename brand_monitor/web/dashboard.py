"""Dashboard routes — reputation score, sentiment breakdown and recent mentions."""

from datetime import timedelta

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from brand_monitor.analysis.reputation import BASELINE_SCORE
from brand_monitor.analysis.sentiment import MIXED, NEGATIVE, NEUTRAL, POSITIVE
from brand_monitor.models import Mention, ReputationScore
from brand_monitor.utils.timeutils import ensure_utc, utcnow

from .dependencies import get_db, require_trigger_token

router = APIRouter(prefix="/dashboard", dependencies=[Depends(require_trigger_token)])

RECENT_LIMIT = 10
TREND_DAYS = 7


@router.get("/{user_id}")
def dashboard_data(user_id: int, db: Session = Depends(get_db)):
    now = utcnow()
    today = now.date()

    trend = db.query(ReputationScore).filter(
        ReputationScore.user_id == user_id,
        ReputationScore.score_date >= today - timedelta(days=TREND_DAYS),
    ).order_by(ReputationScore.score_date.asc()).all()

    current = next((s for s in trend if s.score_date == today), None)
    current_score = current.overall_score if current else BASELINE_SCORE
    previous_score = trend[-2].overall_score if len(trend) > 1 else BASELINE_SCORE

    # Last 24 hours
    since = now - timedelta(hours=24)
    sentiments = [
        row.sentiment
        for row in db.query(Mention.sentiment).filter(
            Mention.user_id == user_id, Mention.mentioned_at >= since
        ).all()
    ]
    counts = {label: sentiments.count(label) for label in (POSITIVE, NEGATIVE, NEUTRAL, MIXED)}
    total = len(sentiments)
    positive_ratio = round(counts[POSITIVE] / total * 100) if total else 0

    recent = db.query(Mention).filter(
        Mention.user_id == user_id
    ).order_by(Mention.mentioned_at.desc()).limit(RECENT_LIMIT).all()

    return {
        "reputationScore": current_score,
        "reputationChange": current_score - previous_score,
        "totalMentions": total,
        "positiveRatio": positive_ratio,
        "sentimentCounts": counts,
        "recentMentions": [_mention_dict(m) for m in recent],
        "sentimentTrend": [
            {
                "date": s.score_date.isoformat(),
                "positive": s.positive_mentions,
                "negative": s.negative_mentions,
                "neutral": s.neutral_mentions,
                "mixed": s.mixed_mentions,
            }
            for s in trend
        ],
        "lastUpdated": now.isoformat(),
    }


def _mention_dict(mention: Mention) -> dict:
    return {
        "id": mention.id,
        "author": mention.author,
        "content": mention.content,
        "sentiment": mention.sentiment,
        "subreddit": mention.subreddit or "unknown",
        "mentionedAt": ensure_utc(mention.mentioned_at).isoformat(),
        "score": mention.score or 0,
        "comments": mention.num_comments or 0,
        "platform": mention.platform,
        "tags": mention.tags or [],
        "url": mention.url or "#",
    }
