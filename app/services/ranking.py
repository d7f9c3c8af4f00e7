"""Feed ranking.

Three orderings over an already-fetched post set:

* ``recent``    -- newest first.
* ``popular``   -- likes + comments + reposts, highest first.
* ``algorithm`` -- engagement weighted by exponential time decay, grouped into
  high/medium/low tiers, each tier shuffled, followed by an occasional
  promotion of a post from just ahead in the list.

Pagination is applied after ordering, so in ``algorithm`` mode every call
reshuffles and page N of one request need not match page N of the next.
Ranking never touches the database.
"""
import math
import random
import time
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, TypeVar


class FeedMode(str, Enum):
    ALGORITHM = "algorithm"
    RECENT = "recent"
    POPULAR = "popular"

    @classmethod
    def parse(cls, value: "str | FeedMode | None") -> "FeedMode":
        try:
            return cls(value)
        except ValueError:
            return cls.ALGORITHM


class Tier(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Rankable(Protocol):
    likes_count: int
    comments_count: int
    reposts_count: int
    created_at: int


P = TypeVar("P", bound=Rankable)


@dataclass(frozen=True)
class RankingParams:
    decay_hours: float = 24.0
    like_weight: float = 1.0
    comment_weight: float = 2.0
    repost_weight: float = 1.5
    fresh_window_hours: float = 2.0
    fresh_boost: float = 3.0
    high_threshold: float = 5.0
    low_threshold: float = 1.0
    promotion_probability: float = 0.10
    promotion_window: int = 5

    @classmethod
    def from_settings(cls, settings) -> "RankingParams":
        return cls(
            decay_hours=settings.FEED_DECAY_HOURS,
            like_weight=settings.FEED_LIKE_WEIGHT,
            comment_weight=settings.FEED_COMMENT_WEIGHT,
            repost_weight=settings.FEED_REPOST_WEIGHT,
            fresh_window_hours=settings.FEED_FRESH_WINDOW_HOURS,
            fresh_boost=settings.FEED_FRESH_BOOST,
            high_threshold=settings.FEED_HIGH_TIER_THRESHOLD,
            low_threshold=settings.FEED_LOW_TIER_THRESHOLD,
            promotion_probability=settings.FEED_PROMOTION_PROBABILITY,
            promotion_window=settings.FEED_PROMOTION_WINDOW,
        )


DEFAULT_PARAMS = RankingParams()


def engagement_total(post: Rankable) -> int:
    return (post.likes_count or 0) + (post.comments_count or 0) + (post.reposts_count or 0)


def score_post(post: Rankable, now: int, params: RankingParams = DEFAULT_PARAMS) -> float:
    age_hours = (now - (post.created_at or 0)) / 3600
    time_decay = math.exp(-age_hours / params.decay_hours)
    engagement = (
        (post.likes_count or 0) * params.like_weight
        + (post.comments_count or 0) * params.comment_weight
        + (post.reposts_count or 0) * params.repost_weight
    )
    fresh_boost = params.fresh_boost if age_hours < params.fresh_window_hours else 0.0
    # +1 keeps unengaged posts positive so decay still orders them by age
    return (engagement + fresh_boost + 1) * time_decay


def tier_for(score: float, params: RankingParams = DEFAULT_PARAMS) -> Tier:
    if score > params.high_threshold:
        return Tier.HIGH
    if score > params.low_threshold:
        return Tier.MEDIUM
    return Tier.LOW


def split_tiers(posts: Sequence[P], now: int, params: RankingParams = DEFAULT_PARAMS) -> dict[Tier, list[P]]:
    tiers: dict[Tier, list[P]] = {Tier.HIGH: [], Tier.MEDIUM: [], Tier.LOW: []}
    for post in posts:
        tiers[tier_for(score_post(post, now, params), params)].append(post)
    return tiers


def promote_lower(items: list[P], rng: random.Random, params: RankingParams = DEFAULT_PARAMS) -> list[P]:
    """After each emitted item, maybe pull one of the next few items forward.

    The pulled item is removed from its old slot, so output is a permutation of
    the input.
    """
    remaining = list(items)
    out: list[P] = []
    i = 0
    while i < len(remaining):
        out.append(remaining[i])
        if i < len(remaining) - 1 and rng.random() < params.promotion_probability:
            window = min(params.promotion_window, len(remaining) - i - 1)
            out.append(remaining.pop(i + 1 + rng.randrange(window)))
        i += 1
    return out


def order_algorithm(
    posts: Sequence[P],
    now: int,
    rng: random.Random,
    params: RankingParams = DEFAULT_PARAMS,
) -> list[P]:
    tiers = split_tiers(posts, now, params)
    ordered: list[P] = []
    for tier in (Tier.HIGH, Tier.MEDIUM, Tier.LOW):
        group = tiers[tier]
        rng.shuffle(group)
        ordered.extend(group)
    return promote_lower(ordered, rng, params)


def rank_posts(
    posts: Sequence[P],
    mode: "FeedMode | str" = FeedMode.ALGORITHM,
    offset: int = 0,
    limit: int = 20,
    *,
    now: int | None = None,
    rng: random.Random | None = None,
    params: RankingParams | None = None,
) -> list[P]:
    """Order ``posts`` for the given mode and return the ``[offset, offset + limit)`` slice."""
    mode = FeedMode.parse(mode)
    params = params or DEFAULT_PARAMS
    if mode is FeedMode.RECENT:
        ordered = sorted(posts, key=lambda p: p.created_at or 0, reverse=True)
    elif mode is FeedMode.POPULAR:
        ordered = sorted(posts, key=engagement_total, reverse=True)
    else:
        ordered = order_algorithm(
            posts,
            now if now is not None else int(time.time()),
            rng or random.Random(),
            params,
        )
    offset = max(offset, 0)
    return ordered[offset : offset + max(limit, 0)]
