"""
Weighted field scoring

Each entity kind sums the contributions of its text fields. A field
contributes for a whole-query match (exact, else prefix, plus contains)
and for every token that differs from the query (exact, else prefix,
else contains).
"""
from typing import Any, Callable, Dict, List, Optional, Tuple

from .domain.models import (
    Candidate,
    EntityKind,
    FieldWeights,
    PostCandidate,
    QuiltCandidate,
    UserCandidate,
)

TOKEN_EXACT_FACTOR = 0.55

WEIGHTS: Dict[Tuple[str, str], FieldWeights] = {
    ("user", "username"): FieldWeights(130, 95, 68, 22, 10),
    ("user", "name"): FieldWeights(110, 78, 54, 18, 8),
    ("user", "bio"): FieldWeights(42, 26, 16, 7, 4),
    ("post", "caption"): FieldWeights(95, 68, 48, 15, 7),
    ("post", "author.username"): FieldWeights(110, 82, 58, 18, 8),
    ("post", "author.name"): FieldWeights(88, 64, 45, 14, 6),
    ("quilt", "name"): FieldWeights(125, 92, 65, 21, 9),
    ("quilt", "description"): FieldWeights(48, 30, 18, 8, 4),
    ("quilt", "owner.username"): FieldWeights(92, 66, 46, 14, 6),
    ("quilt", "owner.name"): FieldWeights(76, 56, 38, 12, 5),
}

Scorer = Callable[[Any, str, List[str]], int]


def normalize_text(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().lower()


def token_exact_points(weights: FieldWeights) -> int:
    # Half-up rounding; Python's round() would send 0.5 to the even neighbour
    return int(weights.exact * TOKEN_EXACT_FACTOR + 0.5)


def score_text_field(
    value: Any, query: str, tokens: List[str], weights: FieldWeights
) -> int:
    """
    Score one field value against the lower-cased query and its tokens

    Args:
        value: Raw field value; non-strings and blanks score 0
        query: Lower-cased normalized query
        tokens: Query tokens
        weights: Weights for this field

    Returns:
        Non-negative integer score
    """
    text = normalize_text(value)
    if not text:
        return 0

    score = 0
    if query:
        if text == query:
            score += weights.exact
        elif text.startswith(query):
            score += weights.prefix
        if query in text:
            score += weights.contains

    for token in tokens:
        if not token or token == query:
            continue
        if text == token:
            score += token_exact_points(weights)
        elif text.startswith(token):
            score += weights.token_prefix
        elif token in text:
            score += weights.token_contains

    return score


def _ref_field(ref: Optional[Any], name: str) -> Optional[str]:
    return getattr(ref, name, None) if ref is not None else None


def score_user(user: UserCandidate, query: str, tokens: List[str]) -> int:
    return (
        score_text_field(user.username, query, tokens, WEIGHTS[("user", "username")])
        + score_text_field(user.name, query, tokens, WEIGHTS[("user", "name")])
        + score_text_field(user.bio, query, tokens, WEIGHTS[("user", "bio")])
    )


def score_post(post: PostCandidate, query: str, tokens: List[str]) -> int:
    return (
        score_text_field(post.caption, query, tokens, WEIGHTS[("post", "caption")])
        + score_text_field(
            _ref_field(post.author, "username"),
            query,
            tokens,
            WEIGHTS[("post", "author.username")],
        )
        + score_text_field(
            _ref_field(post.author, "name"), query, tokens, WEIGHTS[("post", "author.name")]
        )
    )


def score_quilt(quilt: QuiltCandidate, query: str, tokens: List[str]) -> int:
    return (
        score_text_field(quilt.name, query, tokens, WEIGHTS[("quilt", "name")])
        + score_text_field(
            quilt.description, query, tokens, WEIGHTS[("quilt", "description")]
        )
        + score_text_field(
            _ref_field(quilt.owner, "username"),
            query,
            tokens,
            WEIGHTS[("quilt", "owner.username")],
        )
        + score_text_field(
            _ref_field(quilt.owner, "name"), query, tokens, WEIGHTS[("quilt", "owner.name")]
        )
    )


SCORERS: Dict[EntityKind, Scorer] = {
    EntityKind.USERS: score_user,
    EntityKind.SOCIAL: score_post,
    EntityKind.MARKETPLACE: score_post,
    EntityKind.QUILTS: score_quilt,
}


def score(kind: EntityKind, candidate: Candidate, query: str, tokens: List[str]) -> int:
    """Score a candidate with the scorer registered for its entity kind"""
    return SCORERS[kind](candidate, query, tokens)
