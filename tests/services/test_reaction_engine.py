# tests/services/test_reaction_engine.py
"""Tests for the reaction toggle engine."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import func, select

from forum_core.core.errors import NotFound, Unauthenticated
from forum_core.models import CommentReaction, Polarity, PostReaction, SubjectKind
from forum_core.services.reactions import next_state

LIKE = Polarity.LIKE
DISLIKE = Polarity.DISLIKE


@pytest.mark.parametrize(
    ("current", "requested", "expected"),
    [
        (None, LIKE, LIKE),
        (None, DISLIKE, DISLIKE),
        (LIKE, LIKE, None),
        (LIKE, DISLIKE, DISLIKE),
        (DISLIKE, DISLIKE, None),
        (DISLIKE, LIKE, LIKE),
    ],
)
def test_transition_table(current, requested, expected) -> None:
    assert next_state(current, requested) is expected


def test_first_like_creates_reaction(reaction_engine, make_user, make_post) -> None:
    user = make_user()
    post = make_post(user)

    outcome = reaction_engine.toggle(post.id, SubjectKind.POST, user.id, LIKE)

    assert (outcome.likes, outcome.dislikes, outcome.state) == (1, 0, LIKE)
    assert reaction_engine.current_reaction(post.id, "post", user.id) is LIKE


def test_same_polarity_twice_cancels(reaction_engine, make_user, make_post) -> None:
    user = make_user()
    post = make_post(user)

    reaction_engine.toggle(post.id, "post", user.id, "like")
    outcome = reaction_engine.toggle(post.id, "post", user.id, "like")

    assert (outcome.likes, outcome.dislikes, outcome.state) == (0, 0, None)
    assert reaction_engine.current_reaction(post.id, "post", user.id) is None


def test_switching_polarity_moves_the_count(reaction_engine, make_user, make_post) -> None:
    author = make_user()
    voter = make_user()
    post = make_post(author)
    reaction_engine.toggle(post.id, "post", author.id, LIKE)
    reaction_engine.toggle(post.id, "post", voter.id, LIKE)

    outcome = reaction_engine.toggle(post.id, "post", voter.id, DISLIKE)

    assert (outcome.likes, outcome.dislikes) == (1, 1)
    assert outcome.state is DISLIKE


def test_comment_reactions_are_separate(reaction_engine, make_user, make_post, make_comment) -> None:
    user = make_user()
    post = make_post(user)
    comment = make_comment(post, user)

    reaction_engine.toggle(comment.id, SubjectKind.COMMENT, user.id, DISLIKE)

    assert reaction_engine.counts(comment.id, "comment") == (0, 1)
    assert reaction_engine.counts(post.id, "post") == (0, 0)


def test_unknown_subject_is_not_found(reaction_engine, make_user) -> None:
    user = make_user()

    with pytest.raises(NotFound):
        reaction_engine.toggle(424242, "post", user.id, LIKE)
    with pytest.raises(NotFound):
        reaction_engine.counts(424242, "comment")


def test_anonymous_toggle_is_rejected(reaction_engine, make_user, make_post) -> None:
    post = make_post(make_user())

    with pytest.raises(Unauthenticated):
        reaction_engine.toggle(post.id, "post", None, LIKE)


def test_concurrent_identical_toggles_leave_one_row(
    reaction_engine, session_factory, make_user, make_post
) -> None:
    user = make_user()
    post = make_post(user)
    workers = 5
    barrier = threading.Barrier(workers)

    def toggle(_: int) -> None:
        barrier.wait()
        reaction_engine.toggle(post.id, "post", user.id, LIKE)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        list(pool.map(toggle, range(workers)))

    with session_factory() as db:
        rows = db.execute(
            select(func.count())
            .select_from(PostReaction)
            .where(PostReaction.subject_id == post.id, PostReaction.user_id == user.id)
        ).scalar_one()
    assert rows == workers % 2
    assert reaction_engine.counts(post.id, "post") == (1, 0)


def test_deleting_subject_cascades_reactions(
    reaction_engine, session_factory, make_user, make_post, make_comment
) -> None:
    user = make_user()
    post = make_post(user)
    comment = make_comment(post, user)
    reaction_engine.toggle(comment.id, "comment", user.id, LIKE)

    with session_factory.begin() as db:
        db.delete(db.get(type(post), post.id))

    with session_factory() as db:
        remaining = db.execute(select(func.count()).select_from(CommentReaction)).scalar_one()
    assert remaining == 0
