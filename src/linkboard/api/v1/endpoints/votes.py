"""Vote endpoints for the Linkboard API."""

import logging

from fastapi import APIRouter
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from linkboard.api.v1.dependencies import CaptchaSessionDep, LedgerDep, SessionDep
from linkboard.models import Link, LinkVote
from linkboard.schemas.vote import VoteAction, VoteResponse
from linkboard.services.errors import AlreadyVotedError, LinkNotFoundError, NoVoteToUndoError
from linkboard.services.ledger import AdjustResult, Counter, VoteLedger
from linkboard.services.ranking import calculate_score

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/links", tags=["votes"])

_MESSAGES = {
    VoteAction.UPVOTE: "Upvoted successfully",
    VoteAction.DOWNVOTE: "Downvoted successfully",
    VoteAction.UNUPVOTE: "Un-upvoted successfully",
    VoteAction.UNDOWNVOTE: "Un-downvoted successfully",
}


def _get_link_or_404(db: Session, link_id: int) -> Link:
    link = db.get(Link, link_id)
    if link is None:
        raise LinkNotFoundError(link_id)
    return link


def _apply_vote(
    *,
    db: Session,
    ledger: VoteLedger,
    session_id: str,
    link_id: int,
    action: VoteAction,
) -> None:
    counter = Counter.UPVOTES if action.direction == 1 else Counter.DOWNVOTES

    if action.undo:
        # Only the request whose DELETE removes the record may decrement.
        result = db.execute(
            delete(LinkVote)
            .where(
                LinkVote.session_id == session_id,
                LinkVote.link_id == link_id,
                LinkVote.direction == action.direction,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NoVoteToUndoError(link_id)
        delta = -1
    else:
        if db.get(LinkVote, (session_id, link_id)) is not None:
            raise AlreadyVotedError(link_id)
        db.add(LinkVote(session_id=session_id, link_id=link_id, direction=action.direction))
        try:
            db.flush()
        except IntegrityError as exc:
            # A concurrent request from the same session recorded its vote first.
            db.rollback()
            raise AlreadyVotedError(link_id) from exc
        delta = 1

    if ledger.adjust(link_id, counter, delta) is AdjustResult.NOT_FOUND:
        raise LinkNotFoundError(link_id)


@router.post("/{link_id}/{action}", response_model=VoteResponse)
async def vote_on_link(
    link_id: int,
    action: VoteAction,
    captcha_session: CaptchaSessionDep,
    db: SessionDep,
    ledger: LedgerDep,
) -> VoteResponse:
    """Cast or withdraw a vote on a link.

    Each CAPTCHA session holds at most one vote per link; it must be
    withdrawn before the opposite vote can be cast.
    """
    link = _get_link_or_404(db, link_id)
    _apply_vote(
        db=db,
        ledger=ledger,
        session_id=captcha_session.id,
        link_id=link_id,
        action=action,
    )
    db.commit()
    db.refresh(link)

    logger.debug("Session %s... applied %s on link %d", captcha_session.id[:8], action.value, link_id)
    return VoteResponse(
        message=_MESSAGES[action],
        link_id=link.id,
        upvotes=link.upvotes,
        downvotes=link.downvotes,
        score=calculate_score(link.upvotes, link.downvotes),
    )
