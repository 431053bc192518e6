"""
ModerateReviewsUseCase - the token-gated moderation queue.

Each transition is a compare-and-swap in the store (status must still be
pending), so concurrent approve/reject calls cannot both win and retries
are harmless: the second call changes 0 rows.
"""

import hmac
import logging
from typing import Any, List, Optional

from ..domain.entities.review import Review, ReviewStatus
from ..domain.errors import AdminMisconfiguredError, UnauthorizedError, ValidationError
from ..domain.interfaces.i_data_repository import IDataRepository
from ..domain.parsing import clamp_limit, parse_int

logger = logging.getLogger(__name__)

MIN_TOKEN_LENGTH = 16
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200
MAX_REVIEW_ID = 1_000_000_000


class ModerateReviewsUseCase:
    def __init__(self, repository: IDataRepository, admin_token: Optional[str]):
        self.repository = repository
        self._secret = (admin_token or "").strip()

    def authorize(self, token: Any) -> None:
        """
        Fail closed: an unset or short secret rejects every call, whatever
        the caller sends.
        """
        if len(self._secret) < MIN_TOKEN_LENGTH:
            logger.error("[Moderation] ADMIN_TOKEN is unset or too short; refusing admin call")
            raise AdminMisconfiguredError("Server misconfigured: admin token not set")

        supplied = token.strip() if isinstance(token, str) else ""
        if not supplied or not hmac.compare_digest(supplied.encode(), self._secret.encode()):
            logger.warning("[Moderation] Rejected admin call with bad token")
            raise UnauthorizedError("Unauthorized")

    async def list_pending(self, token: Any, limit: Any = DEFAULT_PAGE_SIZE) -> List[Review]:
        self.authorize(token)
        return await self.repository.list_pending_reviews(clamp_limit(limit, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE))

    async def transition(self, token: Any, review_id: Any, target: ReviewStatus) -> int:
        self.authorize(token)

        rid = parse_int(review_id)
        if rid is None or not 1 <= rid <= MAX_REVIEW_ID:
            raise ValidationError("Invalid review id")
        if not ReviewStatus.PENDING.can_transition_to(target):
            raise ValidationError("Invalid status")

        updated = await self.repository.transition_review(rid, target)
        logger.info(f"[Moderation] review id={rid} → {target.value}: updated={updated}")
        return updated

    async def approve(self, token: Any, review_id: Any) -> int:
        return await self.transition(token, review_id, ReviewStatus.APPROVED)

    async def reject(self, token: Any, review_id: Any) -> int:
        return await self.transition(token, review_id, ReviewStatus.REJECTED)
