from __future__ import annotations

from typing import Any, Dict, Optional

from .constants import BOT_USER_TYPE, SCAN_HEADER
from .context import ActionContext
from .github import GitHubClient
from .logging import DecoratorLogger
from .models import CommentAction, FailureKind, Outcome


def is_bot_comment(comment: Dict[str, Any], header: str = SCAN_HEADER) -> bool:
    """True when the comment was posted by a bot account and carries the scan header."""
    if not isinstance(comment, dict):
        return False
    user = comment.get("user")
    body = comment.get("body")
    if not isinstance(user, dict) or not isinstance(body, str):
        return False
    return user.get("type") == BOT_USER_TYPE and header in body


class PRCommenter:
    """
    Keeps a single scan-report comment per pull request.

    The existing comment is located by author type plus header substring and
    updated in place; otherwise a new one is created. Exactly one mutating
    call is issued per reconciliation.
    """

    def __init__(
        self,
        gh: GitHubClient,
        context: ActionContext,
        logger: Optional[DecoratorLogger] = None,
        scan_header: str = SCAN_HEADER,
    ):
        self.gh = gh
        self.context = context
        self.logger = logger or DecoratorLogger("commenter")
        self.scan_header = scan_header

    async def post_or_update_comment(self, body: str, pr_number: Optional[int] = None) -> bool:
        """
        Post a new comment or update ours. Returns False when there is no PR to comment on.

        Raises GitHubAPIError if listing, creating or updating fails.
        """
        action = (await self.reconcile(body, pr_number)).unwrap()
        return action is not CommentAction.SKIPPED

    async def reconcile(self, body: str, pr_number: Optional[int] = None) -> Outcome[CommentAction]:
        pr = pr_number or self.context.pr_number
        if not pr:
            self.logger.info("No pull request context found, skipping comment")
            return Outcome.success(CommentAction.SKIPPED)

        located = await self._locate(pr)
        if not located.ok:
            return Outcome.failed(located.failure, located.error)

        existing = located.value
        if existing is not None:
            return await self._update(existing["id"], body)
        return await self._create(pr, body)

    async def find_existing_comment(self, pr_number: int) -> Optional[Dict[str, Any]]:
        return (await self._locate(pr_number)).unwrap()

    async def _locate(self, pr_number: int) -> Outcome[Dict[str, Any]]:
        try:
            comments = await self.gh.list_issue_comments(pr_number)
        except Exception as exc:
            return Outcome.failed(FailureKind.LIST_COMMENTS, str(exc))

        for comment in comments or []:
            if is_bot_comment(comment, self.scan_header):
                self.logger.debug("Found existing scan comment", comment_id=comment.get("id"))
                return Outcome.success(comment)
        return Outcome.success(None)

    async def _create(self, pr_number: int, body: str) -> Outcome[CommentAction]:
        try:
            await self.gh.create_issue_comment(pr_number, body)
        except Exception as exc:
            return Outcome.failed(FailureKind.CREATE_COMMENT, str(exc))
        self.logger.info("Created scan comment", pr_number=pr_number)
        return Outcome.success(CommentAction.CREATED)

    async def _update(self, comment_id: int, body: str) -> Outcome[CommentAction]:
        try:
            await self.gh.update_issue_comment(comment_id, body)
        except Exception as exc:
            return Outcome.failed(FailureKind.UPDATE_COMMENT, str(exc))
        self.logger.info("Updated scan comment", comment_id=comment_id)
        return Outcome.success(CommentAction.UPDATED)
