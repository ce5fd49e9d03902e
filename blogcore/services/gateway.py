"""Key-gated public feed."""

from blogcore.configs import API_KEY_REQUIRED, INVALID_API_KEY
from blogcore.monitoring import get_logger
from blogcore.repositories import BlogRepository
from blogcore.schemas.blog import BlogResponse
from blogcore.schemas.gateway import FeedResponse
from blogcore.services.identity import IdentityStore

logger = get_logger(__name__)


class ApiGateway:
    """
    Serves every published blog, across all owners, to API key holders.

    A rejected key is an ordinary outcome reported in the response body;
    nothing here raises for a bad key.
    """

    def __init__(self, identity: IdentityStore, blogs: BlogRepository) -> None:
        self._identity = identity
        self._blogs = blogs

    async def handle(self, api_key: str | None) -> FeedResponse:
        """
        Answer one feed request.

        Args:
            api_key: Key supplied by the caller

        Returns:
            FeedResponse: The published feed, or the reason the key was refused
        """
        if not api_key:
            return FeedResponse.fail(API_KEY_REQUIRED)

        holder = await self._identity.find_by_api_key(api_key)
        if holder is None:
            logger.info("Feed request rejected")
            return FeedResponse.fail(INVALID_API_KEY)

        count = await self._identity.increment_request_count(holder.id)
        blogs = await self._blogs.list_published()
        logger.info("Feed served", user_id=str(holder.id), request_count=count, blogs=len(blogs))
        return FeedResponse.ok([BlogResponse.model_validate(blog) for blog in blogs])
