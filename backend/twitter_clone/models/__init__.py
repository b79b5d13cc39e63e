"""ORM models; importing this package registers every table on Base.metadata."""

from twitter_clone.models.tweet import Like, Reply, Tweet
from twitter_clone.models.user import Follower, User

__all__ = ["User", "Follower", "Tweet", "Like", "Reply"]
