import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from phoenixapi.config import Settings
from phoenixapi.core.exceptions import ConflictError, NotFoundError, ValidationError
from phoenixapi.repositories.follow_repository import FollowRepository
from phoenixapi.repositories.user_repository import UserRepository
from phoenixapi.schemas.user import (
    FollowSchema,
    FollowStatus,
    ProfileUpdate,
    User as UserSchema,
    UserProfile,
    UserSearchItem,
    UserSearchResult,
)

logger = logging.getLogger(__name__)


class UserService:
    """Profiles and the follow graph"""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.user_repo = UserRepository(db)
        self.follow_repo = FollowRepository(db)
        self.settings = settings

    def get_user(self, user_id: int) -> UserSchema:
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User not found: {user_id}", {"user_id": user_id})
        return user

    def get_profile(self, user_id: int) -> UserProfile:
        user = self.get_user(user_id)
        return UserProfile(
            user_id=user.id,
            username=user.username,
            display_name=user.display_name,
            bio=user.bio,
            avatar_url=user.avatar_url,
            is_admin=user.is_admin,
            created_at=user.created_at,
            followers=self.follow_repo.count_followers(user.id),
            following=self.follow_repo.count_following(user.id),
        )

    def update_profile(self, user_id: int, update: ProfileUpdate) -> UserProfile:
        self.get_user(user_id)
        changes = update.model_dump(exclude_unset=True)
        # display_name is required on the row; None means "leave as is"
        if changes.get("display_name", "") is None:
            changes.pop("display_name")
        if changes:
            self.user_repo.update(user_id, **changes)
            logger.info(f"User {user_id} updated profile fields: {sorted(changes)}")
        return self.get_profile(user_id)

    def follow(self, follower_id: int, following_id: int) -> FollowSchema:
        if follower_id == following_id:
            raise ValidationError("You cannot follow yourself")
        self.get_user(following_id)

        if self.follow_repo.follows(follower_id, following_id):
            raise ConflictError(
                "Already following this user", {"following_id": following_id}
            )
        try:
            edge = self.follow_repo.add(follower_id, following_id)
        except IntegrityError:
            raise ConflictError(
                "Already following this user", {"following_id": following_id}
            )
        if edge is None:
            raise ConflictError("Failed to follow user", {"following_id": following_id})
        return edge

    def unfollow(self, follower_id: int, following_id: int) -> None:
        if not self.follow_repo.remove(follower_id, following_id):
            raise NotFoundError(
                "Not following this user", {"following_id": following_id}
            )

    def follow_status(self, user_id: int, target_user_id: int) -> FollowStatus:
        is_following = self.follow_repo.follows(user_id, target_user_id)
        is_followed_by = self.follow_repo.follows(target_user_id, user_id)
        return FollowStatus(
            user_id=user_id,
            target_user_id=target_user_id,
            is_following=is_following,
            is_followed_by=is_followed_by,
            is_mutual=is_following and is_followed_by,
        )

    def search_users(
        self, pattern: str, limit: int = 20, exclude_user_id: Optional[int] = None
    ) -> UserSearchResult:
        pattern = (pattern or "").strip()
        if not pattern:
            return UserSearchResult(users=[], count=0)

        users = [
            UserSearchItem(
                id=u.id,
                username=u.username,
                display_name=u.display_name,
                avatar_url=u.avatar_url,
            )
            for u in self.user_repo.search_by_username(pattern, limit=limit)
            if u.id != exclude_user_id
        ]
        return UserSearchResult(users=users, count=len(users))
