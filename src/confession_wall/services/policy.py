"""Length and category limits applied before anything reaches the store."""

from __future__ import annotations

from dataclasses import dataclass

from confession_wall.core.errors import InputValidationError
from confession_wall.core.settings import Settings


@dataclass(frozen=True)
class ContentPolicy:
    """Configurable submission limits.

    Presence checks belong to the repository; this only rejects values that
    are present but too long or outside the category list. An empty category
    list accepts any category.
    """

    allowed_categories: tuple[str, ...]
    confession_max_length: int
    comment_max_length: int
    nickname_max_length: int

    @classmethod
    def from_settings(cls, app_settings: Settings) -> ContentPolicy:
        return cls(
            allowed_categories=tuple(app_settings.allowed_categories),
            confession_max_length=app_settings.confession_max_length,
            comment_max_length=app_settings.comment_max_length,
            nickname_max_length=app_settings.nickname_max_length,
        )

    def check_confession(
        self,
        content: str | None,
        category: str | None,
        nickname: str | None,
    ) -> None:
        if content and len(content.strip()) > self.confession_max_length:
            raise InputValidationError(
                f"Confession must be at most {self.confession_max_length} characters"
            )
        category = category.strip() if category else ""
        if category and self.allowed_categories and category not in self.allowed_categories:
            raise InputValidationError(f"Unknown category: {category}")
        self._check_nickname(nickname)

    def check_comment(self, content: str | None, nickname: str | None) -> None:
        if content and len(content.strip()) > self.comment_max_length:
            raise InputValidationError(
                f"Comment must be at most {self.comment_max_length} characters"
            )
        self._check_nickname(nickname)

    def _check_nickname(self, nickname: str | None) -> None:
        if nickname and len(nickname.strip()) > self.nickname_max_length:
            raise InputValidationError(
                f"Nickname must be at most {self.nickname_max_length} characters"
            )
