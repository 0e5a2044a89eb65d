"""Baseline rows for a newly provisioned branch.

Every insert runs in its own transaction; a failure becomes a
PartialSeedFailure in the returned list and never stops the next insert.
Re-running on a seeded branch does not duplicate the demo profile or the
welcome post; page content is replaced.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypedDict

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.settings import SettingUpdate
from app.application.services.settings_catalog import FORUM_MODE_KEY, SITE_NAME_KEY
from app.domain.enums import ForumMode
from app.domain.exceptions import PartialSeedFailure
from app.infrastructure.persistence.models import PageContent, Post, Profile

if TYPE_CHECKING:
    from app.infrastructure.persistence.connection_registry import ConnectionHandle
    from app.infrastructure.services.settings_service import SettingsService

logger = logging.getLogger(__name__)


class PageContentSeed(TypedDict):
    """One demo page_content row."""

    page: str
    section: str
    position: int
    content: dict[str, Any]


DEMO_PROFILE_ID = "tenant-user-1"
DEMO_PROFILE_NAME = "演示用户1"
WELCOME_POST_CONTENT = "欢迎来到分站（自动开通）"

DEMO_PAGE_CONTENT: list[PageContentSeed] = [
    {"page": "home", "section": "carousel", "position": 0, "content": {
        "title": "欢迎来到分站", "description": "这里是您的专属首页",
        "image_url": "https://picsum.photos/seed/tenant-carousel/1200/400"}},
    {"page": "home", "section": "announcements", "position": 0, "content": {
        "text": "🎉 分站已开通，开始自定义您的站点吧！"}},
    {"page": "home", "section": "feature_cards", "position": 0, "content": {
        "title": "朋友圈", "description": "分享日常，互动点赞", "path": "/social",
        "icon": "MessageSquare"}},
    {"page": "home", "section": "feature_cards", "position": 1, "content": {
        "title": "游戏中心", "description": "精选小游戏合集", "path": "/games",
        "icon": "Gamepad2"}},
    {"page": "home", "section": "feature_cards", "position": 2, "content": {
        "title": "站点设置", "description": "自定义站点内容",
        "path": "/tenant-admin/page-content", "icon": "Settings"}},
    {"page": "home", "section": "hot_games", "position": 0, "content": {
        "title": "演示游戏A", "description": "有趣又好玩", "path": "/games",
        "iconUrl": "https://picsum.photos/seed/tenant-game1/200/200"}},
    {"page": "home", "section": "hot_games", "position": 1, "content": {
        "title": "演示游戏B", "description": "简单轻松", "path": "/games",
        "iconUrl": "https://picsum.photos/seed/tenant-game2/200/200"}},
    {"page": "games", "section": "game_categories", "position": 0, "content": {
        "name": "热门", "slug": "hot", "icon": "Flame"}},
    {"page": "games", "section": "game_cards", "position": 0, "content": {
        "title": "演示游戏A", "category_slug": "hot", "description": "快来试试！",
        "path": "/games", "iconUrl": "https://picsum.photos/seed/tenant-game1/200/200",
        "isOfficial": True}},
    {"page": "games", "section": "game_cards", "position": 1, "content": {
        "title": "演示游戏B", "category_slug": "hot", "description": "轻松上手",
        "path": "/games", "iconUrl": "https://picsum.photos/seed/tenant-game2/200/200",
        "isOfficial": False}},
]


def _random_uid() -> str:
    return str(100000 + secrets.randbelow(900000))


class BranchSeeder:
    """Seeds demo content and default settings onto a branch handle."""

    def __init__(self, settings: SettingsService) -> None:
        self.settings = settings

    async def _attempt(
        self,
        handle: ConnectionHandle,
        item: str,
        work: Callable[[AsyncSession], Awaitable[None]],
    ) -> PartialSeedFailure | None:
        try:
            async with handle.transaction() as session:
                await work(session)
        except SQLAlchemyError as exc:
            logger.warning("Seed item %s failed on tenant %s: %s", item, handle.tenant_id, exc)
            return PartialSeedFailure(item, str(exc))
        return None

    async def seed_content(
        self, handle: ConnectionHandle, tenant_id: int
    ) -> list[PartialSeedFailure]:
        """Demo profile, pinned welcome post and demo page content."""

        async def profile(session: AsyncSession) -> None:
            if await session.get(Profile, DEMO_PROFILE_ID) is None:
                session.add(
                    Profile(
                        id=DEMO_PROFILE_ID,
                        username=DEMO_PROFILE_NAME,
                        uid=_random_uid(),
                        points=0,
                        tenant_id=tenant_id,
                    )
                )

        async def welcome_post(session: AsyncSession) -> None:
            existing = await session.execute(
                select(Post.id).where(
                    Post.author_id == DEMO_PROFILE_ID, Post.is_pinned.is_(True)
                ).limit(1)
            )
            if existing.scalar_one_or_none() is None:
                session.add(
                    Post(
                        tenant_id=tenant_id,
                        author_id=DEMO_PROFILE_ID,
                        content=WELCOME_POST_CONTENT,
                        images=[],
                        is_pinned=True,
                        status="approved",
                    )
                )

        failures = [
            failure
            for failure in (
                await self._attempt(handle, "demo-profile", profile),
                await self._attempt(handle, "welcome-post", welcome_post),
            )
            if failure is not None
        ]
        failures.extend(await self.seed_page_content(handle, tenant_id))
        return failures

    async def seed_page_content(
        self, handle: ConnectionHandle, tenant_id: int
    ) -> list[PartialSeedFailure]:
        """Replace the tenant's page content with the demo home/games rows."""

        async def clear(session: AsyncSession) -> None:
            await session.execute(delete(PageContent).where(PageContent.tenant_id == tenant_id))

        failures: list[PartialSeedFailure] = []
        failure = await self._attempt(handle, "page-content:clear", clear)
        if failure is not None:
            failures.append(failure)

        for row in DEMO_PAGE_CONTENT:
            async def insert(session: AsyncSession, row: PageContentSeed = row) -> None:
                session.add(PageContent(tenant_id=tenant_id, **row))

            item = f"page-content:{row['page']}/{row['section']}/{row['position']}"
            failure = await self._attempt(handle, item, insert)
            if failure is not None:
                failures.append(failure)
        return failures

    async def seed_settings(
        self, handle: ConnectionHandle, tenant_id: int
    ) -> list[PartialSeedFailure]:
        """Default settings, then the generated site name and isolated forum mode."""
        failures: list[PartialSeedFailure] = []
        try:
            await self.settings.ensure_defaults_on(handle, tenant_id)
        except SQLAlchemyError as exc:
            logger.warning("Default settings failed on tenant %s: %s", tenant_id, exc)
            failures.append(PartialSeedFailure("default-settings", str(exc)))
        try:
            await self.settings.set_values_on(
                handle,
                tenant_id,
                [
                    SettingUpdate(SITE_NAME_KEY, self.settings.placeholder_for(tenant_id)),
                    SettingUpdate(FORUM_MODE_KEY, ForumMode.ISOLATED.value),
                ],
            )
        except SQLAlchemyError as exc:
            logger.warning("Site settings failed on tenant %s: %s", tenant_id, exc)
            failures.append(PartialSeedFailure("site-settings", str(exc)))
        return failures
