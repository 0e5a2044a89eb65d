"""Forum mode selection: shared tables on the primary, or the tenant's own."""

from app.application.dtos.settings import SettingUpdate
from app.domain.enums import ForumMode


async def test_default_mode_targets_shared_tables_on_primary(services) -> None:
    target = await services.forum_modes.target_for(5)

    assert target.mode is ForumMode.SHARED
    assert target.handle is services.registry.primary
    assert target.posts.name == "shared_posts"
    assert target.likes.name == "shared_likes"


async def test_isolated_mode_targets_tenant_tables(services) -> None:
    await services.branch_directory.set_mapping(5, "db://branch-5", source="admin")
    await services.settings_service.update(5, [SettingUpdate("social_forum_mode", "isolated")])

    target = await services.forum_modes.target_for(5)

    assert target.mode is ForumMode.ISOLATED
    assert target.handle.endpoint == "db://branch-5"
    assert target.posts.name == "posts"
    assert target.comments.name == "comments"


async def test_legacy_independent_value_is_isolated(services) -> None:
    await services.settings_service.update(6, [SettingUpdate("social_forum_mode", "independent")])
    assert await services.forum_modes.mode_for(6) is ForumMode.ISOLATED
