"""Settings catalog and per-key inheritance rules.

Pure functions only: the settings service loads rows and hands them here.
Tenant 0 holds the canonical default of every key. Non-strict keys inherit
tenant 0's value when a tenant has no row; strict keys (site identity and
SEO) never do and resolve to an empty string, or the generated site name
placeholder for ``site_name``.
"""

from collections.abc import Iterable, Mapping

from app.application.dtos.settings import SettingDefinition, SettingResult, SettingUpdate
from app.core.constants import PRIMARY_TENANT_ID
from app.domain.enums import ForumMode, SettingType

SITE_NAME_KEY = "site_name"
FORUM_MODE_KEY = "social_forum_mode"

SETTING_DEFINITIONS: tuple[SettingDefinition, ...] = (
    SettingDefinition("site_name", "大海团队", "Site name", "Name shown in the header and title", SettingType.TEXT),
    SettingDefinition("site_description", "", "Site description", "Short description used on the home page and in SEO", SettingType.TEXTAREA),
    SettingDefinition("site_logo", "", "Site logo", "Logo image URL", SettingType.IMAGE),
    SettingDefinition("site_favicon", "", "Favicon", "Favicon image URL", SettingType.IMAGE),
    SettingDefinition("seo_title_suffix", " - 大海团队", "SEO title suffix", "Appended to every page title", SettingType.TEXT),
    SettingDefinition("seo_keywords", "", "SEO keywords", "Comma separated meta keywords", SettingType.TEXT),
    SettingDefinition("seo_meta_image", "", "SEO share image", "Default image for social previews", SettingType.IMAGE),
    SettingDefinition("seo_indexable", "true", "Allow indexing", "Let search engines index the site", SettingType.BOOLEAN),
    SettingDefinition("seo_sitemap_enabled", "true", "Sitemap", "Publish sitemap.xml", SettingType.BOOLEAN),
    SettingDefinition("new_user_points", "100", "New user points", "Points granted on registration", SettingType.NUMBER),
    SettingDefinition("initial_virtual_currency", "0", "Initial currency", "Virtual currency granted on registration", SettingType.NUMBER),
    SettingDefinition("new_user_free_posts", "0", "Free posts", "Free posts granted on registration", SettingType.NUMBER),
    SettingDefinition("invite_reward_points", "50", "Invite reward", "Points granted per successful invitation", SettingType.NUMBER),
    SettingDefinition("social_post_cost", "100", "Post cost", "Points charged per forum post", SettingType.NUMBER),
    SettingDefinition("comment_cost", "1", "Comment cost", "Points charged per comment", SettingType.NUMBER),
    SettingDefinition("ad_post_cost", "200", "Ad post cost", "Points charged per advertisement post", SettingType.NUMBER),
    SettingDefinition("daily_login_reward", "10", "Daily login reward", "Points granted on the first login of a day", SettingType.NUMBER),
    SettingDefinition(FORUM_MODE_KEY, ForumMode.SHARED.value, "Forum mode", "shared: one forum for all sites; isolated: per-site forum", SettingType.TEXT),
    SettingDefinition("embed_obfuscate_enabled", "false", "Embed obfuscation", "Obfuscate embedded game URLs", SettingType.BOOLEAN),
    SettingDefinition("embed_obfuscate_key", "YjM2M2JkYjItZGVmYy00NzYyLWEyY2QtY2FjY2FjY2FjY2FjY2FjY2E=", "Embed obfuscation key", "Key used to obfuscate embedded URLs", SettingType.TEXT),
)

DEFINITIONS_BY_KEY: dict[str, SettingDefinition] = {d.key: d for d in SETTING_DEFINITIONS}

STRICT_KEYS: frozenset[str] = frozenset({
    "site_name", "site_logo", "logo_url", "site_favicon", "site_description",
    "seo_title_suffix", "seo_keywords", "seo_meta_image", "seo_indexable",
    "seo_sitemap_enabled",
})

# Keys a tenant administrator may change on their own tenant.
TENANT_ADMIN_WRITABLE_KEYS: frozenset[str] = frozenset({
    "site_name", "site_logo", "site_description", "site_favicon",
    "seo_title_suffix", "seo_keywords", "seo_meta_image", "seo_indexable",
    "seo_sitemap_enabled",
})


def strict_fallback(key: str, tenant_id: int, site_name_placeholder: str) -> str:
    """Value a strict key resolves to when the tenant has no row for it."""
    if key == SITE_NAME_KEY and tenant_id != PRIMARY_TENANT_ID:
        return site_name_placeholder
    return ""


def merge_settings(
    tenant_id: int,
    defaults: Mapping[str, str | None],
    tenant_rows: Mapping[str, str | None],
    *,
    site_name_placeholder: str,
) -> dict[str, str]:
    """Overlay tenant rows on tenant-0 defaults, applying the strict-key rule.

    Args:
        tenant_id: Tenant being resolved.
        defaults: Tenant 0's key -> value rows.
        tenant_rows: The tenant's own rows (same as defaults for tenant 0).
        site_name_placeholder: Generated site name for this tenant.

    Returns:
        Complete key -> value map; the forum mode is always present.
    """
    merged = {key: value or "" for key, value in defaults.items()}
    merged.update({key: value or "" for key, value in tenant_rows.items()})
    for key in STRICT_KEYS:
        if key not in tenant_rows:
            merged[key] = strict_fallback(key, tenant_id, site_name_placeholder)
    if not merged.get(FORUM_MODE_KEY):
        merged[FORUM_MODE_KEY] = ForumMode.SHARED.value
    return merged


def plan_default_backfill(
    tenant_id: int,
    existing: Iterable[SettingResult],
    *,
    site_name_placeholder: str,
    global_values: Mapping[str, str | None] | None = None,
) -> list[SettingUpdate]:
    """Upserts that bring a tenant's rows up to the catalog.

    Missing keys are inserted. On tenants other than 0, non-strict keys take
    tenant 0's current value (global_values) when it has one, and strict keys
    take their strict fallback, never the tenant-0 or catalog value.
    Existing rows get missing display metadata filled in and an empty value
    replaced by the default; a non-empty value is never touched.
    """
    rows = {row.key: row for row in existing}
    updates: list[SettingUpdate] = []
    for definition in SETTING_DEFINITIONS:
        default_value = definition.value
        if tenant_id != PRIMARY_TENANT_ID:
            if definition.key in STRICT_KEYS:
                default_value = strict_fallback(
                    definition.key, tenant_id, site_name_placeholder
                )
            elif global_values and global_values.get(definition.key):
                default_value = global_values[definition.key] or ""
        row = rows.get(definition.key)
        if row is None:
            updates.append(
                SettingUpdate(
                    key=definition.key,
                    value=default_value,
                    name=definition.name,
                    description=definition.description,
                    type=definition.type.value,
                )
            )
            continue
        needs_value = not row.value and bool(default_value)
        needs_meta = not row.name or not row.description or not row.type
        if needs_value or needs_meta:
            updates.append(
                SettingUpdate(
                    key=definition.key,
                    value=default_value if needs_value else row.value,
                    name=None if row.name else definition.name,
                    description=None if row.description else definition.description,
                    type=None if row.type else definition.type.value,
                )
            )
    return updates
