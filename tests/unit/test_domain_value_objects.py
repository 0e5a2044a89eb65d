"""Tests for domain value objects (SiteDomain, BranchName, slugify_domain, strip_port)."""

import pytest

from app.domain.value_objects.core import (
    BranchName,
    SiteDomain,
    slugify_domain,
    strip_port,
)


class TestSlugifyDomain:
    """Dots and other separators become single hyphens; empty input is 'site'."""

    def test_domain_becomes_hyphenated_slug(self) -> None:
        assert slugify_domain("Foo.Example.com") == "foo-example-com"

    def test_runs_of_separators_collapse(self) -> None:
        assert slugify_domain("my..shop__site.com") == "my-shop-site-com"

    def test_leading_and_trailing_separators_trimmed(self) -> None:
        assert slugify_domain(".shop.com.") == "shop-com"

    def test_empty_and_symbol_only_fall_back_to_site(self) -> None:
        assert slugify_domain("") == "site"
        assert slugify_domain("...") == "site"
        assert slugify_domain("!!!") == "site"

    def test_cut_to_63_characters_without_trailing_hyphen(self) -> None:
        slug = slugify_domain("a" * 62 + ".bcd")
        assert len(slug) <= 63
        assert not slug.endswith("-")
        assert slug == "a" * 62


class TestStripPort:
    def test_port_removed(self) -> None:
        assert strip_port("foo.example.com:8080") == "foo.example.com"

    def test_host_without_port_unchanged(self) -> None:
        assert strip_port("foo.example.com") == "foo.example.com"

    def test_bracketed_ipv6_keeps_address(self) -> None:
        assert strip_port("[::1]:8080") == "::1"
        assert strip_port("[2001:db8::5]") == "2001:db8::5"

    def test_bare_ipv6_unchanged(self) -> None:
        assert strip_port("2001:db8::5") == "2001:db8::5"


class TestSiteDomain:
    """SiteDomain: trimmed, non-empty, no scheme or whitespace."""

    def test_value_is_trimmed(self) -> None:
        assert SiteDomain("  foo.example.com ").value == "foo.example.com"

    def test_slug(self) -> None:
        assert SiteDomain("Foo.Example.com").slug() == "foo-example-com"

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-empty"):
            SiteDomain("   ")

    def test_scheme_rejected(self) -> None:
        with pytest.raises(ValueError, match="bare host"):
            SiteDomain("https://foo.example.com")

    def test_inner_whitespace_rejected(self) -> None:
        with pytest.raises(ValueError, match="bare host"):
            SiteDomain("foo example.com")

    def test_too_long_rejected(self) -> None:
        with pytest.raises(ValueError, match="253"):
            SiteDomain("a" * 254)


class TestBranchName:
    def test_deterministic_name(self) -> None:
        assert BranchName(5).value == "tenant-5"
        assert str(BranchName(42)) == "tenant-42"

    def test_primary_tenant_has_no_branch(self) -> None:
        with pytest.raises(ValueError, match="id > 0"):
            BranchName(0)
