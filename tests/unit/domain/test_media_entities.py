"""Tests for the search pipeline value objects."""

from __future__ import annotations

import pytest

from ezstremio.domain.entities.media import (
    Candidate,
    RankedResult,
    StreamDescriptor,
    TitleContext,
)


class TestTitleContext:
    def test_names_single_when_original_equal(self) -> None:
        ctx = TitleContext(name="Wicked", original_name="Wicked")
        assert ctx.names == ("Wicked",)

    def test_names_single_when_original_empty(self) -> None:
        assert TitleContext(name="Wicked").names == ("Wicked",)

    def test_names_localized_first(self) -> None:
        ctx = TitleContext(name="Sám doma", original_name="Home Alone")
        assert ctx.names == ("Sám doma", "Home Alone")

    def test_episode_suffix(self) -> None:
        ctx = TitleContext(name="Dark", season=1, episode=5)
        assert ctx.episode_suffix == " S01E05"

    def test_episode_suffix_two_digit(self) -> None:
        ctx = TitleContext(name="Dark", season=12, episode=104)
        assert ctx.episode_suffix == " S12E104"

    def test_episode_suffix_requires_both(self) -> None:
        assert TitleContext(name="Dark", season=1).episode_suffix == ""
        assert TitleContext(name="Dark", episode=1).episode_suffix == ""

    def test_frozen(self) -> None:
        ctx = TitleContext(name="Wicked")
        with pytest.raises(AttributeError):
            ctx.name = "Other"  # type: ignore[misc]


class TestStreamDescriptor:
    def test_defaults(self) -> None:
        d = StreamDescriptor(label="720p", address="https://cdn/x.mp4")
        assert d.source_resolution is None
        assert d.origin_title == ""
        assert d.origin_size == ""
        assert d.origin_duration == ""

    def test_with_origin_copies_display_fields(
        self, descriptor: StreamDescriptor, candidate: Candidate
    ) -> None:
        merged = descriptor.with_origin(candidate)
        assert merged.origin_title == "Wicked 2024 CZ dabing"
        assert merged.origin_size == "5.2 GB"
        assert merged.origin_duration == "02:40:12"
        assert merged.label == descriptor.label
        assert merged.address == descriptor.address
        assert merged.source_resolution == descriptor.source_resolution

    def test_with_origin_leaves_original_untouched(
        self, descriptor: StreamDescriptor, candidate: Candidate
    ) -> None:
        descriptor.with_origin(candidate)
        assert descriptor.origin_title == ""


class TestRankedResult:
    def test_frozen(self) -> None:
        r = RankedResult(name="n", description="d", url="u")
        with pytest.raises(AttributeError):
            r.url = "other"  # type: ignore[misc]
