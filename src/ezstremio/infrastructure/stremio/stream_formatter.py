"""Compose display text for extracted streams.

Pure conversion functions, no I/O.  The ranking reads quality back out
of this text, so the layout below is load-bearing::

    name:        Prehraj.to ⚡ 1080p
    description: 📂 Wicked 2024 CZ dabing
                 💾 5.2 GB • ⏱️ 02:40:12
                 ⚙️ Source: 4K
"""

from __future__ import annotations

from ezstremio.domain.entities.media import RankedResult, StreamDescriptor

DEFAULT_SITE_LABEL = "Prehraj.to"


def summarize_resolution(raw: str) -> str:
    """Shorten a raw resolution hint such as ``"3840 x 2160 px"``."""
    if "3840" in raw or "2160" in raw:
        return "4K"
    if "1920" in raw or "1080" in raw:
        return "1080p"
    return raw


def format_result(
    descriptor: StreamDescriptor,
    *,
    site_label: str = DEFAULT_SITE_LABEL,
) -> RankedResult:
    """Build the display-ready result for a descriptor merged with its hit."""
    description = (
        f"📂 {descriptor.origin_title}\n"
        f"💾 {descriptor.origin_size} • ⏱️ {descriptor.origin_duration}"
    )
    if descriptor.source_resolution:
        description += f"\n⚙️ Source: {summarize_resolution(descriptor.source_resolution)}"

    return RankedResult(
        name=f"{site_label} ⚡ {descriptor.label}",
        description=description,
        url=descriptor.address,
    )
