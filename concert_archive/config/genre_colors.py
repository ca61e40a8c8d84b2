"""Genre colour palette shared with the website.

# ─── PURPOSE ───────────────────────────────────────────────────────────
#
# Deep jewel tones at 35-45% lightness, 65-80% saturation.  The website
# keeps an identical table in its front-end constants; when a new genre is
# added to the spreadsheet it must be added in both places, or the
# ``validate`` CLI reports it as ``missing_color``.
#
# Extra or overriding entries can be supplied under ``genre_colors`` in
# config/config.yaml without editing this file.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

GENRE_COLORS: dict[str, str] = {
    "New Wave": "#1e3a8a",
    "Punk": "#991b1b",
    "Alternative": "#5b21b6",
    "Ska": "#b45309",
    "Indie Rock": "#1d4ed8",
    "Electronic": "#0e7490",
    "Pop Rock": "#c2410c",
    "Pop Punk": "#be185d",
    "Classic Rock": "#78350f",
    "Jazz": "#312e81",
    "Reggae": "#166534",
    "Metal": "#1f2937",
    "Hip Hop": "#9a3412",
    "R&B/Soul": "#4c1d95",
    "Folk/Country": "#713f12",
    "Funk": "#a16207",
    "Blues": "#1e40af",
    "World": "#115e59",
    "Experimental": "#7c3aed",
    "Other": "#4b5563",
}
