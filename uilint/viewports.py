"""
Viewport presets and the viewport token grammar.

A viewport selection is a list of tokens, each one of:

    desktop              a group name (case-insensitive) → its presets, in order
    macbook-air          a preset name
    kiosk=1080x1920      an ad hoc size with its own name

Expansion removes duplicates by name; the first occurrence wins.

Presets and groups can be extended from uilint.yaml:

    viewports:
      kiosk: {width: 1080, height: 1920}
    viewport_groups:
      portrait: [iphone, kiosk]

Every member of a config group must name a preset; a typo is a ValueError
when the config loads.
"""
from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class Viewport:
    name:   str
    width:  int
    height: int

    @property
    def size(self) -> dict:
        return {"width": self.width, "height": self.height}


DEFAULT_VIEWPORTS = {
    "iphone":      (390, 844),
    "ipad":        (834, 1112),
    "macbook-air": (1280, 832),
    "macbook-pro": (1440, 900),
    "wide":        (1600, 900),
    "ultra-wide":  (1920, 1080),
    "screen-4k":   (2560, 1440),
}

DEFAULT_VIEWPORT_ORDER = [
    "iphone", "ipad", "macbook-air", "macbook-pro", "wide", "ultra-wide", "screen-4k",
]

DEFAULT_VIEWPORT_GROUPS = {
    "mobile":  ["iphone"],
    "tablet":  ["ipad"],
    "desktop": ["macbook-air", "macbook-pro", "wide", "ultra-wide", "screen-4k"],
}

_SIZE_RE   = re.compile(r"^(\d+)x(\d+)$", re.IGNORECASE)
_CUSTOM_RE = re.compile(r"^(?P<name>[a-z0-9-]+)=(?P<dims>\d+x\d+)$", re.IGNORECASE)


def parse_size(text: str) -> "tuple[int, int] | None":
    """'1280x800' → (1280, 800); None when malformed."""
    m = _SIZE_RE.match(text.strip())
    if not m:
        return None
    return int(m.group(1)), int(m.group(2))


def parse_viewport_override(text: str) -> Viewport:
    """--viewport WIDTHxHEIGHT → a single viewport named "custom"."""
    size = parse_size(text or "")
    if size is None:
        raise ValueError(f"Unable to parse --viewport value {text!r}. Expected WIDTHxHEIGHT.")
    return Viewport("custom", *size)


class ViewportCatalog:
    """Presets and groups, defaults merged with config additions."""

    def __init__(self, viewports: "dict | None" = None, groups: "dict | None" = None):
        self.presets = {name: Viewport(name, w, h) for name, (w, h) in DEFAULT_VIEWPORTS.items()}
        custom = []
        for name, size in (viewports or {}).items():
            self.presets[name] = Viewport(name, int(size["width"]), int(size["height"]))
            custom.append(name)

        self.groups = {k: list(v) for k, v in DEFAULT_VIEWPORT_GROUPS.items()}
        for group, members in (groups or {}).items():
            if isinstance(members, str) or not isinstance(members, (list, tuple)):
                raise ValueError(f"Viewport group {group!r} must be a list of preset names.")
            unknown = [m for m in members if m not in self.presets]
            if unknown:
                raise ValueError(
                    f"Viewport group {group!r} names unknown preset(s): {', '.join(map(str, unknown))}"
                )
            self.groups[group.lower()] = list(members)

        order = list(DEFAULT_VIEWPORT_ORDER)
        order.extend(n for n in custom if n not in order)
        self.default_order = [n for n in order if n in self.presets]

    @classmethod
    def from_config(cls, cfg: dict) -> "ViewportCatalog":
        return cls(cfg.get("viewports"), cfg.get("viewport_groups"))

    def defaults(self) -> "list[Viewport]":
        return [self.presets[n] for n in self.default_order]

    def parse_token(self, token: str) -> "list[Viewport]":
        text = token.strip()
        if not text:
            return []
        lower = text.lower()
        if lower in self.groups:
            return [self.presets[n] for n in self.groups[lower] if n in self.presets]

        m = _CUSTOM_RE.match(text)
        if m:
            size = parse_size(m.group("dims"))
            if size is None:
                raise ValueError(f"Unable to parse viewport token {token!r}.")
            return [Viewport(m.group("name"), *size)]

        if text in self.presets:
            return [self.presets[text]]
        raise ValueError(
            f"Unknown viewport token {token!r}. Use preset names, groups "
            f"({'/'.join(self.groups)}), or name=WIDTHxHEIGHT."
        )

    def resolve(
        self,
        tokens: "list[str] | None" = None,
        override: "Viewport | None" = None,
    ) -> "list[Viewport]":
        """
        Expand tokens into viewports.

        An override wins outright; no tokens means every preset in default
        order.  Raises ValueError for unknown tokens or an empty result.
        """
        if override is not None:
            return [override]
        if not tokens:
            return self.defaults()

        expanded = []
        for token in tokens:
            expanded.extend(self.parse_token(token))
        result = dedupe_viewports(expanded)
        if not result:
            raise ValueError("Viewport selection resolved to an empty list.")
        return result


def dedupe_viewports(items: "list[Viewport]") -> "list[Viewport]":
    seen = set()
    out = []
    for vp in items:
        if vp.name in seen:
            continue
        seen.add(vp.name)
        out.append(vp)
    return out


def split_tokens(text: "str | None") -> "list[str] | None":
    """'mobile, desktop' → ['mobile', 'desktop']; None/blank → None."""
    if not text:
        return None
    tokens = [t.strip() for t in text.split(",") if t.strip()]
    return tokens or None
