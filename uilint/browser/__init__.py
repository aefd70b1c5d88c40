"""
uilint.browser — Playwright-backed measurement and scenario runtime.

Requires the ``playwright`` package and an installed Chromium
(``playwright install chromium``).
"""
