"""
User agent classification.

Ordered (pattern -> classification) rules, evaluated first-match-wins on the
lowercased user agent string.

Precedence:
- Browser: Edge, Chrome, Firefox, Safari
- Device: mobile, tablet, desktop
- OS: Windows, macOS, Linux, Android, iOS

Edge and Opera user agents also carry "chrome/" and "safari/" tokens, and
Chrome carries "safari/", so the order is significant. Android user agents
contain "linux" and iPhone user agents contain "mac os", which means they
resolve to Linux and macOS respectively; existing stored traffic was
classified that way.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .models import DeviceInfo, DeviceType


@dataclass(frozen=True)
class BrowserRule:
    """Browser rule: any marker matches, version read from version_pattern."""

    name: str
    markers: tuple[str, ...]
    version_pattern: re.Pattern[str]


@dataclass(frozen=True)
class Rule:
    """Classification rule: matches when any marker is a substring."""

    value: str
    markers: tuple[str, ...]


BROWSER_RULES: tuple[BrowserRule, ...] = (
    BrowserRule("Edge", ("edg",), re.compile(r"edg/(\d+)")),
    BrowserRule("Chrome", ("chrome",), re.compile(r"chrome/(\d+)")),
    BrowserRule("Firefox", ("firefox",), re.compile(r"firefox/(\d+)")),
    BrowserRule("Safari", ("safari",), re.compile(r"version/(\d+)")),
)

DEVICE_RULES: tuple[Rule, ...] = (
    Rule("mobile", ("mobile", "android", "iphone")),
    Rule("tablet", ("tablet", "ipad")),
)
DEFAULT_DEVICE: DeviceType = "desktop"

OS_RULES: tuple[Rule, ...] = (
    Rule("Windows", ("windows",)),
    Rule("macOS", ("mac os", "macos")),
    Rule("Linux", ("linux",)),
    Rule("Android", ("android",)),
    Rule("iOS", ("ios", "iphone", "ipad")),
)

UNKNOWN = "Unknown"


def _first_match(ua: str, rules: tuple[Rule, ...]) -> str | None:
    for rule in rules:
        if any(marker in ua for marker in rule.markers):
            return rule.value
    return None


def detect_browser(ua: str) -> tuple[str, str]:
    """Return (browser_name, major_version) for a lowercased user agent."""
    for rule in BROWSER_RULES:
        if any(marker in ua for marker in rule.markers):
            match = rule.version_pattern.search(ua)
            return rule.name, match.group(1) if match else ""
    return UNKNOWN, ""


def detect_device(ua: str) -> DeviceType:
    """Return the device type for a lowercased user agent."""
    value = _first_match(ua, DEVICE_RULES)
    if value == "mobile":
        return "mobile"
    if value == "tablet":
        return "tablet"
    return DEFAULT_DEVICE


def detect_os(ua: str) -> str:
    """Return the operating system for a lowercased user agent."""
    return _first_match(ua, OS_RULES) or UNKNOWN


def parse_user_agent(user_agent: str | None) -> DeviceInfo:
    """
    Classify a raw user agent string.

    An empty user agent yields deviceType "unknown"; anything else falls
    through to "desktop" when no device marker matches.
    """
    if not user_agent:
        return DeviceInfo()

    ua = user_agent.lower()
    browser_name, browser_version = detect_browser(ua)

    return DeviceInfo(
        browser_name=browser_name,
        browser_version=browser_version,
        device_type=detect_device(ua),
        operating_system=detect_os(ua),
    )
