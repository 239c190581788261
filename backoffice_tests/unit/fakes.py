"""
In-memory stand-ins for the slice of the Playwright page API the framework
uses, so waits and page objects can be exercised without a browser.

Selectors are matched literally: an element registered under "#code" is
found by page.locator("#code") and by page.locator("#code >> visible=true")
while it is visible. Waits re-check the in-memory state every few
milliseconds and raise Playwright's TimeoutError when it never matches.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError


VISIBLE_SUFFIX = " >> visible=true"
CLOSED_MESSAGE = "Target page, context or browser has been closed"
DEFAULT_TIMEOUT_MS = 30000


async def poll_state(page: "FakePage", condition: Callable[[], bool], timeout: Optional[float], what: str) -> None:
    timeout = DEFAULT_TIMEOUT_MS if timeout is None else timeout
    deadline = time.monotonic() + timeout / 1000
    while True:
        page.check_open()
        if condition():
            return
        if time.monotonic() >= deadline:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded while waiting for {what}")
        await asyncio.sleep(0.01)


@dataclass
class FakeElement:
    text: str = ""
    value: str = ""
    visible: bool = True
    enabled: bool = True
    checked: bool = False
    attached: bool = True
    stale: bool = False
    attrs: Dict[str, str] = field(default_factory=dict)
    transform: Optional[Callable[[str], str]] = None
    on_click: Optional[Callable[["FakeElement"], None]] = None
    clicks: int = 0
    keys: List[str] = field(default_factory=list)

    def guard(self) -> None:
        if self.stale or not self.attached:
            raise PlaywrightError("Element is not attached to the DOM")

    def set_value(self, value: str) -> None:
        self.value = self.transform(value) if self.transform else value


class FakeHandle:
    def __init__(self, page: "FakePage", element: FakeElement):
        self.page = page
        self.element = element

    def _in_state(self, state: str) -> bool:
        element = self.element
        if state == "hidden":
            return not element.attached or not element.visible
        if not element.attached:
            raise PlaywrightError("Element is not attached to the DOM")
        return {
            "visible": element.visible,
            "enabled": element.enabled,
            "disabled": not element.enabled,
            "checked": element.checked,
            "unchecked": not element.checked,
        }[state]

    async def wait_for_element_state(self, state: str, timeout: Optional[float] = None) -> None:
        if self.element.stale:
            self.page.check_open()
            raise PlaywrightError("Element handle is disposed")
        await poll_state(self.page, lambda: self._in_state(state), timeout, f"element to be {state}")


class FakeLocator:
    def __init__(
        self,
        page: "FakePage",
        selectors: Union[str, List[str]],
        first: bool = False,
        element: Optional[FakeElement] = None,
    ):
        self.page = page
        self.selectors = [selectors] if isinstance(selectors, str) else list(selectors)
        self._first = first
        self._element = element

    @property
    def selector(self) -> str:
        return " | ".join(self.selectors)

    def _matches(self) -> List[FakeElement]:
        self.page.check_open()
        if self._element is not None:
            return [self._element] if self._element.attached else []
        found: List[FakeElement] = []
        for selector in self.selectors:
            found.extend(e for e in self.page.find(selector) if all(e is not f for f in found))
        return found[:1] if self._first else found

    def _single(self) -> FakeElement:
        found = self._matches()
        if not found:
            raise PlaywrightError(f"No element matches selector {self.selector}")
        return found[0]

    def _in_state(self, state: str) -> bool:
        found = self._matches()
        return {
            "attached": bool(found),
            "detached": not found,
            "visible": bool(found) and found[0].visible,
            "hidden": not found or not found[0].visible,
        }[state]

    @property
    def first(self) -> "FakeLocator":
        return FakeLocator(self.page, self.selectors, first=True, element=self._element)

    def or_(self, other: "FakeLocator") -> "FakeLocator":
        return FakeLocator(self.page, self.selectors + other.selectors)

    async def wait_for(self, state: str = "visible", timeout: Optional[float] = None) -> None:
        await poll_state(self.page, lambda: self._in_state(state), timeout, f"{self.selector} to be {state}")

    async def count(self) -> int:
        return len(self._matches())

    async def all(self) -> List["FakeLocator"]:
        return [FakeLocator(self.page, self.selectors, element=e) for e in self._matches()]

    async def is_visible(self) -> bool:
        found = self._matches()
        return bool(found) and found[0].visible

    async def is_enabled(self) -> bool:
        return self._single().enabled

    async def is_checked(self) -> bool:
        return self._single().checked

    async def click(self) -> None:
        element = self._single()
        element.guard()
        element.clicks += 1
        if element.on_click:
            element.on_click(element)

    async def fill(self, value: str) -> None:
        self._single().set_value(value)

    async def press_sequentially(self, text: str) -> None:
        element = self._single()
        element.set_value(element.value + text)

    async def press(self, key: str) -> None:
        element = self._single()
        element.keys.append(key)
        if key in ("Delete", "Backspace"):
            element.value = ""

    async def evaluate(self, script: str):
        element = self._single()
        element.guard()
        if "click()" in script:
            await self.click()
        elif "value = ''" in script:
            element.value = ""
        return None

    async def get_attribute(self, name: str) -> Optional[str]:
        element = self._single()
        if name == "aria-checked":
            return "true" if element.checked else "false"
        return element.attrs.get(name)

    async def inner_text(self) -> str:
        element = self._single()
        element.guard()
        return element.text

    async def input_value(self) -> str:
        return self._single().value

    async def element_handle(self, timeout: Optional[float] = None) -> FakeHandle:
        await self.wait_for(state="attached", timeout=timeout)
        return FakeHandle(self.page, self._single())


class FakePage:
    def __init__(self, url: str = "about:blank"):
        self.url = url
        self.elements: Dict[str, List[FakeElement]] = {}
        self.redirects: Dict[str, str] = {}
        self.visited: List[str] = []
        self.reloads = 0
        self.closed = False

    def add(self, selector: str, element: Optional[FakeElement] = None, **kwargs) -> FakeElement:
        """Register an element under `selector` and return it."""
        element = element or FakeElement(**kwargs)
        self.elements.setdefault(selector, []).append(element)
        return element

    def find(self, selector: str) -> List[FakeElement]:
        visible_only = selector.endswith(VISIBLE_SUFFIX)
        if visible_only:
            selector = selector[: -len(VISIBLE_SUFFIX)]
        found = [e for e in self.elements.get(selector, []) if e.attached]
        return [e for e in found if e.visible] if visible_only else found

    def later(self, delay: float, callback: Callable[[], None]) -> None:
        """Run `callback` after `delay` seconds on the running loop."""
        asyncio.get_running_loop().call_later(delay, callback)

    def is_closed(self) -> bool:
        return self.closed

    def check_open(self) -> None:
        if self.closed:
            raise PlaywrightError(CLOSED_MESSAGE)

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    async def wait_for_url(
        self,
        url: Union[str, Callable[[str], bool]],
        timeout: Optional[float] = None,
        wait_until: Optional[str] = None,
    ) -> None:
        matches = url if callable(url) else (lambda current: current == url)
        await poll_state(self, lambda: matches(self.url), timeout, "URL")

    async def goto(self, url: str, wait_until: Optional[str] = None) -> None:
        self.check_open()
        self.visited.append(url)
        self.url = self.redirects.get(url, url)

    async def reload(self) -> None:
        self.check_open()
        self.reloads += 1

    async def screenshot(self, path: Optional[str] = None, full_page: bool = False) -> bytes:
        self.check_open()
        return b"\x89PNG fake"

    async def content(self) -> str:
        self.check_open()
        return "<html><body></body></html>"

