"""
ui_actions.py: routing UI actions for Selenium tests through a HandlerChain.

A UIRequest names an action ("click", "type", "hover", ...) and a locator.
The chain hands the request to the first handler supporting that action:
ClickHandler -> TypeTextHandler -> HoverHandler.

The selected handler waits for the element, performs the action, and
optionally validates a post-condition. Selenium errors are turned into a
failed UIResult so the outcome is easy to assert in tests. An action that no
handler supports stays unhandled.
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from selenium.common.exceptions import WebDriverException
from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from handler_chain.dispatch import Handler, HandlerChain

__all__ = [
    "UIRequest",
    "UIResult",
    "UIActionHandler",
    "ClickHandler",
    "TypeTextHandler",
    "HoverHandler",
    "build_ui_action_chain",
]


# ---------- Data Models ----------
@dataclass(frozen=True, slots=True)
class UIRequest:
    """
    Encapsulates the input for a UI action.

    :param driver: Selenium WebDriver instance used to interact with the page.
    :param by: Locator strategy as string (e.g., By.CSS_SELECTOR -> a string constant).
    :param value: Locator value corresponding to the strategy.
    :param action: Logical action to perform ("click", "type", "hover").
    :param params: Extra parameters (timeouts, text to type, validation locator).
                   Read-only mapping; defaults to an empty immutable mapping.
    """
    driver: WebDriver
    by: str
    value: str
    action: str = "click"
    params: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(slots=True)
class UIResult:
    """
    Represents the outcome of a UI action.

    :param success: Whether the action (and validation, if requested) succeeded.
    :param message: Short human-readable description of the outcome.
    :param data: Optional additional payload (e.g., diagnostics).
    """
    success: bool
    message: str = ""
    data: Optional[Any] = None


# ---------- Handler Base ----------
class UIActionHandler(Handler):
    """
    Base handler for one UI action.

    Parameters (via `request.params`):
      - timeout_present (int): Max seconds to wait for DOM presence (default: 8).
      - timeout_visible (int): Max seconds to wait for visibility (default: 8).
      - validate_locator (tuple[str, str]): Locator (by, value) expected after the action.
      - timeout_validate (int): Max seconds to wait for validation (default: 6).
    """

    action: str = ""

    def can_handle(self, request: UIRequest) -> bool:
        return request.action == self.action

    def process(self, request: UIRequest) -> UIResult:
        """
        Waits for presence and visibility, performs the action, then validates.

        :param request: UIRequest containing driver, locator and params.
        :return: UIResult describing the first failing step, or success.
        """
        timeout = int(request.params.get("timeout_present", 8))
        try:
            WebDriverWait(request.driver, timeout).until(
                EC.presence_of_element_located((request.by, request.value))
            )
        except WebDriverException:
            return UIResult(False, f"Element not present: ({request.by}, {request.value})")

        timeout = int(request.params.get("timeout_visible", 8))
        try:
            el = WebDriverWait(request.driver, timeout).until(
                EC.visibility_of_element_located((request.by, request.value))
            )
        except WebDriverException:
            return UIResult(False, f"Element not visible: ({request.by}, {request.value})")

        try:
            self.perform(request, el)
        except WebDriverException:
            return UIResult(False, f"{self.action.capitalize()} failed")

        return self._validate(request)

    @abstractmethod
    def perform(self, request: UIRequest, element: WebElement) -> None:
        """
        Executes the action on a visible element.

        :param request: The UI request being processed.
        :param element: The located element.
        """
        raise NotImplementedError

    def _validate(self, request: UIRequest) -> UIResult:
        validate = request.params.get("validate_locator")
        if not validate:
            return UIResult(True, f"{self.action.capitalize()} done")
        by2, val2 = validate
        timeout = int(request.params.get("timeout_validate", 6))
        try:
            WebDriverWait(request.driver, timeout).until(
                EC.visibility_of_element_located((by2, val2))
            )
            return UIResult(True, "Validation passed")
        except WebDriverException:
            return UIResult(False, f"Validation not met: ({by2}, {val2})")


# ---------- Concrete Handlers ----------
class ClickHandler(UIActionHandler):
    """Clicks the element."""

    action = "click"

    def perform(self, request: UIRequest, element: WebElement) -> None:
        element.click()


class TypeTextHandler(UIActionHandler):
    """
    Types text into the element.

    Parameters (via `request.params`):
      - text (str): Text to send (default: "").
      - clear (bool): Clear the field first (default: True).
    """

    action = "type"

    def perform(self, request: UIRequest, element: WebElement) -> None:
        if request.params.get("clear", True):
            element.clear()
        element.send_keys(str(request.params.get("text", "")))


class HoverHandler(UIActionHandler):
    """Moves the pointer over the element."""

    action = "hover"

    def perform(self, request: UIRequest, element: WebElement) -> None:
        ActionChains(request.driver).move_to_element(element).perform()


# ---------- Builder ----------
def build_ui_action_chain() -> HandlerChain:
    """
    Builds the UI action chain: ClickHandler -> TypeTextHandler -> HoverHandler.

    :return: The chain; dispatch a UIRequest and check `outcome.handled`.
    """
    return HandlerChain([ClickHandler(), TypeTextHandler(), HoverHandler()], name="ui-actions")
