"""
Element Locators

A locator describes how to find elements in the page: a strategy and a
strategy-specific value. Strategy values are the Selenium ``By`` strings so a
locator can be handed to any WebDriver-compatible driver unchanged.
"""

from enum import Enum
from typing import List, Sequence, Union

from pydantic import BaseModel, field_validator
from selenium.webdriver.common.by import By


class LocatorStrategy(str, Enum):
    """
    Element location strategies.

    Values match ``selenium.webdriver.common.by.By``:

    - ID: The element ``id`` attribute. Value: 'id'
    - NAME: The element ``name`` attribute. Value: 'name'
    - XPATH: XPath expression. Value: 'xpath'
    - CSS: CSS selector. Value: 'css selector'
    - CLASS_NAME: A single class of the element. Value: 'class name'
    - TAG_NAME: The element tag. Value: 'tag name'
    - LINK_TEXT: Exact text of a link. Value: 'link text'
    - PARTIAL_LINK_TEXT: Part of the text of a link. Value: 'partial link text'
    """
    ID = By.ID
    NAME = By.NAME
    XPATH = By.XPATH
    CSS = By.CSS_SELECTOR
    CLASS_NAME = By.CLASS_NAME
    TAG_NAME = By.TAG_NAME
    LINK_TEXT = By.LINK_TEXT
    PARTIAL_LINK_TEXT = By.PARTIAL_LINK_TEXT


class Locator(BaseModel):
    """
    Specification for locating page elements.

    Locators are immutable and hashable, so they can be used as keys and
    compared in tests.

    Attributes:
        strategy: How to interpret the value
        value: Strategy-specific value (element id, XPath expression, CSS selector...)

    Example:
        >>> str(Locator.css(".busy"))
        'css selector=.busy'
        >>> Locator.xpath("//button") == Locator(strategy="xpath", value="//button")
        True
    """
    strategy: LocatorStrategy
    value: str

    class Config:
        frozen = True

    @field_validator('strategy', mode='before')
    @classmethod
    def normalize_strategy(cls, v):
        """Accept the short 'css' spelling and enum names."""
        if isinstance(v, str) and not isinstance(v, LocatorStrategy):
            text = v.strip()
            if text.lower() == 'css':
                return LocatorStrategy.CSS
            if text.upper() in LocatorStrategy.__members__:
                return LocatorStrategy[text.upper()]
        return v

    @field_validator('value')
    @classmethod
    def value_must_not_be_empty(cls, v):
        if not v or not v.strip():
            raise ValueError("Locator value must not be empty")
        return v

    def __str__(self) -> str:
        return f"{self.strategy.value}={self.value}"

    # region constructors
    @classmethod
    def id(cls, value: str) -> "Locator":
        return cls(strategy=LocatorStrategy.ID, value=value)

    @classmethod
    def xpath(cls, value: str) -> "Locator":
        return cls(strategy=LocatorStrategy.XPATH, value=value)

    @classmethod
    def css(cls, value: str) -> "Locator":
        return cls(strategy=LocatorStrategy.CSS, value=value)

    @classmethod
    def name_of(cls, value: str) -> "Locator":
        return cls(strategy=LocatorStrategy.NAME, value=value)
    # endregion


LocatorLike = Union[Locator, str]


def to_locator(locator: LocatorLike) -> Locator:
    """Coerce a locator; plain strings starting with '/' or '(' are XPath, others CSS."""
    if isinstance(locator, Locator):
        return locator
    if locator.startswith(('/', '(')):
        return Locator.xpath(locator)
    return Locator.css(locator)


def describe_locators(locators: Sequence[Locator]) -> str:
    return ", ".join(f"'{locator}'" for locator in locators)


# Elements conventionally marking a page or a dialog as still loading.
# Whole class names only: 'not-busy' or 'skeleton-loaded' do not match.
DEFAULT_BUSY_INDICATORS: List[Locator] = [
    Locator.css("[class~='busy']"),
    Locator.css("[class~='skeleton']"),
    Locator.css("[aria-busy='true']"),
]
