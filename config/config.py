import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

from models.suggestion import DEFAULT_SUGGESTION_GROUP_NAME


class PageOpenBehavior(str, Enum):
    """How a search page URL is opened."""
    SAME_TAB = "sameTab"
    NEW_TAB = "newTab"


class QueryPathBehavior(str, Enum):
    """Where the query text goes in the search page URL."""
    QUERY_PARAMETER = "queryParam"
    URL_FRAGMENT = "urlFragment"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class EngineSettings:
    """
    Options recognized by SearchBoxEngine.

    Attributes:
        enable_suggestions: Query suggestions on/off
        enable_enhancement: Send submitted queries through the enhancement service
        minimum_trigger_length: Minimum term length before providers are asked
        debounce_window_ms: Quiet window before a keystroke triggers a fetch
        search_in_new_page: Route submitted queries to page_url instead of on_search
        page_url: Destination search page
        query_string_parameter: Query-string parameter name (query parameter mode)
        open_behavior: sameTab or newTab
        query_path_behavior: queryParam or urlFragment
        is_staging: Forwarded to the enhancement service
        provider_timeout_s: Per-provider call timeout
        default_group_name: Group for suggestions without a group name
        enable_debug_mode: Keep the last enhancement payload in state for diagnostic display
    """

    enable_suggestions: bool = True
    enable_enhancement: bool = False
    minimum_trigger_length: int = 2
    debounce_window_ms: int = 200
    search_in_new_page: bool = False
    page_url: str = ""
    query_string_parameter: str = "q"
    open_behavior: PageOpenBehavior = PageOpenBehavior.SAME_TAB
    query_path_behavior: QueryPathBehavior = QueryPathBehavior.QUERY_PARAMETER
    is_staging: bool = False
    provider_timeout_s: float = 10.0
    default_group_name: str = DEFAULT_SUGGESTION_GROUP_NAME
    enable_debug_mode: bool = False

    def __post_init__(self):
        if self.minimum_trigger_length < 1:
            raise ValueError("minimum_trigger_length must be >= 1")
        if self.debounce_window_ms < 0:
            raise ValueError("debounce_window_ms must be >= 0")
        if self.search_in_new_page and not self.page_url:
            raise ValueError("page_url is required when search_in_new_page is enabled")
        # Accept raw strings coming from env files / API payloads
        object.__setattr__(self, "open_behavior", PageOpenBehavior(self.open_behavior))
        object.__setattr__(self, "query_path_behavior", QueryPathBehavior(self.query_path_behavior))

    @property
    def debounce_window_s(self) -> float:
        return self.debounce_window_ms / 1000.0


class Config:
    """Configuration management for the application."""

    def __init__(self):
        """Initialize configuration with environment variables."""
        env_path = Path(__file__).parent.parent / ".env"
        if env_path.exists():
            load_dotenv(dotenv_path=env_path)

        # Suggestions
        self.ENABLE_QUERY_SUGGESTIONS = _env_bool("ENABLE_QUERY_SUGGESTIONS", True)
        self.SUGGESTION_MIN_TRIGGER_LENGTH = int(os.getenv("SUGGESTION_MIN_TRIGGER_LENGTH", "2"))
        self.SUGGESTION_DEBOUNCE_MS = int(os.getenv("SUGGESTION_DEBOUNCE_MS", "200"))
        self.PROVIDER_TIMEOUT_S = float(os.getenv("PROVIDER_TIMEOUT_S", "10"))
        self.DEFAULT_SUGGESTION_GROUP_NAME = os.getenv(
            "DEFAULT_SUGGESTION_GROUP_NAME", DEFAULT_SUGGESTION_GROUP_NAME
        )
        self.SUGGESTION_PROVIDERS_FILE = os.getenv(
            "SUGGESTION_PROVIDERS_FILE",
            str(Path(__file__).resolve().parent / "suggestion_providers.yaml"),
        )

        # Query enhancement
        self.ENABLE_QUERY_ENHANCEMENT = _env_bool("ENABLE_QUERY_ENHANCEMENT", False)
        self.ENHANCEMENT_SERVICE_URL = os.getenv("ENHANCEMENT_SERVICE_URL", "")
        self.ENHANCEMENT_API_KEY = os.getenv("ENHANCEMENT_API_KEY")
        self.ENHANCEMENT_TIMEOUT_S = float(os.getenv("ENHANCEMENT_TIMEOUT_S", "5"))
        self.IS_STAGING = _env_bool("IS_STAGING", False)
        self.ENABLE_DEBUG_MODE = _env_bool("ENABLE_DEBUG_MODE", False)

        # Search page routing
        self.SEARCH_IN_NEW_PAGE = _env_bool("SEARCH_IN_NEW_PAGE", False)
        self.SEARCH_PAGE_URL = os.getenv("SEARCH_PAGE_URL", "")
        self.QUERY_STRING_PARAMETER = os.getenv("QUERY_STRING_PARAMETER", "q")
        self.OPEN_BEHAVIOR = os.getenv("OPEN_BEHAVIOR", PageOpenBehavior.SAME_TAB.value)
        self.QUERY_PATH_BEHAVIOR = os.getenv(
            "QUERY_PATH_BEHAVIOR", QueryPathBehavior.QUERY_PARAMETER.value
        )

    def validate(self) -> bool:
        """
        Validate that the configuration can build engine settings.

        Returns:
            bool: True if configuration is valid, False otherwise
        """
        valid_open = {e.value for e in PageOpenBehavior}
        if self.OPEN_BEHAVIOR not in valid_open:
            print(f"Error: Unknown OPEN_BEHAVIOR '{self.OPEN_BEHAVIOR}'. Must be one of: {', '.join(sorted(valid_open))}")
            return False

        valid_path = {e.value for e in QueryPathBehavior}
        if self.QUERY_PATH_BEHAVIOR not in valid_path:
            print(f"Error: Unknown QUERY_PATH_BEHAVIOR '{self.QUERY_PATH_BEHAVIOR}'. Must be one of: {', '.join(sorted(valid_path))}")
            return False

        if self.SEARCH_IN_NEW_PAGE and not self.SEARCH_PAGE_URL:
            print("Error: SEARCH_PAGE_URL is not set but SEARCH_IN_NEW_PAGE is enabled.")
            return False

        if self.ENABLE_QUERY_ENHANCEMENT and not self.ENHANCEMENT_SERVICE_URL:
            print("Error: ENHANCEMENT_SERVICE_URL is not set but ENABLE_QUERY_ENHANCEMENT is enabled.")
            return False

        if self.SUGGESTION_MIN_TRIGGER_LENGTH < 1:
            print("Error: SUGGESTION_MIN_TRIGGER_LENGTH must be at least 1.")
            return False

        return True

    def engine_settings(self) -> EngineSettings:
        """
        Build engine settings from the loaded environment.

        Returns:
            EngineSettings
        """
        return EngineSettings(
            enable_suggestions=self.ENABLE_QUERY_SUGGESTIONS,
            enable_enhancement=self.ENABLE_QUERY_ENHANCEMENT,
            minimum_trigger_length=self.SUGGESTION_MIN_TRIGGER_LENGTH,
            debounce_window_ms=self.SUGGESTION_DEBOUNCE_MS,
            search_in_new_page=self.SEARCH_IN_NEW_PAGE,
            page_url=self.SEARCH_PAGE_URL,
            query_string_parameter=self.QUERY_STRING_PARAMETER,
            open_behavior=PageOpenBehavior(self.OPEN_BEHAVIOR),
            query_path_behavior=QueryPathBehavior(self.QUERY_PATH_BEHAVIOR),
            is_staging=self.IS_STAGING,
            provider_timeout_s=self.PROVIDER_TIMEOUT_S,
            default_group_name=self.DEFAULT_SUGGESTION_GROUP_NAME,
            enable_debug_mode=self.ENABLE_DEBUG_MODE,
        )
