"""
Shared constants of the scenario execution core.

Parameter names mirror the keys accepted by the run configuration loaders
(``ScenarioConfig.from_parameters``), so a properties-style parameter map
can be fed to the core unchanged.
"""

# =============================================================================
# Dependency token markers
# =============================================================================

# Replaced by the running test's fully qualified step class
CLASS_TOKEN = "${class}"
# Replaced by the running test's package
PACKAGE_TOKEN = "${package}"


# =============================================================================
# Defaults
# =============================================================================

DEFAULT_KNOWN_ISSUES_FILE = "known-issues.properties"
DEFAULT_RERUN_THRESHOLD = 2
DEFAULT_POLL_INTERVAL = 0.1

# Second-precision compact timestamp used by workaround records and logs
WORKAROUND_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
WORKAROUND_LOG_PREFIX = "WORKAROUND: "

KNOWN_ISSUE_NOTE = "This is a known issue and tracked by"


# =============================================================================
# Browser crash signatures
# =============================================================================

# Driver messages meaning the session is gone and must be re-acquired
BROWSER_CRASH_MESSAGES = (
    "Failed to connect to binary FirefoxBinary",
    "Failed to decode response from marionette",
    "Browsing context has been discarded",
    "Tried to run command without establishing a connection",
    "session deleted because of page crash",
    "no such session",
    "no such window",
    "target window already closed",
    "chrome not reachable",
    "browser did not respond",
)


def is_browser_crash(error: BaseException) -> bool:
    message = str(error)
    return any(signature in message for signature in BROWSER_CRASH_MESSAGES)
