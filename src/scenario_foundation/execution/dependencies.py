"""
Dependency Graph

A test may declare prerequisite tests. A prerequisite is written as
``<class>.<method>``, where the class part may use the markers ``${class}``
(the step class of the running test) and ``${package}`` (its package):

    "${class}.test01_Login"                      same step class
    "${package}.StepA01_Setup.test02_Create"     another step of the same package
    "acme.common.StepZ_Data.test01_Load"         fully qualified

A test runs only if every prerequisite already passed in this run. Because
steps run in declaration order, a prerequisite can only name a test that ran
earlier; anything that failed, was skipped or did not run yet is unsatisfied.
"""

import logging
from typing import Dict, Iterable, Optional, Tuple

from attr import attrs, attrib

from ..common.constants import CLASS_TOKEN, PACKAGE_TOKEN
from ..common.errors import InvalidArgumentError
from .models import TestId, TestOutcome

logger = logging.getLogger(__name__)

OutcomeKey = Tuple[str, str]


def resolve_dependency(token: str, running: TestId) -> OutcomeKey:
    """
    Resolve a dependency token against the running test.

    Args:
        token: ``<class>.<method>`` with optional ``${class}``/``${package}`` markers
        running: Identity of the test declaring the dependency

    Returns:
        The (step class, method) key of the prerequisite

    Raises:
        InvalidArgumentError: If the token has no method part
    """
    resolved = token.strip().replace(CLASS_TOKEN, running.step_class).replace(PACKAGE_TOKEN, running.package)
    step_class, _, method = resolved.rpartition('.')
    if not step_class or not method:
        raise InvalidArgumentError(
            f"Dependency '{token}' must be of the form <class>.<method>", argument="dependencies"
        )
    return step_class, method


@attrs(slots=False)
class OutcomeRegistry:
    """
    Per-run map of test outcomes keyed by (step class, method).

    Example:
        >>> outcomes = OutcomeRegistry()
        >>> outcomes.record(test_id, TestOutcome.PASSED)
        >>> outcomes.get(test_id.key)
        <TestOutcome.PASSED: 'passed'>
    """
    _outcomes: Dict[OutcomeKey, TestOutcome] = attrib(factory=dict, init=False)

    def record(self, test_id: TestId, outcome: TestOutcome):
        self._outcomes[test_id.key] = outcome

    def get(self, key: OutcomeKey) -> Optional[TestOutcome]:
        return self._outcomes.get(key)

    def outcome_of(self, test_id: TestId) -> Optional[TestOutcome]:
        return self._outcomes.get(test_id.key)

    def items(self):
        return self._outcomes.items()

    def __len__(self):
        return len(self._outcomes)

    def clear(self):
        self._outcomes.clear()


@attrs(slots=False)
class DependencyResolver:
    """
    Decides whether the prerequisites of a test are satisfied.

    The running test is always passed in explicitly; the resolver never
    guesses it from the call stack.
    """
    outcomes: OutcomeRegistry = attrib(factory=OutcomeRegistry)

    def is_satisfied(self, token: str, running: TestId) -> bool:
        return self.first_unsatisfied(running, [token]) is None

    def first_unsatisfied(self, running: TestId, dependencies: Iterable[str]) -> Optional[str]:
        """
        Return the first prerequisite that did not pass, None when all passed.

        The returned value is the resolved ``<class>.<method>`` name, or the
        token itself when it does not name a test.
        """
        for token in dependencies:
            try:
                step_class, method = resolve_dependency(token, running)
            except InvalidArgumentError as e:
                logger.warning(f"{running} declares an invalid dependency: {e}")
                return token
            outcome = self.outcomes.get((step_class, method))
            if outcome is not TestOutcome.PASSED:
                logger.debug(
                    f"[DependencyResolver.first_unsatisfied] {running} requires "
                    f"{step_class}.{method} which is {outcome.value if outcome else 'not run'}"
                )
                return f"{step_class}.{method}"
        return None
