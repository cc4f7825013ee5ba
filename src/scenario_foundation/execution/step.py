"""
Scenario Steps

A scenario is made of steps; a step is a class whose ``test*`` methods run in
alphabetical order (hence the usual ``test01_...``, ``test02_...`` naming).
Decorators attach the lifecycle metadata of a test method:

    class StepA02_Navigation(ScenarioStep):

        @mandatory
        def test01_OpenHome(self):
            ...

        @depends_on("${class}.test01_OpenHome")
        @not_rerunnable
        def test02_CreateProject(self):
            ...
"""

import inspect
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Tuple

from attr import attrs, attrib, evolve

from .models import TestId

if TYPE_CHECKING:
    from .scenario_execution import ScenarioExecution

TEST_MARKS_ATTRIBUTE = '__scenario_test_marks__'
TEST_METHOD_PREFIX = 'test'


@attrs(frozen=True)
class TestMarks:
    """
    Lifecycle metadata of a test method.

    Attributes:
        dependencies: Prerequisite tests (``<class>.<method>`` tokens)
        not_rerunnable: Never rerun the test after a transient failure
        mandatory: A failure of the test stops the scenario
    """
    dependencies: Tuple[str, ...] = attrib(default=(), converter=tuple)
    not_rerunnable: bool = attrib(default=False)
    mandatory: bool = attrib(default=False)


TestMarks.__test__ = False


def get_test_marks(method: Callable) -> TestMarks:
    return getattr(method, TEST_MARKS_ATTRIBUTE, None) or TestMarks()


def _mark(method: Callable, **changes) -> Callable:
    marks = get_test_marks(method)
    if 'dependencies' in changes:
        changes['dependencies'] = marks.dependencies + tuple(changes['dependencies'])
    setattr(method, TEST_MARKS_ATTRIBUTE, evolve(marks, **changes))
    return method


def depends_on(*dependencies: str):
    """Declare prerequisite tests; the test is skipped unless all of them passed."""
    def decorator(method: Callable) -> Callable:
        return _mark(method, dependencies=dependencies)
    return decorator


def not_rerunnable(method: Callable) -> Callable:
    return _mark(method, not_rerunnable=True)


def mandatory(method: Callable) -> Callable:
    return _mark(method, mandatory=True)


class ScenarioStep:
    """
    Base class of scenario steps.

    The package of a step defaults to the module defining it and can be set
    with the ``package`` class attribute; it prefixes the full path of every
    test of the step (``package.Step.test``) used by dependencies and the
    known-issues registry.

    Attributes:
        execution: The scenario execution running the step
    """
    package: Optional[str] = None

    def __init__(self, execution: "ScenarioExecution"):
        self.execution = execution

    @classmethod
    def package_name(cls) -> str:
        return cls.package if cls.package is not None else cls.__module__

    @classmethod
    def test_id(cls, method_name: str) -> TestId:
        return TestId(cls.package_name(), cls.__name__, method_name)

    def test_methods(self) -> List[Tuple[str, Callable]]:
        """Bound test methods of the step, in alphabetical order."""
        methods = []
        for name, _ in inspect.getmembers(type(self), predicate=inspect.isfunction):
            if name.startswith(TEST_METHOD_PREFIX):
                methods.append((name, getattr(self, name)))
        return sorted(methods, key=lambda item: item[0])

    # region scenario context
    @property
    def config(self):
        return self.execution.config

    @property
    def topology(self):
        return self.execution.topology

    @property
    def data(self):
        return self.execution.data

    @property
    def session(self):
        return self.execution.session

    def apply_workaround(self, page, message: str, **kwargs) -> Any:
        """Work around a transient defect of the page, see WorkaroundLedger.apply."""
        return self.execution.workarounds.apply(page, message, **kwargs)
    # endregion
