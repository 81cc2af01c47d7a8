"""Import classes used to build, describe, and record motion goals."""

from .goal_builder import GoalBuilder as GoalBuilder
from .goals import ControlState as ControlState
from .goals import MotionCommand as MotionCommand
from .goals import MotionFeedback as MotionFeedback
from .goals import MotionGoal as MotionGoal
from .goals import MotionResult as MotionResult
from .goals import SwitchGoal as SwitchGoal
from .goals import SwitchResult as SwitchResult
from .outcomes import Outcome as Outcome
from .outcomes import OutcomeClassifier as OutcomeClassifier
from .storage import YamlSegmentStorage as YamlSegmentStorage
