from taskthread.schemas.task import NewTask, TaskRead
from taskthread.schemas.continuity import (
    NOT_AVAILABLE,
    ProgressMetrics,
    ContinuityReport,
    ContinuityRequest,
    TaskProgressRead,
    ContinuityJobRead,
)
from taskthread.schemas.matching import (
    NewTaskDecision,
    LinkedTaskDecision,
    RelationshipDecision,
    relationship_decision_adapter,
)

__all__ = [
    "NewTask",
    "TaskRead",
    "NOT_AVAILABLE",
    "ProgressMetrics",
    "ContinuityReport",
    "ContinuityRequest",
    "TaskProgressRead",
    "ContinuityJobRead",
    "NewTaskDecision",
    "LinkedTaskDecision",
    "RelationshipDecision",
    "relationship_decision_adapter",
]
