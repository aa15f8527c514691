"""Domain-Oriented Observability for the membership application layer.

Probes for application service operations following Domain-Oriented
Observability patterns.
"""

from membership.application.observability.group_service_probe import (
    DefaultGroupServiceProbe,
    GroupServiceProbe,
)
from membership.application.observability.reconciliation_probe import (
    DefaultReconciliationProbe,
    ReconciliationProbe,
)
from membership.application.observability.relation_service_probe import (
    DefaultRelationServiceProbe,
    RelationServiceProbe,
)
from membership.application.observability.user_service_probe import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)

__all__ = [
    "GroupServiceProbe",
    "DefaultGroupServiceProbe",
    "RelationServiceProbe",
    "DefaultRelationServiceProbe",
    "UserServiceProbe",
    "DefaultUserServiceProbe",
    "ReconciliationProbe",
    "DefaultReconciliationProbe",
]
