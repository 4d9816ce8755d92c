"""
Engine error types.

ValidationError: bad caller input (missing ids, unknown event type or action); no state changed.
NotFoundError: a referenced entity does not exist.
EngineFailure: unexpected storage failure while ranking; callers decide how to degrade.
"""


class RankingError(Exception):
    """Base class for ranking engine errors."""


class ValidationError(RankingError, ValueError):
    pass


class NotFoundError(RankingError, LookupError):
    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class EngineFailure(RankingError):
    pass
