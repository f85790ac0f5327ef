class BodySignalError(Exception):
    """Base class for domain errors raised by the store and the engine."""


class UnknownConditionReference(BodySignalError, LookupError):
    def __init__(self, condition_id: str):
        super().__init__(f"Condition {condition_id} not found")
        self.condition_id = condition_id


class ConditionNotFound(BodySignalError, LookupError):
    def __init__(self, condition_id: str):
        super().__init__(f"Condition {condition_id} not found")
        self.condition_id = condition_id


class OutOfRangeIntensity(BodySignalError, ValueError):
    def __init__(self, intensity):
        super().__init__(f"Intensity must be between 1 and 10, got {intensity!r}")
        self.intensity = intensity
