# src/ADMS/exceptions.py
class ADMSError(Exception):
    """Base class for domain errors raised by the service layer."""


class NotFoundError(ADMSError):
    def __init__(self, entity: str, key: str):
        super().__init__(f"{entity} not found: {key}")
        self.entity = entity
        self.key = key


class ConflictError(ADMSError):
    pass
