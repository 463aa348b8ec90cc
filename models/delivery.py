from models.base import ApiModel

class AvailabilityUpdate(ApiModel):
    is_available: bool

class AvailabilityOut(ApiModel):
    message: str
    is_available: bool
