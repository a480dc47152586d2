from enum import Enum

class ParticipantStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"

class SplitType(str, Enum):
    EQUAL = "equal"
    PERCENTAGE = "percentage"
    CUSTOM = "custom"
