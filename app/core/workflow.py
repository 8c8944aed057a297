from enum import Enum


class CompileStage(str, Enum):
    WALK = "WALK"
    CLASSIFY = "CLASSIFY"
    RESOLVE_ENTITY = "RESOLVE_ENTITY"
    RESOLVE_SCHEMA = "RESOLVE_SCHEMA"
    EXTRACT_FIELDS = "EXTRACT_FIELDS"
    BUILD_VIEWS = "BUILD_VIEWS"
