"""
Base model configuration shared by the SRTM pydantic models.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    """Timezone-aware current time used for entity timestamps."""
    return datetime.now(timezone.utc)


class SrtmBaseModel(BaseModel):
    """
    Common configuration for SRTM models.

    Fields are exposed under camelCase aliases (the format of SRTM project,
    workflow and catalog backup files) and can also be populated by their
    Python names. Enum fields store their string values.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )
