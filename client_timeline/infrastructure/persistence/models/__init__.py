from client_timeline.infrastructure.persistence.models.event import Event
from client_timeline.infrastructure.persistence.models.line import Line
# Mixins for model composition
from client_timeline.infrastructure.persistence.models.mixins import (CreatedAtMixin, CuidMixin,
                                                                    UpdatedAtMixin)

__all__ = [
    # Models
    "Line",
    "Event",
    # Mixins
    "CuidMixin",
    "CreatedAtMixin",
    "UpdatedAtMixin",
]
