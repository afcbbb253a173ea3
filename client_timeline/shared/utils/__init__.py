from client_timeline.shared.utils.generators import (TEMP_ID_PREFIX, generate_cuid,
                                                     generate_temp_id, is_temp_id)

__all__ = [
    "TEMP_ID_PREFIX",
    "generate_cuid",
    "generate_temp_id",
    "is_temp_id",
]
