from blogcore.utils.helpers import (
    file_logger,
    get_summary,
    host,
    slugify,
    time_taken,
    today_str,
    utc_now,
)

__all__ = ["file_logger", "get_summary", "host", "slugify", "time_taken", "today_str", "utc_now"]
