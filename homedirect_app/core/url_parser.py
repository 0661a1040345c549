import logging
from typing import List

logger = logging.getLogger(__name__)


class URLParser:
    def parse_url_list(self, raw_value: str, name: str) -> List[str]:
        items = [v.strip().rstrip("/") for v in (raw_value or "").split(",") if v.strip()]

        origins = [v for v in items if v.startswith(("http://", "https://"))]
        rejected = set(items) - set(origins)
        if rejected:
            logger.warning("Ignoring non-http entries in %s: %s", name, sorted(rejected))

        return origins


parser = URLParser()
