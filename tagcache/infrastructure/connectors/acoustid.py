"""AcoustID lookup response adapter.

Converts the JSON returned by the AcoustID `lookup` endpoint (as produced by
`acoustid.lookup(..., meta="recordingids")`) into cacheable candidates.
"""

from collections.abc import Mapping
from typing import Any

from tagcache.config import get_logger
from tagcache.domain.entities import RecordingIdScore

logger = get_logger(__name__).bind(service="acoustid")


def candidates_from_acoustid(response: Mapping[str, Any] | None) -> list[RecordingIdScore]:
    """Flatten an AcoustID lookup response into recording candidates.

    Each recording inherits the score of the result it belongs to. Results
    without recordings are skipped.

    Args:
        response: Parsed AcoustID JSON, e.g.
            ``{"status": "ok", "results": [{"score": 0.9, "recordings": [{"id": ...}]}]}``

    Returns:
        Candidates in response order; empty when nothing matched.
    """
    if not response:
        return []

    if response.get("status", "ok") != "ok":
        logger.warning(f"AcoustID response has status {response.get('status')!r}")
        return []

    candidates: list[RecordingIdScore] = []
    for result in response.get("results") or []:
        score = result.get("score")
        if score is None:
            continue
        for recording in result.get("recordings") or []:
            recording_id = recording.get("id")
            if recording_id:
                candidates.append(
                    RecordingIdScore(recording_id=str(recording_id), score=score)
                )

    logger.debug(f"Extracted {len(candidates)} candidates from AcoustID response")
    return candidates
