import json

import pytest

from ozeki.reading.scoring import DOMAIN_KEYS, ReadingDomainScores


def uniform(value: float) -> ReadingDomainScores:
    """Score set whose six domains (and so its composite) all equal `value`."""
    return ReadingDomainScores(**{key: value for key in DOMAIN_KEYS})


@pytest.fixture
def make_scores():
    return uniform


def portal_record(child_id, cycle, value, **overrides):
    """Assessment row as exported by the portal, every domain set to `value`."""
    record = {
        "childId": child_id,
        "childName": f"Learner {child_id}",
        "assessmentType": cycle,
        "letterIdentificationScore": value,
        "soundIdentificationScore": value,
        "decodableWordsScore": value,
        "madeUpWordsScore": value,
        "storyReadingScore": value,
        "readingComprehensionScore": value,
    }
    record.update(overrides)
    return record


@pytest.fixture
def make_record():
    return portal_record


@pytest.fixture
def records_file(tmp_path):
    """Write records to a JSON export and return its path."""
    def _write(records, name="assessments.json", wrap=False):
        path = tmp_path / name
        payload = {"records": records} if wrap else records
        path.write_text(json.dumps(payload), encoding="utf-8")
        return str(path)
    return _write
