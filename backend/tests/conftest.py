import os
import tempfile
from pathlib import Path

_TEST_DB = Path(tempfile.gettempdir()) / f"careermatch-test-{os.getpid()}.db"
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DB}"

import pytest  # noqa: E402

from careermatch import models  # noqa: E402
from careermatch.config import settings  # noqa: E402
from careermatch.db import Base, SessionLocal, engine  # noqa: E402


MAPPINGS = [
    # code, title, (competency, score) x3
    ("15-1252.00", "Software Developers", [("Technology", 90), ("Critical Thinking", 70), ("Teamwork", 50)]),
    ("11-1021.00", "General and Operations Managers", [("Leadership", 95), ("Communication", 80), ("Teamwork", 60)]),
    ("13-2011.00", "Accountants and Auditors", [("Critical Thinking", 85), ("Professionalism", 75), ("Technology", 40)]),
    (
        "21-1012.00",
        "Educational, Guidance, and Career Counselors and Advisors",
        [("Communication", 88), ("Career & Self-Development", 82), ("Equity & Inclusion", 70)],
    ),
]

UNMAPPED_OCCUPATION = ("29-1141.00", "Registered Nurses")


@pytest.fixture(scope="session", autouse=True)
def _remove_test_database():
    yield
    engine.dispose()
    _TEST_DB.unlink(missing_ok=True)


@pytest.fixture(autouse=True)
def _fast_store_retries(monkeypatch):
    monkeypatch.setattr(settings, "db_max_retries", 0)
    monkeypatch.setattr(settings, "db_retry_delay_seconds", 0.0)
    monkeypatch.setattr(settings, "match_limit_mode", "ranked")
    monkeypatch.setattr(settings, "default_match_limit", None)
    monkeypatch.setattr(settings, "detail_top_n", 10)


@pytest.fixture
def empty_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield SessionLocal
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seeded_db(empty_db):
    with empty_db() as db:
        _seed(db)
        db.commit()
    return empty_db


@pytest.fixture
def db_session(seeded_db):
    with seeded_db() as db:
        yield db


def _seed(db) -> None:
    for code, title, ranked in MAPPINGS:
        db.add(models.OccupationData(onetsoc_code=code, title=title, description=f"{title} description"))
    code, title = UNMAPPED_OCCUPATION
    db.add(models.OccupationData(onetsoc_code=code, title=title, description=None))
    db.flush()

    for code, _title, ranked in MAPPINGS:
        (c1, s1), (c2, s2), (c3, s3) = ranked
        db.add(
            models.JobNaceMapping(
                onetsoc_code=code,
                competency_1=c1,
                competency_1_score=s1,
                competency_2=c2,
                competency_2_score=s2,
                competency_3=c3,
                competency_3_score=s3,
            )
        )

    developer = "15-1252.00"
    for competency, score in [
        ("Technology", 90.0),
        ("Critical Thinking", 70.0),
        ("Teamwork", 50.0),
        ("Communication", 45.0),
        ("Leadership", 20.0),
    ]:
        db.add(models.JobCompetencyScore(onetsoc_code=developer, competency=competency, score=score))

    db.add(
        models.JobZoneReference(
            job_zone=4,
            name="Job Zone Four: Considerable Preparation Needed",
            experience="A minimum of two to four years of work-related skill, knowledge, or experience is needed.",
            education="Most of these occupations require a four-year bachelor's degree.",
            job_training="Employees may need one or more years of training.",
            examples="Software developers, accountants, and counselors.",
            svp_range="(7.0 to < 8.0)",
        )
    )
    db.flush()
    db.add(models.JobZone(onetsoc_code=developer, job_zone=4, domain_source="Analyst"))

    for index in range(12):
        element_id = f"2.B.3.{index}"
        db.add(models.ContentModelReference(element_id=element_id, element_name=f"Skill {index}", description=None))
    for element_id, name in [("2.C.3.a", "Computers and Electronics"), ("2.C.4.a", "Mathematics")]:
        db.add(models.ContentModelReference(element_id=element_id, element_name=name, description=f"{name} knowledge"))
    db.add(
        models.ContentModelReference(
            element_id="2.D.1", element_name="Required Level of Education", description="Education level"
        )
    )
    db.flush()

    for index in range(12):
        db.add(
            models.Skill(onetsoc_code=developer, element_id=f"2.B.3.{index}", scale_id="IM", data_value=float(index))
        )
    db.add(models.Knowledge(onetsoc_code=developer, element_id="2.C.3.a", scale_id="IM", data_value=4.6))
    db.add(models.Knowledge(onetsoc_code=developer, element_id="2.C.4.a", scale_id="IM", data_value=3.9))

    db.add(models.EteCategory(element_id="2.D.1", scale_id="RL", category=6, category_description="Bachelor's Degree"))
    db.add(models.EteCategory(element_id="2.D.1", scale_id="RL", category=8, category_description="Master's Degree"))
    db.flush()
    db.add(
        models.EducationTrainingExperience(
            onetsoc_code=developer, element_id="2.D.1", scale_id="RL", category=6, data_value=64.5
        )
    )
    db.add(
        models.EducationTrainingExperience(
            onetsoc_code=developer, element_id="2.D.1", scale_id="RL", category=8, data_value=12.1
        )
    )
