# tests/unit/schedule/test_skills_rankings.py
from services.schedule.model import SkillRecord
from services.schedule.sheets import parse_rankings, parse_skills

SKILL_HEADER = ["Rep", " Tile ", "Roofing", "Solar", "Zip Codes", "Notes"]


def test_skills_between_name_and_zip_column():
    values = [
        SKILL_HEADER,
        ["Jane Doe", "3", "2.5", "n/a", "85001, 85002; 85003", "ignored"],
        ["O'Brien, Jr.", "1", "", "4 (cert)", "", ""],
    ]
    out = parse_skills(values)

    assert out["janedoe"] == SkillRecord(skills={"Tile": 3, "Roofing": 2}, zip_codes=["85001", "85002", "85003"])
    assert out["obrienjr"] == SkillRecord(skills={"Tile": 1, "Solar": 4}, zip_codes=[])


def test_skills_without_zip_column_uses_every_column():
    values = [["Rep", "Tile", "Roofing"], ["Jane Doe", "2", "5"]]
    assert parse_skills(values) == {"janedoe": SkillRecord(skills={"Tile": 2, "Roofing": 5}, zip_codes=[])}


def test_skills_rows_without_name_skipped():
    values = [SKILL_HEADER, ["", "3"], [], ["Sam Lee", "1"]]
    assert list(parse_skills(values)) == ["samlee"]


def test_short_row_has_no_zip_codes():
    values = [SKILL_HEADER, ["Sam Lee", "1"]]
    assert parse_skills(values)["samlee"].zip_codes == []


def test_header_only_skills_sheet_is_empty(caplog):
    with caplog.at_level("WARNING"):
        assert parse_skills([SKILL_HEADER]) == {}
    assert "only a header" in caplog.text
    assert parse_skills([]) == {}


def test_rankings_follow_list_order():
    values = [["Alex Morgan"], ["Jordan Reyes"], ["Casey Nguyen"]]
    assert parse_rankings(values) == {"alexmorgan": 1, "jordanreyes": 2, "caseynguyen": 3}


def test_rankings_duplicates_keep_best_rank():
    values = [["Alex Morgan"], ["alex  morgan "], ["Jordan Reyes"]]
    assert parse_rankings(values) == {"alexmorgan": 1, "jordanreyes": 3}


def test_rankings_skip_header_and_blank_rows():
    values = [["Sales Order"], [], [""], ["Jordan Reyes"]]
    assert parse_rankings(values) == {"jordanreyes": 4}


def test_rankings_empty():
    assert parse_rankings([]) == {}
    assert parse_rankings(None) == {}
