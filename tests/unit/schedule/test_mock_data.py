from services.schedule.mock_data import MOCK_SHEET_NAME, mock_reps, mock_sheet_data
from services.schedule.parse import slugify_name
from services.schedule.sheets import NOT_AVAILABLE


def test_mock_reps_follow_the_slot_catalog(time_slots):
    reps = mock_reps(time_slots)
    slot_ids = [s.id for s in time_slots]

    assert {r.region for r in reps} == {"PHX", "NORTH", "SOUTH"}
    for rep in reps:
        assert rep.is_mock
        assert rep.id.endswith(slugify_name(rep.name))
        assert list(rep.unavailable_slots) == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
        for booked in rep.unavailable_slots.values():
            assert booked == [sid for sid in slot_ids if sid in booked]


def test_fully_booked_day_drops_out_of_summary(time_slots):
    jordan = next(r for r in mock_reps(time_slots) if r.name == "Jordan Reyes")
    assert jordan.unavailable_slots["Tuesday"] == ["ts-1", "ts-2", "ts-3", "ts-4"]
    assert jordan.availability == "Mon, Wed, Thu, Fri"


def test_single_slot_catalog(time_slots):
    # with one slot, any booking fills the whole day
    reps = mock_reps(time_slots[:1])
    jordan = next(r for r in reps if r.name == "Jordan Reyes")
    assert jordan.availability == "Mon, Wed, Thu, Fri"
    assert all(r.availability != NOT_AVAILABLE for r in reps)


def test_mock_sheet_data_name(time_slots):
    assert mock_sheet_data(time_slots).sheet_name == MOCK_SHEET_NAME
