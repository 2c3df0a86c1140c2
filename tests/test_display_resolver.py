from gridpoint.domain.geometry.display_resolver import resolve_target_display
from gridpoint.domain.models.click_config import DisplayPolicy
from gridpoint.domain.models.geometry import Display, Rect


def make_displays(*sizes):
    displays = []
    x = 0
    for position, (width, height) in enumerate(sizes):
        displays.append(Display(id=position, x=x, y=0, width=width, height=height))
        x += width
    return displays


def test_largest_display_is_selected():
    displays = make_displays((800, 600), (1920, 1080))
    result = resolve_target_display(displays)
    assert result.is_success
    assert result.value is displays[1]


def test_tie_keeps_first_enumerated_display():
    displays = make_displays((1920, 1080), (1080, 1920), (1280, 720))
    assert resolve_target_display(displays).value is displays[0]


def test_single_display():
    displays = make_displays((1366, 768))
    assert resolve_target_display(displays, DisplayPolicy.LARGEST).value is displays[0]


def test_no_displays_fails():
    result = resolve_target_display([])
    assert result.is_failure
    assert result.error.code == "NoDisplays"


def test_index_policy_picks_requested_display():
    displays = make_displays((800, 600), (1920, 1080), (1280, 1024))
    assert resolve_target_display(displays, DisplayPolicy.INDEX, 2).value is displays[2]
    assert resolve_target_display(displays, DisplayPolicy.INDEX, 0).value is displays[0]


def test_index_policy_out_of_range():
    displays = make_displays((800, 600))
    for index in (1, -1):
        result = resolve_target_display(displays, DisplayPolicy.INDEX, index)
        assert result.is_failure
        assert result.error.code == "IndexOutOfRange"


def test_display_usable_rect_prefers_work_area():
    work_area = Rect(0, 32, 1920, 1048)
    display = Display(id=0, x=0, y=0, width=1920, height=1080, work_area=work_area)
    assert display.usable_rect == work_area
    assert Display(id=0, x=0, y=0, width=800, height=600).usable_rect == Rect(0, 0, 800, 600)


def test_display_describe_is_one_based():
    display = Display(id=1, x=1920, y=0, width=2560, height=1440, name="DP-2")
    assert display.describe() == "Display 2 DP-2: 2560x1440 at (1920, 0)"
